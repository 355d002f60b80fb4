"""Recipe import endpoints: URL and pasted content.

Routes
------
POST /recipes/import        Body: {"url": "...", "tags": [...]}      → import_recipe_from_url
POST /recipes/import-text   Body: {"content": "...", "tags": [...]}  → extract_recipe

Both return the extracted recipe without storing it; persistence and tag
mapping belong to the caller.  Handlers are plain ``def`` so FastAPI runs
each blocking pipeline in its worker thread pool.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from recipe_extract.extraction.client import ExtractionClient, LLMExtractionClient
from recipe_extract.extraction.pipeline import extract_recipe, import_recipe_from_url

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class UrlImportRequest(BaseModel):
    url: str = Field(min_length=1)
    tags: Optional[list[str]] = None


class TextImportRequest(BaseModel):
    content: str = Field(min_length=1)
    tags: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_extraction_client() -> ExtractionClient:
    return LLMExtractionClient()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/import", status_code=201)
def import_from_url(
    body: UrlImportRequest,
    client: ExtractionClient = Depends(get_extraction_client),
) -> dict[str, Any]:
    """Fetch a page and return the recipe extracted from it."""
    recipe = import_recipe_from_url(body.url, tag_vocabulary=body.tags, client=client)
    if recipe is None:
        raise HTTPException(status_code=400, detail="Failed to extract recipe data from the URL")
    return recipe.to_dict()


@router.post("/import-text", status_code=201)
def import_from_text(
    body: TextImportRequest,
    client: ExtractionClient = Depends(get_extraction_client),
) -> dict[str, Any]:
    """Return the recipe extracted from pasted HTML or text."""
    recipe = extract_recipe(body.content, tag_vocabulary=body.tags, client=client)
    if recipe is None:
        raise HTTPException(
            status_code=400,
            detail="Failed to extract recipe data from the provided content",
        )
    return recipe.to_dict()
