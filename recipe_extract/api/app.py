"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /recipes   recipe import from a URL or from pasted content
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipe_extract.config import configure_logging

from recipe_extract.api.routers import recipes as recipes_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()

    app = FastAPI(
        title="Recipe Extract API",
        description=(
            "Extracts structured recipes (title, sectioned ingredients, "
            "ordered instructions and metadata) from web pages or pasted "
            "content using a completion engine."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(recipes_router.router, prefix="/recipes", tags=["recipes"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn recipe_extract.api.app:app --reload
app = create_app()
