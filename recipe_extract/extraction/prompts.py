"""Prompt construction for the recipe extraction call.

``build_prompt`` embeds a sanitized fragment (truncated from the end when it
is too long) and an optional tag vocabulary into a fixed instruction that
asks the engine for a single JSON object.
"""

from __future__ import annotations

from typing import Sequence

from recipe_extract.config import settings
from recipe_extract.extraction.models import ExtractionPrompt

TRUNCATION_MARKER = "\n[CONTENT TRUNCATED FOR LENGTH]\n"

NO_RECIPE_ERROR = "No recipe found"

SYSTEM_INSTRUCTION = (
    "You are a specialized recipe extraction assistant. Your job is to extract "
    "complete recipe information from web page content and return it as a "
    "single structured JSON object."
)

_SCHEMA = """\
Return a JSON object with these fields:
- title: string (required). The recipe title.
- description: string (required). A short description of the dish.
- ingredients: array (required). Each element is either
    an ingredient: {"text": string, "optional": boolean (only when the recipe says so)}
    or a section: {"sectionTitle": string, "ingredients": [ ...ingredients or sections... ]}
  Use sections only when the recipe groups its ingredients ("For the cake", "For the frosting").
- instructions: array (required). Each element is {"text": string}, one step per element.
- cookingTime: number (optional). Total time in minutes. Omit the field when unknown.
- servings: number (optional). Number of servings. Omit the field when unknown.
- imageUrl: string (optional). URL of the main recipe image, usually the first image in the content. Use "" when there is none."""

_TAGS_FIELD = """\
- tags: array of strings (optional). Only choose from this fixed list: {tags}.
  Include only tags that are clearly relevant; never invent new ones."""

_RULES = """\
Rules:
1. Respond with the JSON object only.
2. Write each ingredient as "[amount] [ingredient] (note)". Compress preparation notes to as few words as possible, e.g. "1 cup butter (softened)". Do not add substitutes.
3. When both imperial and metric amounts are given, keep the imperial ones.
4. Keep the original ingredient names and steps; do not invent content.
5. If the content does not contain a recipe, respond with {{"error": "{error}"}} and nothing else."""


def truncate_content(content: str, limit: int | None = None) -> str:
    """Keep the first *limit* characters of *content* plus a truncation marker.

    Content at or under the limit is returned unchanged.  The head of a page
    (title, intro, ingredients) is kept; trailing comment sections go first.
    """
    limit = settings.prompt_content_limit if limit is None else limit
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def build_prompt(
    fragment: str,
    tag_vocabulary: Sequence[str] | None = None,
) -> ExtractionPrompt:
    """Return the system/user message pair for extracting a recipe from *fragment*.

    Args:
        fragment: Sanitized page content (or pasted text).
        tag_vocabulary: Optional allow-list for the ``tags`` field.  When
            empty or ``None`` the field is not requested at all.
    """
    content = truncate_content(fragment)

    fields = _SCHEMA
    tags = [t for t in (tag_vocabulary or []) if t and t.strip()]
    if tags:
        fields += "\n" + _TAGS_FIELD.format(tags=", ".join(tags))

    user_prompt = (
        "Extract the complete recipe from the content below. The content may be "
        "stripped-down HTML: only links, lists, list items, images and line "
        "breaks were kept, everything else was flattened to text.\n\n"
        f"{fields}\n\n"
        f"{_RULES.format(error=NO_RECIPE_ERROR)}\n\n"
        "Content:\n"
        f"{content}"
    )
    return ExtractionPrompt(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)
