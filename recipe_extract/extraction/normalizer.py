"""Response normalization: engine JSON text → :class:`Recipe`.

The engine is not trusted to follow the schema.  Its answer is coerced
top-down into the canonical shape:

* a non-array ``ingredients`` / ``instructions`` value is wrapped in a list;
* bare strings become ``{"text": ...}``;
* a section without any usable children becomes a leaf titled by its
  ``sectionTitle``; well-formed sections are kept and normalised recursively;
* ``cookingTime`` / ``servings`` given as strings are parsed to integers and
  dropped when unparsable.

``parse_recipe`` raises an ``ExtractionError`` subclass describing why
a response is unusable; ``normalize`` logs that reason and returns ``None``.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from recipe_extract.config import settings
from recipe_extract.extraction.exceptions import (
    MalformedResponseError,
    RecipeNotFoundError,
    SchemaViolationError,
)
from recipe_extract.extraction.models import (
    IngredientItem,
    IngredientSection,
    InstructionItem,
    Recipe,
)

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*(\d+)")


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else [value]


def _text_of(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _coerce_ingredient(value: Any) -> IngredientItem | IngredientSection | None:
    if isinstance(value, dict):
        if "sectionTitle" in value:
            title = _text_of(value.get("sectionTitle"))
            children = _coerce_ingredients(value.get("ingredients"))
            if title and children:
                return IngredientSection(section_title=title, ingredients=children)
            # A section with nothing under it stands in for a single ingredient.
            return IngredientItem(text=title) if title else None
        text = _text_of(value.get("text"))
        if not text:
            return None
        optional = value.get("optional")
        return IngredientItem(text=text, optional=optional if isinstance(optional, bool) else None)
    text = _text_of(value)
    return IngredientItem(text=text) if text else None


def _coerce_ingredients(value: Any) -> list[IngredientItem | IngredientSection]:
    if value is None:
        return []
    nodes = (_coerce_ingredient(item) for item in _as_list(value))
    return [node for node in nodes if node is not None]


def _coerce_instructions(value: Any) -> list[InstructionItem]:
    if value is None:
        return []
    steps = []
    for item in _as_list(value):
        text = _text_of(item.get("text")) if isinstance(item, dict) else _text_of(item)
        if text:
            steps.append(InstructionItem(text=text))
    return steps


def _coerce_positive_int(value: Any) -> int | None:
    """Parse *value* like ``parseInt``; non-positive or unparsable → ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return None
        number = int(match.group(1))
    else:
        return None
    return number if number > 0 else None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_recipe(raw_text: str, source_url: str | None = None) -> Recipe:
    """Turn the engine's *raw_text* into a :class:`Recipe`.

    Raises:
        MalformedResponseError: *raw_text* is not a JSON object.
        RecipeNotFoundError: the object carries an ``error`` key.
        SchemaViolationError: ``title``, ``ingredients`` or ``instructions``
            is missing, or empty after coercion.
    """
    try:
        data = json.loads(raw_text)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")

    if "error" in data:
        raise RecipeNotFoundError(str(data["error"]))

    missing = [key for key in ("title", "ingredients", "instructions") if not data.get(key)]
    if missing:
        raise SchemaViolationError(f"Missing required fields: {', '.join(missing)}")

    title = _text_of(data["title"])
    ingredients = _coerce_ingredients(data["ingredients"])
    instructions = _coerce_instructions(data["instructions"])
    if not title or not ingredients or not instructions:
        raise SchemaViolationError("Required fields are empty after coercion")

    tags = data.get("tags")
    try:
        return Recipe(
            title=title,
            description=_text_of(data.get("description")),
            ingredients=ingredients,
            instructions=instructions,
            cooking_time=_coerce_positive_int(data.get("cookingTime")),
            servings=_coerce_positive_int(data.get("servings")),
            image_url=_text_of(data.get("imageUrl")) or settings.default_image_url,
            tags=tags if isinstance(tags, list) else None,
            source_url=source_url or None,
            created_at=datetime.now(timezone.utc),
        )
    except ValidationError as exc:
        raise SchemaViolationError(str(exc)) from exc


def normalize(raw_text: str, source_url: str | None = None) -> Recipe | None:
    """Return the :class:`Recipe` in *raw_text*, or ``None`` if there is none.

    Each failure category is logged with its own message so callers can
    tell an explicit "no recipe here" from a broken response.
    """
    try:
        recipe = parse_recipe(raw_text, source_url)
    except RecipeNotFoundError as exc:
        logger.info("Engine reported no recipe: %s", exc)
        return None
    except MalformedResponseError as exc:
        logger.warning("Malformed extraction response: %s", exc)
        return None
    except SchemaViolationError as exc:
        logger.warning("Extraction response violates the recipe schema: %s", exc)
        return None

    logger.info(
        "Normalized recipe %r (%d ingredients, %d steps)",
        recipe.title, len(recipe.ingredients), len(recipe.instructions),
    )
    return recipe
