"""Recipe schema returned by the extraction pipeline.

Attributes are snake_case in Python and camelCase on the wire
(``sectionTitle``, ``cookingTime``, ``imageUrl`` ...), matching the JSON the
completion engine is asked to produce.

Ingredient nodes form a recursive tagged union: a node carrying
``sectionTitle`` is an :class:`IngredientSection`, anything else is an
:class:`IngredientItem`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IngredientItem(_WireModel):
    """A single ingredient line, e.g. ``"1 cup flour (sifted)"``."""

    text: str = Field(min_length=1)
    optional: Optional[bool] = None


class IngredientSection(_WireModel):
    """A titled group of ingredients, e.g. ``"For the frosting"``."""

    section_title: str = Field(min_length=1)
    ingredients: list[IngredientNode] = Field(min_length=1)


def _ingredient_kind(value: Any) -> Literal["section", "item"]:
    if isinstance(value, dict):
        return "section" if "sectionTitle" in value or "section_title" in value else "item"
    return "section" if isinstance(value, IngredientSection) else "item"


IngredientNode = Annotated[
    Union[
        Annotated[IngredientItem, Tag("item")],
        Annotated[IngredientSection, Tag("section")],
    ],
    Discriminator(_ingredient_kind),
]

IngredientSection.model_rebuild()


class InstructionItem(_WireModel):
    """One preparation step."""

    text: str = Field(min_length=1)


class Recipe(_WireModel):
    """Canonical recipe produced by a successful extraction."""

    title: str = Field(min_length=1)
    description: str = ""
    ingredients: list[IngredientNode] = Field(min_length=1)
    instructions: list[InstructionItem] = Field(min_length=1)
    cooking_time: Optional[int] = Field(default=None, gt=0)
    servings: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None
    tags: Optional[list[Any]] = None
    source_url: Optional[str] = None
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Serialise to camelCase JSON-ready data, omitting absent optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ExtractionPrompt:
    """The fixed system/user message pair sent to the completion engine."""

    system_instruction: str
    user_prompt: str
