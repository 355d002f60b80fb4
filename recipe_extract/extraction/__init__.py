"""Recipe extraction package: prompt, engine call, normalization, pipeline."""

from recipe_extract.extraction.client import ExtractionClient, LLMExtractionClient
from recipe_extract.extraction.models import (
    ExtractionPrompt,
    IngredientItem,
    IngredientSection,
    InstructionItem,
    Recipe,
)
from recipe_extract.extraction.normalizer import normalize, parse_recipe
from recipe_extract.extraction.pipeline import extract_recipe, import_recipe_from_url, prepare_content
from recipe_extract.extraction.prompts import build_prompt

__all__ = [
    "ExtractionClient",
    "LLMExtractionClient",
    "ExtractionPrompt",
    "IngredientItem",
    "IngredientSection",
    "InstructionItem",
    "Recipe",
    "build_prompt",
    "normalize",
    "parse_recipe",
    "extract_recipe",
    "import_recipe_from_url",
    "prepare_content",
]
