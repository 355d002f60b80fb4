"""Recipe extraction pipeline.

``import_recipe_from_url`` and ``extract_recipe`` run the stages strictly in
sequence, each consuming only the previous stage's output:

    fetch → locate → sanitize → build prompt → extract → normalize

Every failure collapses to ``None``; nothing is written anywhere, so an
abandoned run leaves no trace.
"""

from __future__ import annotations

import logging
from typing import Sequence

from recipe_extract.extraction.client import ExtractionClient, LLMExtractionClient
from recipe_extract.extraction.models import Recipe
from recipe_extract.extraction.normalizer import normalize
from recipe_extract.extraction.prompts import build_prompt
from recipe_extract.scraper.fetcher import fetch_url
from recipe_extract.scraper.locator import locate
from recipe_extract.scraper.sanitizer import sanitize

logger = logging.getLogger(__name__)


def prepare_content(html: str) -> str:
    """Locate the recipe block in *html* and sanitize it."""
    candidate = locate(html)
    fragment = sanitize(candidate.html)
    logger.info(
        "Prepared %d characters from %d (rule %s)",
        len(fragment), len(html), candidate.source_selector,
    )
    return fragment


def extract_recipe(
    content: str,
    source_url: str | None = None,
    tag_vocabulary: Sequence[str] | None = None,
    client: ExtractionClient | None = None,
) -> Recipe | None:
    """Extract a recipe from raw HTML or pasted text.

    Args:
        content: Page markup or plain text believed to hold a recipe.
        source_url: Recorded on the recipe when given.
        tag_vocabulary: Optional allow-list offered to the engine for ``tags``.
        client: Completion-engine client; defaults to
            :class:`LLMExtractionClient`.

    Returns:
        The normalized :class:`Recipe`, or ``None`` when no recipe could be
        extracted.
    """
    if not content or not content.strip():
        logger.warning("Nothing to extract: empty content")
        return None

    # ------------------------------------------------------------------
    # 1 & 2: Locate and sanitize
    # ------------------------------------------------------------------
    fragment = prepare_content(content)

    # ------------------------------------------------------------------
    # 3: Build the prompt
    # ------------------------------------------------------------------
    prompt = build_prompt(fragment, tag_vocabulary)

    # ------------------------------------------------------------------
    # 4: Call the completion engine
    # ------------------------------------------------------------------
    client = client or LLMExtractionClient()
    raw_text = client.extract(prompt)
    if raw_text is None:
        logger.error("Completion engine returned no content")
        return None

    # ------------------------------------------------------------------
    # 5: Validate and normalise
    # ------------------------------------------------------------------
    return normalize(raw_text, source_url)


def import_recipe_from_url(
    url: str,
    tag_vocabulary: Sequence[str] | None = None,
    client: ExtractionClient | None = None,
) -> Recipe | None:
    """Fetch *url* and extract its recipe, or return ``None``."""
    raw = fetch_url(url)
    if raw is None:
        logger.warning("Could not fetch usable content from %s", url)
        return None
    return extract_recipe(raw.html, source_url=raw.url, tag_vocabulary=tag_vocabulary, client=client)
