"""Content location: pick the sub-tree of a page most likely to hold the recipe.

The locator is a prioritised chain of rules.  Each rule takes the parsed
document and returns a :class:`ContentCandidate` or ``None``; the first rule
that yields a non-empty candidate wins:

``article``   the ``<article>`` with the longest rendered text, minus any
              navigation, dialogs and social/share/comment blocks inside it.
``selector``  after noise removal, the first recipe-schema or generic
              content selector whose markup exceeds ``MIN_CONTENT_LENGTH``.
``density``   after noise removal, the ``div``/``section``/``article`` with
              the highest text-to-markup ratio (boosted for recipe keywords).
``body``      the cleaned document body, or the raw input without one.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from recipe_extract.scraper.models import ContentCandidate

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 200
KEYWORD_BOOST = 1.5

_NOISE_TAGS = [
    "script", "style", "noscript", "iframe", "meta", "link",
    "nav", "footer", "header", "svg", "button", "dialog",
]

_NOISE_MARKERS = (
    "social", "share", "comment", "widget", "sidebar", "banner", "ad-",
    "navigation", "menu", "popup", "modal", "newsletter", "related",
    "recommended", "promo", "subscribe",
)

# Never dropped by the class/id denylist, whatever their attributes say.
_PROTECTED_TAGS = {"html", "body"}

_CONTENT_SELECTORS = [
    # Recipe schema markers
    '[itemtype*="Recipe"]',
    '[class*="recipe-container"]',
    '[class*="recipe-content"]',
    '[class*="recipe-instructions"]',
    '[id*="recipe-container"]',
    '[id*="recipe-content"]',
    '[itemprop="recipeInstructions"]',
    '[itemprop="recipe"]',
    # Generic content containers
    "main",
    ".main-content",
    "#main-content",
    ".main-article",
    ".content-area",
    ".post-content",
    ".entry-content",
    ".content",
    "#content",
]

# Stripped from inside the chosen <article>; its length is scored before cleanup.
_ARTICLE_NOISE = (
    "script, style, noscript, iframe, meta, link, nav, footer, header, svg, button, "
    '[role="dialog"], [class*="social"], [class*="share"], [class*="comment"]'
)

_RECIPE_KEYWORDS = re.compile(
    r"ingredients|instructions|preparation|directions|recipe|method|cook|bake|serve",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _text_length(el: Tag) -> int:
    return len(el.get_text().strip())


def _is_noise(el: Tag) -> bool:
    """Return ``True`` if the class or id of *el* matches the denylist."""
    if el.name in _PROTECTED_TAGS:
        return False
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    haystack = " ".join(classes) + " " + (el.get("id") or "")
    haystack = haystack.lower()
    return any(marker in haystack for marker in _NOISE_MARKERS)


def _strip_noise(soup: BeautifulSoup) -> None:
    """Remove non-content elements from *soup* in place.

    Safe to call repeatedly: a second call finds nothing left to remove.
    """
    for el in soup.find_all(_NOISE_TAGS):
        if not el.decomposed:
            el.decompose()
    for el in soup.find_all(True):
        if el.decomposed:
            continue
        if el.get("role") == "dialog" or _is_noise(el):
            el.decompose()


def _inner_markup(el: Tag) -> str:
    """Inner markup of *el* with any leftover ``<aside>`` blocks removed."""
    for aside in el.find_all("aside"):
        aside.decompose()
    return el.decode_contents().strip()


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _article_rule(soup: BeautifulSoup) -> ContentCandidate | None:
    best: Tag | None = None
    best_length = -1
    for article in soup.find_all("article"):
        length = _text_length(article)
        if length > best_length:
            best, best_length = article, length
    if best is None:
        return None
    for el in best.select(_ARTICLE_NOISE):
        if not el.decomposed:
            el.decompose()
    return ContentCandidate(
        html=best.decode_contents().strip(),
        score=float(best_length),
        source_selector="article",
    )


def _selector_rule(soup: BeautifulSoup) -> ContentCandidate | None:
    _strip_noise(soup)
    for selector in _CONTENT_SELECTORS:
        el = soup.select_one(selector)
        if el is None:
            continue
        if len(el.decode_contents().strip()) > MIN_CONTENT_LENGTH:
            return ContentCandidate(
                html=_inner_markup(el),
                score=float(_text_length(el)),
                source_selector=selector,
            )
    return None


def _density_rule(soup: BeautifulSoup) -> ContentCandidate | None:
    _strip_noise(soup)
    best: Tag | None = None
    best_density = 0.0
    for el in soup.find_all(["div", "section", "article"]):
        text = el.get_text().strip()
        if len(text) < MIN_CONTENT_LENGTH:
            continue
        density = len(text) / len(el.decode_contents())
        if _RECIPE_KEYWORDS.search(text):
            density *= KEYWORD_BOOST
        if density > best_density:
            best, best_density = el, density
    if best is None:
        return None
    return ContentCandidate(
        html=_inner_markup(best),
        score=best_density,
        source_selector=f"density:{best.name}",
    )


def _body_rule(soup: BeautifulSoup, html: str) -> ContentCandidate:
    _strip_noise(soup)
    body = soup.body
    markup = body.decode_contents().strip() if body is not None else html.strip()
    return ContentCandidate(html=markup, score=0.0, source_selector="body")


Rule = Callable[[BeautifulSoup], Optional[ContentCandidate]]

_RULES: list[tuple[str, Rule]] = [
    ("article", _article_rule),
    ("selector", _selector_rule),
    ("density", _density_rule),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def locate(html: str) -> ContentCandidate:
    """Return the content candidate most likely to hold the recipe in *html*.

    Deterministic: identical input always yields an identical candidate.
    Never fails; the last resort is the document body (or *html* itself).
    """
    soup = BeautifulSoup(html or "", "html.parser")

    for name, rule in _RULES:
        candidate = rule(soup)
        if candidate is not None and candidate.html:
            logger.debug(
                "Located content with %s rule (%s, score %.3f)",
                name, candidate.source_selector, candidate.score,
            )
            return candidate

    candidate = _body_rule(soup, html or "")
    if not BeautifulSoup(candidate.html, "html.parser").get_text().strip():
        logger.warning("No extractable content found; falling back to an empty body")
    else:
        logger.debug("No content container found; using document body")
    return candidate
