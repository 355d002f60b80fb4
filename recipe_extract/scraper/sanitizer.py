"""Sanitizer: reduce located markup to a minimal, token-cheap dialect.

The output only ever contains the tags in :data:`PRESERVED_TAGS`:

* ``<a>`` keeps ``href``;
* ``<img>`` keeps ``src`` (falling back to ``data-src``) and ``alt``, and is
  dropped when it has no source at all;
* ``<ul>``, ``<ol>``, ``<li>`` and ``<br>`` keep no attributes.

Every other element is replaced by its content; paragraph-like blocks
(``p``, ``h1``-``h6``, ``div``) leave a ``<br>`` marker behind so their
boundaries survive flattening.  Comments, whitespace runs and empty
``a``/``ul``/``ol``/``li`` elements are removed.

Sanitizing is idempotent.  The output is never longer than the input except
where the input was not well-formed or relied on lenient parsing:

* one ``<br>`` (4 characters) per flattened block that had no closing tag;
* ``&amp;`` for a literal ``&`` written unescaped in front of a letter or
  digit (4 extra characters each);
* ``&lt;`` for a literal ``<`` that would otherwise open a tag (3 extra
  characters each);
* the closing tag of a preserved element left unclosed, e.g. ``<a>a`` becomes
  ``<a>a</a>``.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction
from bs4.formatter import HTMLFormatter

PRESERVED_TAGS = frozenset({"a", "ul", "ol", "li", "img", "br"})

_REMOVED_TAGS = ["script", "style", "svg", "iframe", "noscript", "form", "button"]
_BLOCK_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6", "div"})
_NON_TEXT = (Comment, Doctype, Declaration, ProcessingInstruction, CData)

_WHITESPACE = re.compile(r"\s+")
_EMPTY_ELEMENT = re.compile(
    r"""<(a|ul|ol|li)\b(?:[^>"']|"[^"]*"|'[^']*')*>\s*</\1>""", re.IGNORECASE
)
_REPEATED_BREAKS = re.compile(r"(?:<br>\s*){2,}")
_WRAPPER_TAGS = re.compile(r"<!DOCTYPE[^>]*>|</?(?:html|head|body)\b[^>]*>", re.IGNORECASE)

# Only characters that would be re-read as markup are escaped, so a second
# pass over the output parses back to exactly the same text.
_AMBIGUOUS_AMPERSAND = re.compile(r"&(?=[#A-Za-z0-9])")
_TAG_OPENER = re.compile(r"<(?![\s\d=])")


def _escape(text: str) -> str:
    text = _AMBIGUOUS_AMPERSAND.sub("&amp;", text)
    return _TAG_OPENER.sub("&lt;", text)


_FORMATTER = HTMLFormatter(entity_substitution=_escape, void_element_close_prefix=None)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _clean_attributes(el: Tag) -> bool:
    """Strip *el* down to its allowed attributes.

    Returns ``False`` for an ``<img>`` without any usable source, which the
    caller removes.
    """
    if el.name == "img":
        src = el.get("src") or el.get("data-src")
        if not src:
            return False
        alt = el.get("alt")
        el.attrs = {"src": src}
        if alt:
            el.attrs["alt"] = alt
    elif el.name == "a":
        href = el.get("href")
        el.attrs = {"href": href} if href else {}
    else:
        el.attrs = {}
    return True


def _has_content(el: Tag) -> bool:
    return bool(el.get_text(strip=True)) or el.find("img") is not None


def _tidy(html: str) -> str:
    """Collapse whitespace and drop wrappers and empty elements until stable."""
    html = _WRAPPER_TAGS.sub("", html)
    previous = None
    while html != previous:
        previous = html
        html = _WHITESPACE.sub(" ", html).strip()
        html = _EMPTY_ELEMENT.sub("", html)
        html = _REPEATED_BREAKS.sub("<br>", html)
    return html


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize(markup: str) -> str:
    """Return *markup* reduced to the preserved-tag dialect."""
    if not markup or not markup.strip():
        return ""

    soup = BeautifulSoup(markup, "html.parser")

    for el in soup.find_all(_REMOVED_TAGS):
        if not el.decomposed:
            el.decompose()
    for node in soup.find_all(string=lambda s: isinstance(s, _NON_TEXT)):
        node.extract()

    for el in soup.find_all(True):
        if el.name in PRESERVED_TAGS:
            if not _clean_attributes(el):
                el.decompose()
            continue
        if el.name in _BLOCK_TAGS and _has_content(el):
            el.append(soup.new_tag("br"))
        el.unwrap()
    # Merge the text nodes left side by side so escaping sees whole runs.
    soup.smooth()

    return _tidy(soup.decode(formatter=_FORMATTER))
