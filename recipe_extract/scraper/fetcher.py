"""HTTP fetcher: a single best-effort GET for a recipe page.

Every failure (network error, timeout, oversize body, unacceptable status or
a body that is not markup) is reported as ``None`` rather than raised, so the
caller can treat it as "unusable input" and stop.
"""

from __future__ import annotations

import logging
import re
import time

import httpx

from recipe_extract.config import settings
from recipe_extract.scraper.models import RawPage

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r'<div[^>]+id=["\'](?:root|app)["\']', re.IGNORECASE),
    re.compile(r"window\.__NEXT_DATA__", re.IGNORECASE),
    re.compile(r"ng-version=", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
]

_ACCEPT = "text/html,application/xhtml+xml,application/xml"

# Content types that decode to markup or plain text.
_TEXTUAL_TYPES = ("html", "xml", "text/")


def _normalise_url(url: str) -> str:
    """Prefix ``https://`` when *url* carries no http(s) scheme."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def _is_spa(html: str) -> bool:
    """Return ``True`` if *html* looks like a JavaScript SPA that needs rendering."""
    for pattern in _SPA_PATTERNS:
        if pattern.search(html):
            return True
    # Heuristic: very little visible text relative to total HTML size.
    # Strip <script> and <style> blocks first so their source code doesn't
    # count as visible text, then strip remaining tags.
    no_scripts = re.sub(r"<(script|style)[^>]*>.*?</(script|style)>", "", html, flags=re.IGNORECASE | re.DOTALL)
    stripped = re.sub(r"<[^>]+>", "", no_scripts).strip()
    if len(html) > 2000 and len(stripped) < 200:
        return True
    return False


def _read_capped(response: httpx.Response, limit: int, deadline: float) -> bytes | None:
    """Read the streamed body of *response*.

    Returns ``None`` once the body exceeds *limit* bytes or the monotonic
    clock passes *deadline*; httpx timeouts only bound each individual read.
    """
    declared = response.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        logger.warning("Declared body of %s bytes exceeds %d", declared, limit)
        return None

    body = bytearray()
    for chunk in response.iter_bytes():
        if time.monotonic() > deadline:
            logger.warning("Download exceeded the %.1fs fetch timeout", settings.fetch_timeout)
            return None
        body.extend(chunk)
        if len(body) > limit:
            logger.warning("Body exceeded %d bytes while downloading", limit)
            return None
    return bytes(body)


def fetch_url(url: str) -> RawPage | None:
    """Fetch *url* and return a :class:`RawPage`, or ``None`` if unusable.

    A missing scheme is replaced by ``https://``.  Statuses in ``[200, 400)``
    are accepted.  The whole fetch is bounded by ``settings.fetch_timeout`` and
    the body by ``settings.fetch_max_bytes``.  No retries are made here.
    """
    if not url or not url.strip():
        logger.warning("Cannot fetch an empty URL")
        return None

    url = _normalise_url(url)
    logger.info("Fetching %s", url)

    headers = {"User-Agent": settings.user_agent, "Accept": _ACCEPT}
    deadline = time.monotonic() + settings.fetch_timeout
    try:
        with httpx.Client(
            headers=headers,
            timeout=settings.fetch_timeout,
            follow_redirects=True,
        ) as client:
            with client.stream("GET", url) as response:
                status_code = response.status_code
                if not 200 <= status_code < 400:
                    logger.warning("Unacceptable status %d for %s", status_code, url)
                    return None

                content_type = response.headers.get("content-type", "").lower()
                if content_type and not any(t in content_type for t in _TEXTUAL_TYPES):
                    logger.warning("Non-text content type %r for %s", content_type, url)
                    return None

                body = _read_capped(response, settings.fetch_max_bytes, deadline)
                if body is None:
                    return None
                html = body.decode(response.encoding or "utf-8", errors="replace")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None

    if not html.strip():
        logger.warning("Empty body for %s", url)
        return None

    if _is_spa(html):
        logger.warning("%s looks client-rendered; extraction may find little content", url)

    logger.info("Fetched %s (%d characters)", url, len(html))
    return RawPage(url=url, html=html, status_code=status_code)
