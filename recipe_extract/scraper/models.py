"""Data models for the scraper stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int
    fetched_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ContentCandidate:
    """A located sub-tree of a page that probably holds the recipe.

    ``html`` is the inner markup of the winning node.  ``source_selector``
    names the rule (and selector, where one applies) that produced it.
    """

    html: str
    score: float
    source_selector: str
