"""Scraper package: page fetch, content location and sanitization."""

from recipe_extract.scraper.fetcher import fetch_url
from recipe_extract.scraper.locator import locate
from recipe_extract.scraper.models import ContentCandidate, RawPage
from recipe_extract.scraper.sanitizer import sanitize

__all__ = ["fetch_url", "locate", "sanitize", "RawPage", "ContentCandidate"]
