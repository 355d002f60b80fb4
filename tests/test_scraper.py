"""Tests for the fetcher stage.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made during ``fetch_url`` tests.
- Size limits are lowered with ``patch.object(settings, ...)`` instead of
  building multi-megabyte bodies.
"""

from __future__ import annotations

import itertools
import time
from datetime import datetime
from unittest.mock import patch

import httpx
import respx

from recipe_extract.config import settings
from recipe_extract.scraper.fetcher import _is_spa, _normalise_url, _read_capped, fetch_url
from recipe_extract.scraper.models import RawPage


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_RECIPE_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Lemon Cake</title></head>
<body>
  <article>
    <h1>Lemon Cake</h1>
    <ul><li>1 cup flour</li><li>2 eggs</li></ul>
    <ol><li>Mix everything.</li><li>Bake for 30 minutes.</li></ol>
  </article>
</body>
</html>
"""

_SPA_HTML = """\
<!DOCTYPE html>
<html>
<head><title>React App</title></head>
<body>
  <div id="root"></div>
  <script src="/bundle.js"></script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# URL normalisation
# ---------------------------------------------------------------------------

class TestNormaliseUrl:
    def test_adds_https_scheme(self) -> None:
        assert _normalise_url("example.com/cake") == "https://example.com/cake"

    def test_keeps_http_scheme(self) -> None:
        assert _normalise_url("http://example.com/") == "http://example.com/"

    def test_strips_whitespace(self) -> None:
        assert _normalise_url("  https://example.com/ ") == "https://example.com/"


# ---------------------------------------------------------------------------
# _is_spa unit tests
# ---------------------------------------------------------------------------

class TestIsSpa:
    def test_detects_react_root_div(self) -> None:
        assert _is_spa(_SPA_HTML) is True

    def test_detects_next_data(self) -> None:
        html = "<html><body><script>window.__NEXT_DATA__ = {}</script></body></html>"
        assert _is_spa(html) is True

    def test_normal_page_not_spa(self) -> None:
        assert _is_spa(_RECIPE_HTML) is False

    def test_minimal_body_heuristic(self) -> None:
        big_script = "<script>" + "x" * 2500 + "</script>"
        html = f"<html><body>{big_script}<p> </p></body></html>"
        assert _is_spa(html) is True


# ---------------------------------------------------------------------------
# fetch_url tests
# ---------------------------------------------------------------------------

class TestFetchUrl:
    def test_successful_fetch_returns_raw_page(self) -> None:
        with respx.mock:
            respx.get("https://example.com/cake").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            raw = fetch_url("https://example.com/cake")

        assert isinstance(raw, RawPage)
        assert raw.url == "https://example.com/cake"
        assert raw.status_code == 200
        assert "<h1>Lemon Cake</h1>" in raw.html
        assert isinstance(raw.fetched_at, datetime)

    def test_missing_scheme_is_fetched_over_https(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/cake").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            raw = fetch_url("example.com/cake")

        assert route.called
        assert raw is not None
        assert raw.url == "https://example.com/cake"

    def test_sends_browser_headers(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            fetch_url("https://example.com/")

        request = route.calls.last.request
        assert request.headers["User-Agent"] == settings.user_agent
        assert request.headers["Accept"].startswith("text/html")

    def test_redirect_is_followed(self) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": "https://example.com/new"})
            )
            respx.get("https://example.com/new").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            raw = fetch_url("https://example.com/old")

        assert raw is not None
        assert raw.status_code == 200

    def test_http_error_status_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            assert fetch_url("https://example.com/missing") is None

    def test_server_error_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://example.com/").mock(return_value=httpx.Response(503))
            assert fetch_url("https://example.com/") is None

    def test_timeout_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://slow.example.com/").mock(
                side_effect=httpx.ConnectTimeout("timed out")
            )
            assert fetch_url("https://slow.example.com/") is None

    def test_connection_error_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://down.example.com/").mock(
                side_effect=httpx.ConnectError("connection refused")
            )
            assert fetch_url("https://down.example.com/") is None

    def test_oversize_body_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://example.com/big").mock(
                return_value=httpx.Response(200, html="<p>" + "a" * 500 + "</p>")
            )
            with patch.object(settings, "fetch_max_bytes", 100):
                assert fetch_url("https://example.com/big") is None

    def test_non_text_body_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://example.com/api").mock(
                return_value=httpx.Response(200, json={"title": "cake"})
            )
            assert fetch_url("https://example.com/api") is None

    def test_empty_body_returns_none(self) -> None:
        with respx.mock:
            respx.get("https://example.com/empty").mock(
                return_value=httpx.Response(200, html="   ")
            )
            assert fetch_url("https://example.com/empty") is None

    def test_empty_url_returns_none(self) -> None:
        assert fetch_url("") is None
        assert fetch_url("   ") is None

    def test_no_sleep_on_fetch(self) -> None:
        """Retries and backoff live with the caller, never in the fetcher."""
        with respx.mock:
            respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            with patch("time.sleep") as mock_sleep:
                fetch_url("https://example.com/")

        mock_sleep.assert_not_called()

    def test_spa_page_is_still_returned(self) -> None:
        with respx.mock:
            respx.get("https://spa.example.com/").mock(
                return_value=httpx.Response(200, html=_SPA_HTML)
            )
            raw = fetch_url("https://spa.example.com/")

        assert raw is not None
        assert raw.html == _SPA_HTML

    def test_slow_download_past_deadline_returns_none(self) -> None:
        """Each chunk arriving under the read timeout still counts against the total."""
        clock = itertools.count(0.0, 100.0)
        with respx.mock:
            respx.get("https://slow.example.com/cake").mock(
                return_value=httpx.Response(200, html=_RECIPE_HTML)
            )
            with patch("recipe_extract.scraper.fetcher.time.monotonic", side_effect=clock):
                assert fetch_url("https://slow.example.com/cake") is None


# ---------------------------------------------------------------------------
# _read_capped unit tests
# ---------------------------------------------------------------------------

class TestReadCapped:
    def test_reads_all_chunks_within_limits(self) -> None:
        response = httpx.Response(200, content=iter([b"ab", b"cd"]))
        assert _read_capped(response, 10, time.monotonic() + 60) == b"abcd"

    def test_stops_when_deadline_passed(self) -> None:
        response = httpx.Response(200, content=iter([b"ab", b"cd"]))
        assert _read_capped(response, 10, time.monotonic() - 1) is None

    def test_stops_when_streamed_body_too_large(self) -> None:
        response = httpx.Response(200, content=iter([b"abc", b"def"]))
        assert _read_capped(response, 4, time.monotonic() + 60) is None
