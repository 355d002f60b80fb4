"""Recipe Extract CLI: entry point for the extraction pipeline.

Usage:
    python cli/main.py --help

Commands:
    scrape       → fetch, locate and sanitize a page (no engine call)
    import-url   → full pipeline for a URL
    import-text  → full pipeline for a local file or stdin
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from recipe_extract.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import List, Optional

import typer

from recipe_extract.config import configure_logging
from recipe_extract.extraction.models import Recipe

app = typer.Typer(
    name="recipe-extract",
    help="Extract structured recipes from web pages or text.",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging()


def _emit(recipe: Optional[Recipe], label: str) -> None:
    if recipe is None:
        typer.echo(f"[{label}] ❌ No recipe could be extracted.", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(recipe.to_dict(), indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to scrape."),
) -> None:
    """Fetch a URL and print the sanitized recipe fragment to stdout."""
    from recipe_extract.extraction.pipeline import prepare_content
    from recipe_extract.scraper import fetch_url

    typer.echo(f"[scrape] Fetching {url!r} …")
    raw = fetch_url(url)
    if raw is None:
        typer.echo("[scrape] ❌ Fetch failed.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[scrape] HTTP {raw.status_code}, locating content …")

    fragment = prepare_content(raw.html)

    typer.echo(f"[scrape] Raw      : {len(raw.html)} chars")
    typer.echo(f"[scrape] Cleaned  : {len(fragment)} chars")
    typer.echo("")
    typer.echo(fragment)


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------
@app.command("import-url")
def import_url_cmd(
    url: str = typer.Argument(..., help="URL of the recipe page."),
    tag: List[str] = typer.Option([], "--tag", help="Allowed tag (repeatable)."),
) -> None:
    """Extract a recipe from a URL and print it as JSON."""
    from recipe_extract.extraction.pipeline import import_recipe_from_url

    _emit(import_recipe_from_url(url, tag_vocabulary=tag or None), "import-url")


@app.command("import-text")
def import_text_cmd(
    path: str = typer.Argument(..., help="File holding HTML or text, or '-' for stdin."),
    tag: List[str] = typer.Option([], "--tag", help="Allowed tag (repeatable)."),
) -> None:
    """Extract a recipe from a local file (or stdin) and print it as JSON."""
    from recipe_extract.extraction.pipeline import extract_recipe

    if path == "-":
        content = sys.stdin.read()
    else:
        file_path = Path(path)
        if not file_path.is_file():
            typer.echo(f"[import-text] ❌ No such file: {path}", err=True)
            raise typer.Exit(code=1)
        content = file_path.read_text(encoding="utf-8", errors="replace")

    _emit(extract_recipe(content, tag_vocabulary=tag or None), "import-text")


if __name__ == "__main__":
    app()
