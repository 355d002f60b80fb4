"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from recipe_extract.api import app

    uvicorn recipe_extract.api:app --reload
"""

from recipe_extract.api.app import app

__all__ = ["app"]
