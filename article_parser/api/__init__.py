"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from article_parser.api import app

    uvicorn article_parser.api:app
"""

from article_parser.api.app import app

__all__ = ["app"]
