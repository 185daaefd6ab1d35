"""FastAPI application factory.

Lifespan
--------
On startup the app attaches the append-only log handlers (``parser.log`` /
``error.log``) configured by the app's :class:`Settings`.

Routers
-------
    /        — plain-text liveness message
    /parse   — main-content extraction for a URL
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from article_parser.config import Settings, settings as default_settings
from article_parser.logs import configure_logging

from article_parser.api.routers import parse as parse_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging once the server starts."""
    configure_logging(app.state.settings)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Article Parser API",
        description=(
            "Extracts the readable main content of a news or review article "
            "while keeping price tags, badges and product titles."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "Article Parser Service is running. Use /parse?url=your-article-url"

    app.include_router(parse_router.router, tags=["parse"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn article_parser.api.app:app
app = create_app()
