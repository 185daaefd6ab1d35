"""Parse endpoint.

Routes
------
GET /parse?url=https://...    → extract_article
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from article_parser.errors import InvalidUrlError
from article_parser.pipeline import extract_article

router = APIRouter()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class CandidateOut(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    source: str
    score: int


class ParseResponse(BaseModel):
    content: str
    title: str
    author: str
    fullResult: CandidateOut


class EmptyParseResponse(BaseModel):
    message: str
    fullResult: Optional[CandidateOut] = None
    possibleIssues: str


class ParseErrorResponse(BaseModel):
    error: str
    details: str
    suggestion: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/parse",
    response_model=ParseResponse,
    responses={
        400: {"model": ParseErrorResponse},
        500: {"model": ParseErrorResponse},
    },
)
def parse_endpoint(request: Request, url: Optional[str] = None) -> Any:
    """Fetch *url* and return its main content as filtered plain text.

    A page with no extractable body is still a 200, carrying the partial
    result and a hint instead of content.
    """
    if not url:
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    settings = request.app.state.settings
    try:
        result = extract_article(url, settings)
    except InvalidUrlError as exc:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid URL",
                "details": str(exc),
                "suggestion": "Pass an absolute http(s) URL.",
            },
        )
    except Exception as exc:
        logger.exception("Parsing error for %s", url)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Parsing error",
                "details": str(exc),
                "suggestion": "Check site accessibility; try enabling fallbacks or PARSER_SAFE_MODE.",
            },
        )

    full = result.candidate.to_dict() if result.candidate is not None else None
    if result.empty:
        body = EmptyParseResponse(
            message="No main content extracted, but other data available.",
            fullResult=full,
            possibleIssues="Non-standard layout or protection.",
        )
        return JSONResponse(status_code=200, content=body.model_dump())

    return {
        "content": result.content,
        "title": result.title,
        "author": result.author,
        "fullResult": full,
    }
