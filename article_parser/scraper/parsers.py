"""Article parsers: turn raw HTML into a :class:`Candidate`.

``parse_article`` (trafilatura) is the primary parser used by the primary,
AMP and rendered strategies.  ``parse_readability`` (readability-lxml) is the
boilerplate-removal fallback.
"""

from __future__ import annotations

from typing import Optional

import trafilatura
from bs4 import BeautifulSoup
from readability import Document

from article_parser.scraper.models import Candidate


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _unwrap_body(html: Optional[str]) -> Optional[str]:
    """Strip the ``<html><body>`` shell trafilatura puts around its output."""
    if not html:
        return html
    soup = BeautifulSoup(html, "html.parser")
    body = soup.find("body")
    if body is None:
        return html.strip()
    return body.decode_contents().strip()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_article(url: str, html: str, source: str = "primary") -> Candidate:
    """Run trafilatura over *html* and return title, HTML body and author.

    May raise whatever trafilatura raises on malformed input; the caller
    decides whether that is fatal.
    """
    content = trafilatura.extract(
        html,
        url=url,
        output_format="html",
        include_formatting=True,
        include_tables=True,
        include_images=False,
        include_links=False,
        include_comments=False,
        favor_recall=True,
    )
    metadata = trafilatura.extract_metadata(html, default_url=url)
    title = _clean(getattr(metadata, "title", None)) if metadata else None
    author = _clean(getattr(metadata, "author", None)) if metadata else None

    return Candidate(
        title=title,
        content=_unwrap_body(content) or None,
        author=author,
        source=source,
    )


def parse_readability(url: str, html: str) -> Optional[Candidate]:
    """Readability-algorithm extraction, or ``None`` when it finds nothing."""
    doc = Document(html, url=url)
    content = doc.summary(html_partial=True)
    if not content or not content.strip():
        return None
    return Candidate(
        title=_clean(doc.short_title()),
        content=content,
        author=None,
        source="readability",
    )
