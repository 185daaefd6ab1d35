"""End-to-end extraction: URL in, filtered article text out.

fetch -> strategy selection -> intro recovery -> card-header recovery ->
text reconstruction.  Only an invalid URL, exhausted fetch retries and a
failing primary parser abort the request; the recovery passes degrade to
no-ops when they raise.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

from article_parser.config import Settings, settings as default_settings
from article_parser.errors import InvalidUrlError
from article_parser.recovery import CardPattern, recover_card_header, recover_intro
from article_parser.scraper.fetcher import fetch_url, render_url
from article_parser.scraper.models import Candidate, ExtractionResult
from article_parser.scraper.strategies import FetchFn, RenderFn, select_candidate
from article_parser.text import build_plain_text

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise :class:`InvalidUrlError`."""
    url = (url or "").strip()
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(f"not an absolute http(s) URL: {url!r}")
    return url


def _default_fetch(
    settings: Settings,
    logger: logging.Logger,
    *,
    fallback: bool = False,
) -> FetchFn:
    retries = settings.fallback_fetch_retries if fallback else settings.fetch_retries
    delay = settings.fallback_fetch_retry_delay if fallback else settings.fetch_retry_delay

    def fetch(url: str):
        return fetch_url(
            url,
            retries=retries,
            delay=delay,
            timeout=settings.request_timeout,
            logger=logger,
        )

    return fetch


def _default_render(settings: Settings, logger: logging.Logger) -> RenderFn:
    def render(url: str):
        return render_url(url, timeout=settings.render_timeout, logger=logger)

    return render


def apply_recoveries(
    candidate: Candidate,
    raw_html: str,
    settings: Settings,
    logger: logging.Logger = logger,
) -> Candidate:
    """Run the enabled recovery passes; a pass that raises is skipped."""
    if settings.recover_intro:
        try:
            candidate = recover_intro(candidate, raw_html, logger=logger)
        except Exception as exc:
            logger.warning("Intro recovery failed: %s", exc)

    if settings.recover_card_headers:
        try:
            candidate = recover_card_header(
                candidate, raw_html, CardPattern.from_settings(settings), logger=logger
            )
        except Exception as exc:
            logger.warning("Card header recovery failed: %s", exc)

    return candidate


def extract_article(
    url: str,
    settings: Optional[Settings] = None,
    *,
    fetch: Optional[FetchFn] = None,
    render: Optional[RenderFn] = None,
    logger: logging.Logger = logger,
) -> ExtractionResult:
    """Extract the main content of the article at *url*.

    Raises:
        InvalidUrlError: *url* is not an absolute http(s) URL.
        FetchError: The page could not be fetched.
        PrimaryParseError: The primary parser raised.
    """
    settings = settings or default_settings
    url = validate_url(url)
    fetch_fallback = fetch or _default_fetch(settings, logger, fallback=True)
    fetch = fetch or _default_fetch(settings, logger)
    render = render or _default_render(settings, logger)

    page = fetch(url)
    logger.info("Parse start for: %s", page.url)
    candidate = select_candidate(page, settings, fetch=fetch_fallback, render=render, logger=logger)

    if not candidate.content:
        logger.info("No main content extracted for %s", page.url)
        return ExtractionResult(
            content="",
            title=candidate.title or NOT_AVAILABLE,
            author=candidate.author or NOT_AVAILABLE,
            candidate=candidate,
            empty=True,
        )

    candidate = apply_recoveries(candidate, page.html, settings, logger=logger)
    content = build_plain_text(candidate.content or "")
    logger.info("Content sample: %s", content[:500])

    return ExtractionResult(
        content=content,
        title=candidate.title or NOT_AVAILABLE,
        author=candidate.author or NOT_AVAILABLE,
        candidate=candidate,
    )
