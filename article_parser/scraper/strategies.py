"""Strategy runner: pick the richest article body among several extractions.

The primary parse always runs and is the only fatal step.  The fallbacks
(AMP variant, readability, rendered DOM) run in a fixed order, each guarded by
its own predicate over the best candidate so far, and are adopted only when
they score strictly higher; on a tie the earlier result stays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from article_parser.config import Settings, settings as default_settings
from article_parser.errors import PrimaryParseError
from article_parser.scraper.fetcher import fetch_url, render_url
from article_parser.scraper.models import Candidate, RawPage
from article_parser.scraper.parsers import parse_article, parse_readability

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], RawPage]
RenderFn = Callable[[str], RawPage]
ParseFn = Callable[..., Candidate]
ReadabilityFn = Callable[[str, str], Optional[Candidate]]


@dataclass(frozen=True)
class Strategy:
    """A fallback extraction step.

    ``applies`` decides from the current best candidate whether the step is
    worth running; ``run`` returns a new candidate or ``None``.
    """

    name: str
    applies: Callable[[Candidate], bool]
    run: Callable[[Candidate], Optional[Candidate]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def find_amp_url(page: RawPage) -> str:
    """Return the AMP variant URL for *page*.

    Uses ``<link rel="amphtml">`` when the page declares one, otherwise
    appends ``/amp`` to the URL path.
    """
    soup = BeautifulSoup(page.html, "html.parser")
    link = soup.find("link", rel="amphtml", href=True)
    if link is not None and link["href"].strip():
        return urljoin(page.url, link["href"].strip())

    parts = urlsplit(page.url)
    path = parts.path.rstrip("/") + "/amp"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def _host(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_strategies(
    page: RawPage,
    settings: Settings,
    *,
    fetch: FetchFn,
    render: RenderFn,
    parse: ParseFn,
    readability: ReadabilityFn,
    logger: logging.Logger = logger,
) -> List[Strategy]:
    """Return the enabled fallback strategies for *page*, in priority order."""
    threshold = settings.wordcount_min

    def below_threshold(best: Candidate) -> bool:
        return best.score < threshold

    def run_amp(best: Candidate) -> Optional[Candidate]:
        amp_url = find_amp_url(page)
        logger.info("AMP candidate: %s", amp_url)
        amp_page = fetch(amp_url)
        return parse(amp_page.url, amp_page.html, source="amp")

    def run_readability(best: Candidate) -> Optional[Candidate]:
        found = readability(page.url, page.html)
        if found is None:
            return None
        return Candidate(
            title=found.title or best.title,
            content=found.content,
            author=best.author,
            source="readability",
        )

    def run_rendered(best: Candidate) -> Optional[Candidate]:
        rendered = render(page.url)
        return parse(rendered.url, rendered.html, source="rendered")

    strategies: List[Strategy] = []
    if settings.enable_amp:
        needs_amp = _host(page.url) in settings.amp_domains
        strategies.append(
            Strategy("amp", lambda best: needs_amp or below_threshold(best), run_amp)
        )
    if settings.enable_readability:
        strategies.append(Strategy("readability", below_threshold, run_readability))
    if settings.enable_render:
        strategies.append(Strategy("rendered", below_threshold, run_rendered))
    return strategies


def select_candidate(
    page: RawPage,
    settings: Optional[Settings] = None,
    *,
    fetch: FetchFn = fetch_url,
    render: RenderFn = render_url,
    parse: ParseFn = parse_article,
    readability: ReadabilityFn = parse_readability,
    logger: logging.Logger = logger,
) -> Candidate:
    """Run the primary parse and every applicable fallback; return the winner.

    Raises:
        PrimaryParseError: If the primary parser raises.
    """
    settings = settings or default_settings

    try:
        best = parse(page.url, page.html)
    except Exception as exc:
        raise PrimaryParseError(f"primary parser failed for {page.url}: {exc}") from exc
    logger.info("Primary parse: %d words", best.score)

    if settings.safe_mode:
        return best

    strategies = build_strategies(
        page,
        settings,
        fetch=fetch,
        render=render,
        parse=parse,
        readability=readability,
        logger=logger,
    )
    for strategy in strategies:
        if not strategy.applies(best):
            continue
        try:
            found = strategy.run(best)
        except Exception as exc:
            logger.warning("%s fallback failed: %s", strategy.name, exc)
            continue
        if found is None or not found.content:
            logger.info("%s fallback produced no content", strategy.name)
            continue
        if found.score > best.score:
            logger.info(
                "%s version chosen (%d > %d words)", strategy.name, found.score, best.score
            )
            best = found

    return best
