"""HTTP fetcher with bounded retries, plus the optional Playwright renderer."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx

from article_parser.config import settings
from article_parser.errors import FetchError
from article_parser.scraper.models import RawPage

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Upgrade-Insecure-Requests": "1",
}

# Elements removed from a rendered page before its HTML is captured.
_RENDER_NOISE_SELECTORS = (
    "script, style, noscript, iframe, .ad, .advertisement, [data-ad], "
    "[id*='cookie'], [class*='cookie'], [class*='newsletter']"
)
_RENDER_MAX_SCROLLS = 20
_RENDER_SCROLL_PAUSE_MS = 500
_RENDER_SETTLE_MS = 1000


def fetch_url(
    url: str,
    *,
    retries: Optional[int] = None,
    delay: Optional[float] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
    logger: logging.Logger = logger,
) -> RawPage:
    """Fetch *url* and return a :class:`RawPage` for the final (redirected) URL.

    Up to *retries* attempts are made with a fixed *delay* between them.  Any
    ``httpx`` error (transport failure, timeout, 4xx/5xx status) counts as a
    failed attempt.

    Raises:
        FetchError: When the last attempt fails.
    """
    retries = max(1, retries if retries is not None else settings.fetch_retries)
    delay = delay if delay is not None else settings.fetch_retry_delay
    timeout = timeout if timeout is not None else settings.request_timeout

    own_client = client is None
    if own_client:
        client = httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
            max_redirects=10,
        )

    try:
        attempt = 0
        while True:
            attempt += 1
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                left = retries - attempt
                logger.error("Attempt %d failed for %s: %s. Left: %d", attempt, url, exc, left)
                if left <= 0:
                    raise FetchError(url, str(exc) or type(exc).__name__, attempts=attempt) from exc
                sleep(delay)
                continue

            final_url = str(response.url)
            logger.info("Fetch OK: %s", final_url)
            return RawPage(url=final_url, html=response.text, status_code=response.status_code)
    finally:
        if own_client:
            client.close()


def render_url(
    url: str,
    *,
    timeout: Optional[float] = None,
    logger: logging.Logger = logger,
) -> RawPage:
    """Render *url* with a headless Chromium browser and return its HTML.

    Waits for network idle, scrolls to the bottom until the page stops
    growing (bounded), strips noise elements and captures the final DOM.
    Playwright is imported lazily so nothing needs a browser installed unless
    rendering is enabled.

    Raises:
        FetchError: On navigation timeout or any browser error.
    """
    from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
    from playwright.sync_api import sync_playwright  # noqa: PLC0415

    timeout_ms = int((timeout if timeout is not None else settings.render_timeout) * 1000)

    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=True)
            try:
                page = browser.new_page(user_agent=_DEFAULT_HEADERS["User-Agent"])
                page.set_default_timeout(timeout_ms)
                page.goto(url, timeout=timeout_ms, wait_until="networkidle")

                last_height = 0
                for _ in range(_RENDER_MAX_SCROLLS):
                    height = page.evaluate("document.body ? document.body.scrollHeight : 0")
                    if height == last_height:
                        break
                    last_height = height
                    page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
                    page.wait_for_timeout(_RENDER_SCROLL_PAUSE_MS)

                page.wait_for_timeout(_RENDER_SETTLE_MS)
                page.evaluate(
                    "sel => document.querySelectorAll(sel).forEach(el => el.remove())",
                    _RENDER_NOISE_SELECTORS,
                )
                html = page.content()
                final_url = page.url
            finally:
                browser.close()
    except PlaywrightError as exc:
        # playwright's TimeoutError subclasses Error
        raise FetchError(url, f"render failed: {exc}") from exc

    logger.info("Rendered %s (%d bytes)", final_url, len(html))
    return RawPage(url=final_url, html=html, status_code=200)
