"""Intro recovery.

Generic extractors often start the article body at the first subheading and
lose the lede.  This pass rebuilds the lede from the raw HTML and prepends it
to the chosen content when it is not already there.
"""

from __future__ import annotations

import logging
from typing import List

from bs4 import Tag

from article_parser.recovery.dom import (
    article_root,
    first_match,
    normalize_ws,
    parse_html,
)
from article_parser.scraper.models import Candidate

logger = logging.getLogger(__name__)

LEDE_SELECTORS = (
    ".content-lede",
    ".article-dek",
    ".dek",
    ".intro",
    ".content-info",
    ".css-lede",
    ".css-dek",
)

MIN_PARAGRAPH_CHARS = 40
DEDUPE_KEY_CHARS = 120
PRESENCE_CHECK_CHARS = 80


def _qualifies(p: Tag) -> bool:
    return len(p.get_text().strip()) > MIN_PARAGRAPH_CHARS


def _serialize(p: Tag) -> str:
    return f"<p>{p.decode_contents()}</p>"


def extract_intro_html(raw_html: str) -> str:
    """Return the lede paragraphs of *raw_html* as ``<p>`` markup, or ``""``."""
    soup = parse_html(raw_html)
    root = article_root(soup)

    collected: List[str] = []

    lede = first_match(root, LEDE_SELECTORS)
    if lede is not None:
        collected.extend(_serialize(p) for p in lede.find_all("p") if _qualifies(p))

    for el in root.descendants:
        if not isinstance(el, Tag):
            continue
        if el.name in ("h2", "h3"):
            break
        if el.name == "p" and _qualifies(el):
            collected.append(_serialize(el))

    seen = set()
    unique: List[str] = []
    for html in collected:
        key = normalize_ws(html).lower()[:DEDUPE_KEY_CHARS]
        if key not in seen:
            seen.add(key)
            unique.append(html)
    return "".join(unique)


def _plain(html: str) -> str:
    return normalize_ws(parse_html(html).get_text(" "))


def intro_present(content: str, intro_html: str) -> bool:
    """Compare visible text only; extractors rewrite inline markup such as links."""
    head = _plain(intro_html)[:PRESENCE_CHECK_CHARS]
    return head in _plain(content)


def recover_intro(
    candidate: Candidate,
    raw_html: str,
    logger: logging.Logger = logger,
) -> Candidate:
    """Prepend the recovered lede to *candidate* unless it is already there.

    Returns *candidate* itself when nothing changes.
    """
    intro_html = extract_intro_html(raw_html)
    if not intro_html:
        return candidate
    content = candidate.content or ""
    if intro_present(content, intro_html):
        logger.info("Intro already present.")
        return candidate
    logger.info("Intro prepended.")
    return candidate.with_content(intro_html + "\n" + content)
