"""Card-header recovery for review round-up pages.

The first product card after the "our full <category> reviews" section
marker carries a badge ("Best Overall"), a product title and a price.
Generic extractors tend to keep the card prose and drop that header, so it is
rebuilt from the raw HTML, first with a DOM heuristic and then, if that finds
nothing, with a regex pass over the flattened text, and injected back into
the selected content right after the marker.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from article_parser.config import Settings
from article_parser.recovery.dom import (
    article_root,
    normalize_ws,
    parse_html,
    text_of,
)
from article_parser.scraper.models import Candidate, CardMeta

logger = logging.getLogger(__name__)

PRICE_RE = re.compile(r"\$\s*\d{1,4}(?:[.,]\d{2})?")
BADGE_RE = re.compile(
    r"\b(?:Best\s+(?:Overall|Budget|Value|for\s[^,.;$<>]{1,40})"
    r"|Editor['’]?s\s+Choice|Top\s+Pick)\b",
    re.IGNORECASE,
)

TITLE_HOLDERS = "h1, h2, h3, h4, [data-hed], [data-title], a[title], a[aria-label]"
TITLE_SOURCES = TITLE_HOLDERS + ", a"

MAX_ANCESTOR_LEVELS = 4
MIN_TITLE_CHARS = 6
REGEX_WINDOW_CHARS = 3000

_SCRIPT_RE = re.compile(r"<script\b[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

Node = Union[Tag, BeautifulSoup]


@dataclass(frozen=True)
class CardPattern:
    """Where a card section starts and what kind of product it lists."""

    marker: str = r"our full .{0,60}?reviews"
    category: str = "glove"

    @classmethod
    def from_settings(cls, settings: Settings) -> "CardPattern":
        return cls(marker=settings.card_marker, category=settings.card_category)

    @property
    def marker_re(self) -> Pattern[str]:
        return re.compile(self.marker, re.IGNORECASE)

    @property
    def category_re(self) -> Optional[Pattern[str]]:
        if not self.category:
            return None
        return re.compile(re.escape(self.category), re.IGNORECASE)

    @property
    def title_re(self) -> Optional[Pattern[str]]:
        """Capitalised phrase ending in the category noun, e.g. "Acme Thermal Glove"."""
        if not self.category:
            return None
        noun = re.escape(self.category)
        return re.compile(rf"([A-Z][A-Za-z0-9'’\- ]+?\s+(?i:{noun})s?)\b")


# ---------------------------------------------------------------------------
# DOM strategy
# ---------------------------------------------------------------------------

def find_marker(root: Node, marker_re: Pattern[str]) -> Optional[Node]:
    """Return the innermost element whose text matches *marker_re*.

    Descends from *root* through the first matching child at each level, so
    the result is the tightest element wrapping the first marker occurrence.
    """
    if not marker_re.search(text_of(root)):
        return None
    node = root
    while True:
        child = next(
            (c for c in node.find_all(True, recursive=False) if marker_re.search(text_of(c))),
            None,
        )
        if child is None:
            return node
        node = child


def _is_visible_price(s) -> bool:
    if not isinstance(s, NavigableString) or not PRICE_RE.search(s):
        return False
    return s.parent is not None and s.parent.name not in ("script", "style")


def _find_price_node(root: Node, marker: Optional[Node]) -> Optional[NavigableString]:
    if marker is not None:
        return marker.find_next(string=_is_visible_price)
    return root.find(string=_is_visible_price)


def _find_anchor(price_el: Tag) -> Node:
    """Walk up from the price element to the nearest container holding a title."""
    anchor: Optional[Node] = price_el
    for _ in range(MAX_ANCESTOR_LEVELS):
        if anchor is None or anchor.select_one(TITLE_HOLDERS) is not None:
            break
        anchor = anchor.parent
    # Tag.__len__ counts children, so test against None explicitly
    if anchor is not None:
        return anchor
    return price_el.parent if price_el.parent is not None else price_el


def _title_from(anchor: Node, pattern: CardPattern) -> str:
    marker_re = pattern.marker_re
    title = ""
    for el in anchor.select(TITLE_SOURCES):
        if marker_re.search(text_of(el)):
            continue
        title = normalize_ws(el.get("title") or el.get("aria-label") or el.get_text(" "))
        break

    category_re = pattern.category_re
    if len(title) < MIN_TITLE_CHARS and category_re is not None:
        texts = [normalize_ws(s) for s in anchor.stripped_strings]
        hits = [t for t in texts if category_re.search(t) and not marker_re.search(t)]
        if hits:
            title = max(hits, key=len)
    return title


def _badge_from(anchor: Node) -> str:
    for scope in (anchor, anchor.parent):
        if scope is None:
            continue
        # per text node, so "Best for ..." stops at the badge element
        for text in scope.stripped_strings:
            match = BADGE_RE.search(text)
            if match:
                return normalize_ws(match.group(0))
    return ""


def extract_card_meta_dom(raw_html: str, pattern: CardPattern) -> Optional[CardMeta]:
    """DOM heuristic: price after the marker, its titled container, the badge near it."""
    soup = parse_html(raw_html)
    root = article_root(soup)
    marker = find_marker(root, pattern.marker_re)

    price_node = _find_price_node(root, marker)
    if price_node is None:
        return None
    price = PRICE_RE.search(price_node).group(0)

    anchor = _find_anchor(price_node.parent)
    title = _title_from(anchor, pattern)
    badge = _badge_from(anchor)

    if not (title or price or badge):
        return None
    return CardMeta(badge=badge, title=title, price=price)


# ---------------------------------------------------------------------------
# Regex strategy
# ---------------------------------------------------------------------------

def flatten_html(raw_html: str) -> str:
    """Drop script/style blocks and tags, decode entities, collapse whitespace."""
    text = _SCRIPT_RE.sub(" ", raw_html or "")
    text = _STYLE_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    return normalize_ws(html.unescape(text))


def extract_card_meta_regex(raw_html: str, pattern: CardPattern) -> Optional[CardMeta]:
    """Regex fallback over the flattened text following the marker."""
    flat = flatten_html(raw_html)
    marker = pattern.marker_re.search(flat)
    start = marker.end() if marker else 0
    window = flat[start:start + REGEX_WINDOW_CHARS]

    badge_match = BADGE_RE.search(window)
    badge = normalize_ws(badge_match.group(0)) if badge_match else ""

    price_match = PRICE_RE.search(window)
    price = price_match.group(0) if price_match else ""

    # the badge usually sits right before the title; keep it out of the match
    haystack = window.replace(badge_match.group(0), " ", 1) if badge_match else window
    title = ""
    title_re = pattern.title_re
    if title_re is not None:
        found = title_re.search(haystack)
        if found:
            title = normalize_ws(found.group(1))
    if len(title) < MIN_TITLE_CHARS:
        alt = re.search(r"The\s+[A-Z][A-Za-z0-9'’\- ]{2,80}", haystack)
        if alt:
            title = normalize_ws(alt.group(0))

    if not (badge or title or price):
        return None
    return CardMeta(badge=badge, title=title, price=price)


def extract_card_meta(
    raw_html: str,
    pattern: CardPattern,
    logger: logging.Logger = logger,
) -> Optional[CardMeta]:
    meta = extract_card_meta_dom(raw_html, pattern)
    if meta is None:
        logger.info("DOM card meta not found, trying regex fallback.")
        meta = extract_card_meta_regex(raw_html, pattern)
    return meta


# ---------------------------------------------------------------------------
# Injection
# ---------------------------------------------------------------------------

def build_card_fragment(meta: CardMeta) -> str:
    parts: List[str] = []
    if meta.badge:
        parts.append(f"<p><strong>{html.escape(meta.badge, quote=False)}</strong></p>")
    if meta.title:
        parts.append(f"<h3>{html.escape(meta.title, quote=False)}</h3>")
    if meta.price:
        parts.append(f"<p>{html.escape(meta.price, quote=False)}</p>")
    return "".join(parts)


def inject_card_header(
    content_html: str,
    meta: Optional[CardMeta],
    pattern: CardPattern,
    logger: logging.Logger = logger,
) -> str:
    """Insert the card header after the marker in *content_html*.

    Returns *content_html* unchanged when the title (or the whole fragment)
    is already there, so repeated calls never stack duplicate headers.
    """
    if meta is None or meta.is_empty():
        return content_html

    fragment = build_card_fragment(meta)
    soup = parse_html(content_html)

    if meta.title and normalize_ws(meta.title) in text_of(soup):
        logger.info("Card title already present, skip inject.")
        return content_html
    if normalize_ws(fragment) in normalize_ws(content_html):
        logger.info("Card header already present, skip inject.")
        return content_html

    nodes = list(parse_html(fragment).contents)
    marker = find_marker(soup, pattern.marker_re)
    if marker is not None and marker is not soup:
        for node in reversed(nodes):
            marker.insert_after(node)
        logger.info("Inserted card header after marker.")
    else:
        for node in reversed(nodes):
            soup.insert(0, node)
        logger.info("Inserted card header at beginning (marker not found).")
    return soup.decode()


def recover_card_header(
    candidate: Candidate,
    raw_html: str,
    pattern: CardPattern,
    logger: logging.Logger = logger,
) -> Candidate:
    """Rebuild the first card header from *raw_html* and inject it into *candidate*."""
    meta = extract_card_meta(raw_html, pattern, logger=logger)
    if meta is None:
        logger.info("Card meta not recovered.")
        return candidate

    logger.info("Recovered card meta: %s", meta)
    content = candidate.content or ""
    injected = inject_card_header(content, meta, pattern, logger=logger)
    if injected == content:
        return candidate
    return candidate.with_content(injected)
