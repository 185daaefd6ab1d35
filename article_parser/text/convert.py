"""HTML to plain text via html2text, with selector-based skip rules."""

from __future__ import annotations

import re
from typing import Sequence

import html2text
from bs4 import BeautifulSoup

# Structural noise removed before conversion.  Card / grid containers are
# deliberately absent: recovered badges, titles and prices live in them.
SKIP_SELECTORS: Sequence[str] = (
    "script",
    "style",
    "iframe",
    ".ad",
    ".advertisement",
    ".related-posts",
    ".comments",
)

WRAP_WIDTH = 130

_HEADING_MARK_RE = re.compile(r"^(\s*)#{1,6}\s+", re.MULTILINE)
_MD_ESCAPE_RE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!])")


def _converter(wrap: int) -> html2text.HTML2Text:
    h = html2text.HTML2Text()
    h.body_width = wrap
    h.ignore_links = True
    h.ignore_images = True
    h.ignore_emphasis = True
    h.unicode_snob = True
    return h


def html_to_text(
    html: str,
    skip: Sequence[str] = SKIP_SELECTORS,
    wrap: int = WRAP_WIDTH,
) -> str:
    """Convert *html* to plain text, dropping every element matched by *skip*.

    Link targets and images are discarded; markdown heading markers and
    backslash escapes html2text adds are removed again.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for selector in skip:
        for el in soup.select(selector):
            if not el.decomposed:
                el.decompose()

    text = _converter(wrap).handle(str(soup))
    text = _HEADING_MARK_RE.sub(r"\1", text)
    return _MD_ESCAPE_RE.sub(r"\1", text)

