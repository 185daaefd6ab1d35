"""DOM helpers shared by the recovery passes."""

from __future__ import annotations

import re
from typing import Optional, Sequence, Union

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")

# Most specific first; the first selector with a hit wins.
CONTAINER_SELECTORS: Sequence[str] = (
    "main article",
    "article",
    '[itemprop="articleBody"]',
    "[data-article-body]",
    ".content article",
    ".content",
)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def normalize_ws(text: Optional[str]) -> str:
    """Collapse whitespace runs to one space and strip."""
    return _WS_RE.sub(" ", text or "").strip()


def text_of(el: Union[Tag, BeautifulSoup]) -> str:
    return normalize_ws(el.get_text(" "))


def first_match(scope: Union[Tag, BeautifulSoup], selectors: Sequence[str]) -> Optional[Tag]:
    """Return the hit of the first selector in *selectors* that matches anything."""
    for selector in selectors:
        found = scope.select_one(selector)
        if found is not None:
            return found
    return None


def article_root(soup: BeautifulSoup) -> Union[Tag, BeautifulSoup]:
    """Locate the article container, falling back to ``<body>`` then the document."""
    return first_match(soup, CONTAINER_SELECTORS) or soup.body or soup
