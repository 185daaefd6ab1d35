"""Text reconstruction: content HTML in, filtered plain text out."""

from __future__ import annotations

from article_parser.text.convert import SKIP_SELECTORS, WRAP_WIDTH, html_to_text
from article_parser.text.lines import classify_line, filter_lines, join_lines
from article_parser.text.sanitize import sanitize_html


def build_plain_text(content_html: str, wrap: int = WRAP_WIDTH) -> str:
    """Sanitise, convert and line-filter *content_html*."""
    text = html_to_text(sanitize_html(content_html), skip=SKIP_SELECTORS, wrap=wrap)
    return join_lines(filter_lines(text.split("\n")))


__all__ = [
    "build_plain_text",
    "classify_line",
    "filter_lines",
    "html_to_text",
    "join_lines",
    "sanitize_html",
]
