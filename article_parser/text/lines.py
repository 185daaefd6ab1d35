"""Line-level keep/drop policy for the reconstructed article text.

Price and badge lines always survive; calls-to-action and blog boilerplate
are dropped; everything else is kept.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from article_parser.recovery.cards import PRICE_RE
from article_parser.scraper.models import LineClassification

_ORDINAL_RE = re.compile(r"^\d+\.\s*$")
_BADGE_WORD_RE = re.compile(
    r"\b(Best|Top|Editor['’]?s Choice|Overall|Budget|Value|Pick)\b", re.IGNORECASE
)
_BOILERPLATE_RE = re.compile(
    r"newsletter|subscribe|read article|leave a reply|your email address"
    r"|previous post|next post|notifications",
    re.IGNORECASE,
)
_SHOP_CTA_RE = re.compile(
    r"compare prices|shop the shoe|available at|buy now", re.IGNORECASE
)
_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def classify_line(line: str) -> LineClassification:
    text = line.strip()
    if not text or _ORDINAL_RE.match(text):
        return LineClassification(text, keep=False)

    has_price = PRICE_RE.search(text) is not None
    if has_price or _BADGE_WORD_RE.search(text):
        return LineClassification(text, keep=True)

    if _BOILERPLATE_RE.search(text):
        return LineClassification(text, keep=False)
    if _SHOP_CTA_RE.search(text) and not has_price:
        return LineClassification(text, keep=False)
    return LineClassification(text, keep=True)


def filter_lines(lines: Iterable[str]) -> List[str]:
    """Return the trimmed lines the policy keeps, in order."""
    kept = []
    for line in lines:
        verdict = classify_line(line)
        if verdict.keep:
            kept.append(verdict.text)
    return kept


def join_lines(lines: Iterable[str]) -> str:
    """Separate lines by a blank line and squeeze longer newline runs."""
    return _EXTRA_NEWLINES_RE.sub("\n\n", "\n\n".join(lines)).strip()
