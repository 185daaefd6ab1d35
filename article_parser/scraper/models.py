"""Data models for the extraction pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from article_parser.scraper.metric import score


@dataclass(frozen=True)
class RawPage:
    """A fetched document: the origin page, its AMP variant, or a render."""

    url: str
    html: str
    status_code: int = 200


@dataclass(frozen=True)
class Candidate:
    """One strategy's extraction result.

    ``score`` is derived from ``content`` on every access and never stored.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    source: str = "primary"

    @property
    def score(self) -> int:
        return score(self.content)

    def with_content(self, content: str) -> "Candidate":
        """Return a copy carrying *content*; the original is left untouched."""
        return replace(self, content=content)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["score"] = self.score
        return data


@dataclass(frozen=True)
class CardMeta:
    """Badge / title / price of the first card in a review grid."""

    badge: str = ""
    title: str = ""
    price: str = ""

    def is_empty(self) -> bool:
        return not (self.badge or self.title or self.price)


@dataclass(frozen=True)
class LineClassification:
    text: str
    keep: bool


@dataclass
class ExtractionResult:
    """What the pipeline hands back to the API / CLI.

    ``empty`` marks the "ok but nothing extracted" outcome; in that case
    ``content`` is an empty string and ``candidate`` holds whatever partial
    metadata the strategies produced.
    """

    content: str
    title: str
    author: str
    candidate: Optional[Candidate]
    empty: bool = False
