"""Scraper package: fetch, parse and pick the best article body."""

from article_parser.scraper.fetcher import fetch_url, render_url
from article_parser.scraper.metric import score
from article_parser.scraper.models import Candidate, CardMeta, ExtractionResult, RawPage
from article_parser.scraper.strategies import select_candidate

__all__ = [
    "fetch_url",
    "render_url",
    "score",
    "select_candidate",
    "RawPage",
    "Candidate",
    "CardMeta",
    "ExtractionResult",
]
