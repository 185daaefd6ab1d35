"""Article parser service: main-content extraction for news and review pages."""

from article_parser.pipeline import extract_article

__all__ = ["extract_article"]
