"""Recovery passes that restore content generic extractors drop."""

from article_parser.recovery.cards import CardPattern, extract_card_meta, recover_card_header
from article_parser.recovery.intro import extract_intro_html, recover_intro

__all__ = [
    "CardPattern",
    "extract_card_meta",
    "extract_intro_html",
    "recover_card_header",
    "recover_intro",
]
