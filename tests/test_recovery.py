"""Tests for the intro and card-header recovery passes.

All inputs are inline HTML snippets; no network or parser calls are made.
"""

from __future__ import annotations

import logging

import pytest

from article_parser.recovery import cards as cards_mod
from article_parser.recovery.cards import (
    CardPattern,
    build_card_fragment,
    extract_card_meta,
    extract_card_meta_dom,
    extract_card_meta_regex,
    find_marker,
    flatten_html,
    inject_card_header,
    recover_card_header,
)
from article_parser.recovery.dom import parse_html
from article_parser.recovery.intro import extract_intro_html, recover_intro
from article_parser.scraper.models import Candidate, CardMeta


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

LEDE_1 = "Winter is the season when most runners discover their hands."
LEDE_2 = "We spent three months testing gloves in sleet, wind and snow."
BODY = "The thermal layer kept fingers warm even on the longest outings."

_INTRO_RAW = f"""\
<html><body>
  <article>
    <p>{LEDE_1}</p>
    <p>{LEDE_2}</p>
    <p>Too short to count.</p>
    <h2>How We Tested</h2>
    <p>{BODY}</p>
  </article>
</body></html>
"""

_EXTRACTED = f"<h2>How We Tested</h2><p>{BODY}</p>"

_CARD_RAW = """\
<html><body>
  <article>
    <p>Our editors ran hundreds of cold miles to find the warmest running gloves.</p>
    <h2>Our Full Running Gloves Reviews</h2>
    <div class="card">
      <span class="badge">Best Overall</span>
      <h3><a href="/acme-thermal">Acme Thermal Glove</a></h3>
      <div class="price"><span>$45</span></div>
      <p>Warm, light and grippy on cold mornings.</p>
    </div>
    <div class="card">
      <span class="badge">Best Budget</span>
      <h3>Budget Runner Glove</h3>
      <div class="price">$19.99</div>
    </div>
  </article>
</body></html>
"""

_CARD_CONTENT = (
    "<p>Our editors ran hundreds of cold miles to find the warmest running gloves.</p>"
    "<h2>Our Full Running Gloves Reviews</h2>"
    "<p>Warm, light and grippy on cold mornings.</p>"
)

PATTERN = CardPattern()
ACME = CardMeta(badge="Best Overall", title="Acme Thermal Glove", price="$45")


@pytest.fixture()
def quiet_logger() -> logging.Logger:
    log = logging.getLogger("tests.recovery")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log


# ---------------------------------------------------------------------------
# Intro recovery
# ---------------------------------------------------------------------------

class TestExtractIntro:
    def test_collects_paragraphs_before_first_subheading(self) -> None:
        assert len(LEDE_1) > 40 and len(LEDE_2) > 40
        assert extract_intro_html(_INTRO_RAW) == f"<p>{LEDE_1}</p><p>{LEDE_2}</p>"

    def test_stops_at_h3_too(self) -> None:
        raw = f"<article><p>{LEDE_1}</p><h3>Sub</h3><p>{BODY}</p></article>"
        assert extract_intro_html(raw) == f"<p>{LEDE_1}</p>"

    def test_lede_element_is_not_duplicated(self) -> None:
        raw = f"""
        <article>
          <div class="dek"><p>{LEDE_1}</p></div>
          <p>{LEDE_2}</p>
          <h2>Sub</h2>
        </article>
        """
        assert extract_intro_html(raw) == f"<p>{LEDE_1}</p><p>{LEDE_2}</p>"

    def test_lede_after_subheading_is_still_collected(self) -> None:
        raw = f"""
        <article>
          <h2>Sub</h2>
          <div class="article-dek"><p>{LEDE_1}</p></div>
          <p>{BODY}</p>
        </article>
        """
        assert extract_intro_html(raw) == f"<p>{LEDE_1}</p>"

    def test_prefers_article_over_generic_content(self) -> None:
        raw = f"""
        <div class="content"><p>Sidebar promotion paragraph that is long enough to count.</p></div>
        <article><p>{LEDE_1}</p><h2>Sub</h2></article>
        """
        assert extract_intro_html(raw) == f"<p>{LEDE_1}</p>"

    def test_keeps_inline_markup(self) -> None:
        raw = "<article><p>Intro with <em>emphasis</em> that is clearly over forty characters.</p></article>"
        assert "<em>emphasis</em>" in extract_intro_html(raw)

    def test_nothing_qualifies_returns_empty(self) -> None:
        assert extract_intro_html("<article><p>Short.</p><h2>Sub</h2></article>") == ""
        assert extract_intro_html("") == ""


class TestRecoverIntro:
    def test_prepends_missing_intro(self, quiet_logger) -> None:
        cand = Candidate(title="Gloves", content=_EXTRACTED)
        out = recover_intro(cand, _INTRO_RAW, logger=quiet_logger)

        assert out.content == f"<p>{LEDE_1}</p><p>{LEDE_2}</p>\n{_EXTRACTED}"
        assert out.title == "Gloves"
        assert cand.content == _EXTRACTED

    def test_noop_when_intro_already_present(self, quiet_logger) -> None:
        cand = Candidate(content=f"<p>{LEDE_1}</p><p>{LEDE_2}</p>\n{_EXTRACTED}")
        assert recover_intro(cand, _INTRO_RAW, logger=quiet_logger) is cand

    def test_idempotent(self, quiet_logger) -> None:
        once = recover_intro(Candidate(content=_EXTRACTED), _INTRO_RAW, logger=quiet_logger)
        twice = recover_intro(once, _INTRO_RAW, logger=quiet_logger)
        assert twice.content == once.content

    def test_noop_without_intro(self, quiet_logger) -> None:
        cand = Candidate(content=_EXTRACTED)
        assert recover_intro(cand, "<article><h2>x</h2></article>", logger=quiet_logger) is cand

    def test_noop_when_extractor_dropped_inline_markup(self, quiet_logger) -> None:
        linked = (
            "Winter running is hard on hands, and <a href=\"/tested\">our testers</a> "
            "spent <em>months</em> finding gloves that actually work."
        )
        plain = (
            "Winter running is hard on hands, and our testers "
            "spent months finding gloves that actually work."
        )
        raw = f"<article><p>{linked}</p><h2>How We Tested</h2><p>{BODY}</p></article>"
        cand = Candidate(content=f"<p>{plain}</p>{_EXTRACTED}")

        out = recover_intro(cand, raw, logger=quiet_logger)

        assert out is cand
        assert out.content.count("finding gloves") == 1


# ---------------------------------------------------------------------------
# Card-header recovery: extraction
# ---------------------------------------------------------------------------

class TestFindMarker:
    def test_returns_innermost_element(self) -> None:
        soup = parse_html(_CARD_RAW)
        marker = find_marker(soup, PATTERN.marker_re)
        assert marker.name == "h2"

    def test_none_without_marker(self) -> None:
        soup = parse_html("<p>No section here.</p>")
        assert find_marker(soup, PATTERN.marker_re) is None


class TestCardMetaDom:
    def test_recovers_first_card(self) -> None:
        assert extract_card_meta_dom(_CARD_RAW, PATTERN) == ACME

    def test_title_from_title_attribute(self) -> None:
        raw = """
        <article><h2>Our Full Running Gloves Reviews</h2>
          <div><a title="Acme Thermal Glove" href="/a">Shop</a><span>$45</span></div>
        </article>
        """
        meta = extract_card_meta_dom(raw, PATTERN)
        assert meta.title == "Acme Thermal Glove"
        assert meta.price == "$45"

    def test_short_title_falls_back_to_category_text(self) -> None:
        raw = """
        <article><h2>Our Full Running Gloves Reviews</h2>
          <div class="card">
            <h4>No. 1</h4>
            <span>Northwind Merino Liner Glove</span>
            <span>$29.95</span>
          </div>
        </article>
        """
        meta = extract_card_meta_dom(raw, PATTERN)
        assert meta.title == "Northwind Merino Liner Glove"
        assert meta.price == "$29.95"

    def test_badge_from_parent_container(self) -> None:
        raw = """
        <article><h2>Our Full Running Gloves Reviews</h2>
          <section>
            <p class="badge">Editor's Choice</p>
            <div class="card"><h3>Acme Thermal Glove</h3><p>$45</p></div>
          </section>
        </article>
        """
        meta = extract_card_meta_dom(raw, PATTERN)
        assert meta.badge == "Editor's Choice"

    def test_best_for_badge_stops_at_its_element(self) -> None:
        raw = """
        <article><h2>Our Full Running Gloves Reviews</h2>
          <div class="card">
            <span>Best for Cold Weather</span><h3>Acme Thermal Glove</h3><span>$45</span>
          </div>
        </article>
        """
        meta = extract_card_meta_dom(raw, PATTERN)
        assert meta == CardMeta(badge="Best for Cold Weather", title="Acme Thermal Glove", price="$45")
        assert build_card_fragment(meta).count("Acme Thermal Glove") == 1

    def test_ignores_prices_in_scripts(self) -> None:
        raw = """
        <article><h2>Our Full Running Gloves Reviews</h2>
          <script>var price = "$999";</script>
          <div class="card"><h3>Acme Thermal Glove</h3><p>$45</p></div>
        </article>
        """
        assert extract_card_meta_dom(raw, PATTERN).price == "$45"

    def test_no_price_returns_none(self) -> None:
        assert extract_card_meta_dom("<article><p>Nothing priced here.</p></article>", PATTERN) is None

    def test_category_is_configurable(self) -> None:
        raw = """
        <article><h2>Our full trail shoe reviews</h2>
          <div><h4>X</h4><span>Summit Trail Shoe</span><span>$140</span></div>
        </article>
        """
        meta = extract_card_meta_dom(raw, CardPattern(category="shoe"))
        assert meta.title == "Summit Trail Shoe"


class TestCardMetaRegex:
    def test_flatten_drops_scripts_and_tags(self) -> None:
        flat = flatten_html("<p>A <b>b</b></p><script>var x = 1;</script><style>p{}</style> c&amp;d")
        assert flat == "A b c&d"

    def test_recovers_first_card(self) -> None:
        assert extract_card_meta_regex(_CARD_RAW, PATTERN) == ACME

    def test_the_title_fallback(self) -> None:
        raw = "<h2>Our Full Running Gloves Reviews</h2><div>Top Pick The Northwind Mitten $30</div>"
        meta = extract_card_meta_regex(raw, PATTERN)
        assert meta.badge == "Top Pick"
        assert meta.title.startswith("The Northwind Mitten")
        assert meta.price == "$30"

    def test_nothing_found_returns_none(self) -> None:
        assert extract_card_meta_regex("<p>plain words only</p>", PATTERN) is None

    def test_used_when_dom_finds_nothing(self, monkeypatch, quiet_logger) -> None:
        monkeypatch.setattr(cards_mod, "extract_card_meta_dom", lambda raw, pattern: None)
        assert extract_card_meta(_CARD_RAW, PATTERN, logger=quiet_logger) == ACME


# ---------------------------------------------------------------------------
# Card-header recovery: injection
# ---------------------------------------------------------------------------

class TestInjectCardHeader:
    def test_fragment_omits_empty_fields(self) -> None:
        assert build_card_fragment(CardMeta(price="$45")) == "<p>$45</p>"
        assert build_card_fragment(ACME) == (
            "<p><strong>Best Overall</strong></p><h3>Acme Thermal Glove</h3><p>$45</p>"
        )

    def test_inserts_after_marker(self, quiet_logger) -> None:
        out = inject_card_header(_CARD_CONTENT, ACME, PATTERN, logger=quiet_logger)
        assert out == (
            "<p>Our editors ran hundreds of cold miles to find the warmest running gloves.</p>"
            "<h2>Our Full Running Gloves Reviews</h2>"
            "<p><strong>Best Overall</strong></p><h3>Acme Thermal Glove</h3><p>$45</p>"
            "<p>Warm, light and grippy on cold mornings.</p>"
        )

    def test_prepends_without_marker(self, quiet_logger) -> None:
        out = inject_card_header("<p>Body text.</p>", ACME, PATTERN, logger=quiet_logger)
        assert out.startswith("<p><strong>Best Overall</strong></p><h3>Acme Thermal Glove</h3><p>$45</p>")
        assert out.endswith("<p>Body text.</p>")

    def test_skips_when_title_present(self, quiet_logger) -> None:
        content = "<h2>Our Full Running Gloves Reviews</h2><h3>Acme  Thermal Glove</h3>"
        assert inject_card_header(content, ACME, PATTERN, logger=quiet_logger) == content

    def test_idempotent(self, quiet_logger) -> None:
        once = inject_card_header(_CARD_CONTENT, ACME, PATTERN, logger=quiet_logger)
        assert inject_card_header(once, ACME, PATTERN, logger=quiet_logger) == once

    def test_idempotent_without_title(self, quiet_logger) -> None:
        meta = CardMeta(badge="Best Overall", price="$45")
        once = inject_card_header("<p>Body text.</p>", meta, PATTERN, logger=quiet_logger)
        assert inject_card_header(once, meta, PATTERN, logger=quiet_logger) == once

    def test_none_or_empty_meta_is_noop(self, quiet_logger) -> None:
        assert inject_card_header(_CARD_CONTENT, None, PATTERN, logger=quiet_logger) == _CARD_CONTENT
        assert inject_card_header(_CARD_CONTENT, CardMeta(), PATTERN, logger=quiet_logger) == _CARD_CONTENT

    def test_escapes_markup_in_fields(self, quiet_logger) -> None:
        meta = CardMeta(title="Glove <Pro> & Co")
        out = inject_card_header("<p>x</p>", meta, PATTERN, logger=quiet_logger)
        assert "<h3>Glove &lt;Pro&gt; &amp; Co</h3>" in out


class TestRecoverCardHeader:
    def test_scenario(self, quiet_logger) -> None:
        cand = Candidate(title="Best Running Gloves", content=_CARD_CONTENT)
        out = recover_card_header(cand, _CARD_RAW, PATTERN, logger=quiet_logger)

        assert (
            "<h2>Our Full Running Gloves Reviews</h2>"
            "<p><strong>Best Overall</strong></p><h3>Acme Thermal Glove</h3><p>$45</p>"
        ) in out.content
        assert out.title == cand.title

    def test_twice_equals_once(self, quiet_logger) -> None:
        cand = Candidate(content=_CARD_CONTENT)
        once = recover_card_header(cand, _CARD_RAW, PATTERN, logger=quiet_logger)
        twice = recover_card_header(once, _CARD_RAW, PATTERN, logger=quiet_logger)
        assert twice.content == once.content
        assert twice is once

    def test_no_meta_keeps_candidate(self, quiet_logger) -> None:
        cand = Candidate(content="<p>Prose only.</p>")
        assert recover_card_header(cand, "<p>plain words only</p>", PATTERN, logger=quiet_logger) is cand
