"""
tests/test_extractor.py

Unit tests for the count and name extraction strategies.

Pure Python, no browser: PageContent is built from literal text and HTML.
"""

from __future__ import annotations

import pytest

from offer_monitor.scrapers.extractor import (
    NO_COUNT_REASON,
    CountPattern,
    ElementCount,
    Extractor,
    SelectorText,
    parse_grouped_number,
)
from offer_monitor.scrapers.fetcher import PageContent
from offer_monitor.scrapers.types import Extraction, ExtractionFailure

URL = "https://www.facebook.com/ads/library/?view_all_page_id=1"


def content(text: str = "", html: str = "") -> PageContent:
    return PageContent(url=URL, text=text, html=html)


def ad_cards(k: int) -> str:
    return "".join('<div data-testid="ad-card">ad</div>' for _ in range(k))


@pytest.fixture()
def extractor() -> Extractor:
    return Extractor()


# ---------------------------------------------------------------------------
# Number parsing
# ---------------------------------------------------------------------------


class TestParseGroupedNumber:
    @pytest.mark.parametrize("value", ["1,234", "1.234", "1 234"])
    def test_separators_are_grouping_only(self, value: str) -> None:
        assert parse_grouped_number(value) == 1234

    def test_multiple_groups(self) -> None:
        assert parse_grouped_number("12.345.678") == 12345678


# ---------------------------------------------------------------------------
# Count strategies
# ---------------------------------------------------------------------------


class TestCountFromText:
    @pytest.mark.parametrize("text", ["1,234 ads", "1.234 ads", "1 234 ads"])
    def test_grouped_ads_count(self, extractor: Extractor, text: str) -> None:
        result = extractor.extract(content(f"Results\n~{text} match your search"))
        assert result == Extraction(creative_count=1234)

    def test_non_breaking_space_separator(self, extractor: Extractor) -> None:
        result = extractor.extract(content("1\u00a0234\u00a0ads"))
        assert isinstance(result, Extraction)
        assert result.creative_count == 1234

    def test_singular_and_case_insensitive(self, extractor: Extractor) -> None:
        assert extractor.extract(content("1 AD")).creative_count == 1

    def test_ads_preferred_over_results(self, extractor: Extractor) -> None:
        result = extractor.extract(content("About 900 results. 45 ads are active"))
        assert result.creative_count == 45

    def test_results_fallback(self, extractor: Extractor) -> None:
        result = extractor.extract(content("~2,100 results"))
        assert result.creative_count == 2100

    def test_first_ads_match_wins(self, extractor: Extractor) -> None:
        result = extractor.extract(content("12 ads in US, 300 ads worldwide"))
        assert result.creative_count == 12

    def test_ads_joined_to_next_element(self, extractor: Extractor) -> None:
        result = extractor.extract(content("~1,234 adsFilters"))
        assert result.creative_count == 1234

    def test_results_joined_to_next_element(self, extractor: Extractor) -> None:
        result = extractor.extract(content("~2,100 resultsThese results include ads"))
        assert result.creative_count == 2100

    def test_count_pattern_without_trailing_space(self) -> None:
        strategy = CountPattern("results?")
        assert strategy.try_extract(content("2,100 resultsThese")) == 2100

    def test_does_not_start_inside_a_number(self) -> None:
        strategy = CountPattern("ads?")
        assert strategy.try_extract(content("12345 ads")) is None

    def test_zero_is_a_real_count(self, extractor: Extractor) -> None:
        result = extractor.extract(content("0 ads"))
        assert result == Extraction(creative_count=0)


class TestCountFromAdCards:
    @pytest.mark.parametrize("k", [1, 3, 17])
    def test_counts_ad_cards_when_no_text_matches(self, extractor: Extractor, k: int) -> None:
        result = extractor.extract(content("Ad Library", ad_cards(k)))
        assert result == Extraction(creative_count=k)

    def test_text_count_beats_ad_cards(self, extractor: Extractor) -> None:
        result = extractor.extract(content("7 ads", ad_cards(2)))
        assert result.creative_count == 7

    def test_zero_cards_is_not_a_match(self) -> None:
        assert ElementCount('[data-testid="ad-card"]').try_extract(content("", "<div></div>")) is None


class TestCountFailure:
    def test_nothing_recognizable_fails(self, extractor: Extractor) -> None:
        result = extractor.extract(content("Ad Library\nSearch ads", "<div>nothing</div>"))
        assert result == ExtractionFailure(reason=NO_COUNT_REASON)

    def test_empty_page_fails(self, extractor: Extractor) -> None:
        assert isinstance(extractor.extract(content()), ExtractionFailure)

    def test_raising_strategy_is_skipped(self) -> None:
        class Broken:
            def try_extract(self, _content):
                raise ValueError("bad selector")

        extractor = Extractor(count_strategies=[Broken(), CountPattern("ads?")])
        assert extractor.extract(content("5 ads")).creative_count == 5

    def test_all_strategies_raising_is_a_failure(self) -> None:
        class Broken:
            def try_extract(self, _content):
                raise ValueError("bad selector")

        extractor = Extractor(count_strategies=[Broken()])
        assert isinstance(extractor.extract(content("5 ads")), ExtractionFailure)


# ---------------------------------------------------------------------------
# Name strategies
# ---------------------------------------------------------------------------


class TestPageName:
    def test_test_id_first(self, extractor: Extractor) -> None:
        html = (
            '<div role="heading">Heading Name</div>'
            '<span data-testid="page-name">  Acme Store  </span>'
        )
        result = extractor.extract(content("10 ads", html))
        assert result.page_name == "Acme Store"

    def test_library_link_span(self, extractor: Extractor) -> None:
        html = '<a href="/ads/library/?active_status=all&view_all_page_id=1"><span>Acme</span></a>'
        assert extractor.extract(content("10 ads", html)).page_name == "Acme"

    def test_heading_role(self, extractor: Extractor) -> None:
        html = '<div role="heading">Acme Heading</div>'
        assert extractor.extract(content("10 ads", html)).page_name == "Acme Heading"

    def test_class_combination(self, extractor: Extractor) -> None:
        html = '<span class="x1lliihq x6ikm8r x10wlt62 other">Acme Class</span>'
        assert extractor.extract(content("10 ads", html)).page_name == "Acme Class"

    def test_blank_match_falls_through(self, extractor: Extractor) -> None:
        html = '<span data-testid="page-name">   </span><div role="heading">Fallback</div>'
        assert extractor.extract(content("10 ads", html)).page_name == "Fallback"

    def test_name_absent_does_not_fail(self, extractor: Extractor) -> None:
        assert extractor.extract(content("10 ads")) == Extraction(creative_count=10, page_name=None)

    def test_name_strategy_error_is_not_fatal(self) -> None:
        class Broken:
            def try_extract(self, _content):
                raise RuntimeError("detached node")

        extractor = Extractor(name_strategies=[Broken(), SelectorText('div[role="heading"]')])
        result = extractor.extract(content("3 ads", '<div role="heading">Acme</div>'))
        assert result == Extraction(creative_count=3, page_name="Acme")
