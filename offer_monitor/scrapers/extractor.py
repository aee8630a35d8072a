"""Creative count and page name extraction from rendered Ad Library pages.

Both values are recovered by an ordered list of strategies. Each strategy
looks at the captured PageContent and either returns a value or None; the
first value wins. The target markup and copy change without notice, so the
count strategies go from explicit count text down to counting ad cards.
"""

import re
from typing import Optional, Protocol, Sequence

from offer_monitor.scrapers.fetcher import PageContent
from offer_monitor.scrapers.types import Extraction, ExtractionFailure, ExtractionResult
from offer_monitor.utils.logger import get_logger

logger = get_logger("extractor")

NO_COUNT_REASON = "no count pattern matched"

# 1-3 digits, then groups of three separated by comma, period or whitespace
_GROUPED_NUMBER = r"(?<!\d)(\d{1,3}(?:[,.\s]\d{3})*)"
_SEPARATORS = re.compile(r"[,.\s]")


def parse_grouped_number(value: str) -> int:
    """Parse '1,234', '1.234' or '1 234' as 1234. Periods are never decimals."""
    return int(_SEPARATORS.sub("", value))


class NameStrategy(Protocol):
    def try_extract(self, content: PageContent) -> Optional[str]:
        ...


class CountStrategy(Protocol):
    def try_extract(self, content: PageContent) -> Optional[int]:
        ...


class SelectorText:
    """Text of the first element matching a CSS selector."""

    def __init__(self, selector: str):
        self.selector = selector

    def try_extract(self, content: PageContent) -> Optional[str]:
        return content.select_text(self.selector)

    def __repr__(self):
        return f"SelectorText({self.selector!r})"


class CountPattern:
    """A grouped number followed by a word, e.g. '1,234 ads'."""

    def __init__(self, word: str):
        self.word = word
        # No trailing boundary: body textContent runs the word into the next element ("1,234 adsFilters")
        self.pattern = re.compile(_GROUPED_NUMBER + r"\s+" + word, re.IGNORECASE)

    def try_extract(self, content: PageContent) -> Optional[int]:
        match = self.pattern.search(content.text or "")
        if not match:
            return None
        count = parse_grouped_number(match.group(1))
        logger.debug("count_pattern_matched", word=self.word, matched=match.group(1), parsed=count)
        return count

    def __repr__(self):
        return f"CountPattern({self.word!r})"


class ElementCount:
    """Number of elements matching a selector, when there is at least one."""

    def __init__(self, selector: str):
        self.selector = selector

    def try_extract(self, content: PageContent) -> Optional[int]:
        count = content.count(self.selector)
        return count if count > 0 else None

    def __repr__(self):
        return f"ElementCount({self.selector!r})"


DEFAULT_NAME_STRATEGIES = (
    SelectorText('[data-testid="page-name"]'),
    SelectorText('a[href*="/ads/library/?active_status"] span'),
    SelectorText('div[role="heading"]'),
    SelectorText(".x1lliihq.x6ikm8r.x10wlt62"),
)

DEFAULT_COUNT_STRATEGIES = (
    CountPattern("ads?"),
    CountPattern("results?"),
    ElementCount('[data-testid="ad-card"]'),
)


class Extractor:
    """Runs name and count strategies over captured page content."""

    def __init__(
        self,
        name_strategies: Sequence[NameStrategy] = DEFAULT_NAME_STRATEGIES,
        count_strategies: Sequence[CountStrategy] = DEFAULT_COUNT_STRATEGIES,
    ):
        self.name_strategies = list(name_strategies)
        self.count_strategies = list(count_strategies)

    def extract(self, content: PageContent) -> ExtractionResult:
        """Return an Extraction, or an ExtractionFailure when no count is found."""
        creative_count = self.extract_count(content)
        if creative_count is None:
            logger.info("count_not_found", url=content.url)
            return ExtractionFailure(reason=NO_COUNT_REASON)

        return Extraction(creative_count=creative_count, page_name=self.extract_name(content))

    def extract_name(self, content: PageContent) -> Optional[str]:
        for strategy in self.name_strategies:
            try:
                name = strategy.try_extract(content)
            except Exception as e:
                logger.warning("name_strategy_failed", strategy=repr(strategy), error=str(e))
                continue
            if name and name.strip():
                return name.strip()
        return None

    def extract_count(self, content: PageContent) -> Optional[int]:
        for strategy in self.count_strategies:
            try:
                count = strategy.try_extract(content)
            except Exception as e:
                logger.warning("count_strategy_failed", strategy=repr(strategy), error=str(e))
                continue
            if count is not None:
                logger.info("creative_count_extracted", strategy=repr(strategy), count=count)
                return count
        return None
