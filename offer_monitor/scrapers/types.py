"""Result types passed between the fetcher, extractor and scrape task."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Extraction:
    creative_count: int
    page_name: Optional[str] = None


@dataclass(frozen=True)
class ExtractionFailure:
    reason: str


ExtractionResult = Union[Extraction, ExtractionFailure]


@dataclass(frozen=True)
class ScrapeSuccess:
    """A page was loaded and its creative count recovered."""
    creative_count: int
    page_name: Optional[str] = None

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ScrapeFailure:
    """A page scrape attempt that produced no count."""
    reason: str

    @property
    def success(self) -> bool:
        return False


ScrapeResult = Union[ScrapeSuccess, ScrapeFailure]
