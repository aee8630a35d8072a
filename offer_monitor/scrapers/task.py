from typing import Optional

from offer_monitor.exceptions import FetchError
from offer_monitor.scrapers.extractor import Extractor
from offer_monitor.scrapers.fetcher import PageFetcher, PlaywrightFetcher
from offer_monitor.scrapers.types import ExtractionFailure, ScrapeFailure, ScrapeResult, ScrapeSuccess
from offer_monitor.utils.logger import get_logger

logger = get_logger("scrape_task")

EXTRACTION_FAILED_REASON = "could not extract creative count"


class ScrapeTask:
    """Fetches one page and extracts its creative count.

    run() always returns a ScrapeSuccess or ScrapeFailure; browser, network
    and parsing errors are converted into a failure reason.
    """

    def __init__(self, fetcher: Optional[PageFetcher] = None, extractor: Optional[Extractor] = None):
        self.fetcher = fetcher or PlaywrightFetcher()
        self.extractor = extractor or Extractor()

    async def run(self, url: str) -> ScrapeResult:
        try:
            content = await self.fetcher.fetch(url)
        except FetchError as e:
            logger.warning("scrape_fetch_failed", url=url, reason=e.reason)
            return ScrapeFailure(reason=e.reason)
        except Exception as e:
            logger.error("scrape_fetch_error", url=url, error=str(e), error_type=type(e).__name__)
            return ScrapeFailure(reason=str(e) or type(e).__name__)

        try:
            extraction = self.extractor.extract(content)
        except Exception as e:
            logger.error("scrape_extract_error", url=url, error=str(e), error_type=type(e).__name__)
            return ScrapeFailure(reason=str(e) or type(e).__name__)

        if isinstance(extraction, ExtractionFailure):
            logger.warning("scrape_extract_failed", url=url, reason=extraction.reason)
            return ScrapeFailure(reason=EXTRACTION_FAILED_REASON)

        return ScrapeSuccess(creative_count=extraction.creative_count, page_name=extraction.page_name)
