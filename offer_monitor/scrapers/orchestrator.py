import asyncio
import random
from dataclasses import dataclass, field
from typing import Optional

from offer_monitor.config import MIN_PAGE_DELAY, MAX_PAGE_DELAY
from offer_monitor.exceptions import NoPagesError, OfferNotFoundError
from offer_monitor.scrapers.recorder import SnapshotRecorder
from offer_monitor.scrapers.task import ScrapeTask
from offer_monitor.scrapers.types import ScrapeSuccess
from offer_monitor.store import OfferRef, OfferStore
from offer_monitor.utils.logger import get_logger

logger = get_logger("orchestrator")


@dataclass
class PassSummary:
    """Counters for one recurring scrape pass."""
    offers_total: int = 0
    offers_failed: int = 0
    pages_attempted: int = 0
    pages_succeeded: int = 0
    pages_failed: int = 0
    snapshots_recorded: int = 0


@dataclass
class PageRefreshResult:
    page_id: int
    page_name: str
    success: bool
    creative_count: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "page_id": self.page_id,
            "page_name": self.page_name,
            "success": self.success,
        }
        if self.creative_count is not None:
            result["creative_count"] = self.creative_count
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class RefreshSummary:
    """Outcome of an on-demand refresh of one offer."""
    results: list[PageRefreshResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def success(self) -> bool:
        return self.succeeded > 0

    @property
    def message(self) -> str:
        return f"Updated {self.succeeded}/{self.total} pages"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "results": [r.to_dict() for r in self.results],
        }


class ScrapeOrchestrator:
    """Runs scrape tasks over offers and their pages, one page at a time."""

    def __init__(
        self,
        store: OfferStore,
        task: Optional[ScrapeTask] = None,
        recorder: Optional[SnapshotRecorder] = None,
        min_delay: float = MIN_PAGE_DELAY,
        max_delay: float = MAX_PAGE_DELAY,
        sleep=asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.task = task or ScrapeTask()
        self.recorder = recorder or SnapshotRecorder(store)
        self.min_delay = min_delay
        self.max_delay = max_delay
        self._sleep = sleep
        self._rng = rng or random.Random()

    def _next_delay(self) -> float:
        """Uniform delay in [min_delay, max_delay)."""
        return self.min_delay + self._rng.random() * (self.max_delay - self.min_delay)

    async def scrape_all_offers(self) -> PassSummary:
        """Scrape every page of every active offer and record snapshots.

        A failed page or offer is counted and skipped; nothing is retried
        until the next pass. Consecutive page scrapes are separated by a
        randomized delay, including across offer boundaries.
        """
        summary = PassSummary()
        logger.info("scrape_pass_started")

        offers = self.store.list_active_offers()
        summary.offers_total = len(offers)
        logger.info("offers_to_scrape", count=len(offers))

        for offer in offers:
            try:
                await self._process_offer(offer, summary)
            except Exception as e:
                summary.offers_failed += 1
                logger.error("offer_failed", offer_id=offer.offer_id, name=offer.name, error=str(e))

        logger.info(
            "scrape_pass_completed",
            pages_succeeded=summary.pages_succeeded,
            pages_failed=summary.pages_failed,
            pages_attempted=summary.pages_attempted,
            offers_total=summary.offers_total,
            offers_failed=summary.offers_failed,
        )
        return summary

    async def _process_offer(self, offer: OfferRef, summary: PassSummary):
        """Scrape all pages of one offer. Persistence errors propagate."""
        logger.info("processing_offer", offer_id=offer.offer_id, name=offer.name)

        pages = self.store.list_pages_for_offer(offer.offer_id)
        if not pages:
            summary.offers_failed += 1
            logger.warning("offer_has_no_pages", offer_id=offer.offer_id, name=offer.name)
            return

        for page in pages:
            # Delay before every scrape but the first of the pass
            if summary.pages_attempted > 0:
                delay = self._next_delay()
                logger.debug("waiting_between_pages", delay=delay)
                await self._sleep(delay)

            summary.pages_attempted += 1
            result = await self.task.run(page.url)

            if isinstance(result, ScrapeSuccess):
                try:
                    recorded = self.recorder.record(offer.offer_id, page, result)
                except Exception:
                    # Counted here so attempted == succeeded + failed; the offer still fails
                    summary.pages_failed += 1
                    raise
                if recorded:
                    summary.snapshots_recorded += 1
                summary.pages_succeeded += 1
                logger.info(
                    "page_scraped",
                    offer_id=offer.offer_id,
                    page_id=page.page_id,
                    creative_count=result.creative_count,
                )
            else:
                summary.pages_failed += 1
                logger.warning(
                    "page_scrape_failed",
                    offer_id=offer.offer_id,
                    page_id=page.page_id,
                    reason=result.reason,
                )

    async def refresh_offer(self, offer_id: int) -> RefreshSummary:
        """Scrape all pages of one offer now and report per-page outcomes.

        Raises NoPagesError when the offer has no pages.
        """
        pages = self.store.list_pages_for_offer(offer_id)
        if not pages:
            raise NoPagesError(f"No pages found for offer {offer_id}")

        logger.info("refresh_started", offer_id=offer_id, pages=len(pages))
        summary = RefreshSummary()

        for page in pages:
            stored_name = page.page_name or "Unknown"
            result = await self.task.run(page.url)

            if not isinstance(result, ScrapeSuccess):
                summary.results.append(PageRefreshResult(
                    page_id=page.page_id,
                    page_name=stored_name,
                    success=False,
                    error=result.reason,
                ))
                continue

            try:
                self.recorder.record(offer_id, page, result)
            except Exception as e:
                logger.error("refresh_record_failed", offer_id=offer_id, page_id=page.page_id, error=str(e))
                summary.results.append(PageRefreshResult(
                    page_id=page.page_id,
                    page_name=stored_name,
                    success=False,
                    error=str(e) or type(e).__name__,
                ))
                continue

            summary.results.append(PageRefreshResult(
                page_id=page.page_id,
                page_name=result.page_name or stored_name,
                success=True,
                creative_count=result.creative_count,
            ))

        logger.info("refresh_completed", offer_id=offer_id, succeeded=summary.succeeded, total=summary.total)
        return summary


async def trigger_refresh(
    store: OfferStore,
    orchestrator: ScrapeOrchestrator,
    offer_uuid: str,
    user_id: str,
) -> dict:
    """Refresh an offer on behalf of a user and return the response payload.

    Raises OfferNotFoundError when the offer is missing or owned by someone
    else, and NoPagesError when it has no pages.
    """
    offer = store.find_offer_for_user(offer_uuid, user_id)
    if offer is None:
        raise OfferNotFoundError(f"Offer {offer_uuid} not found or unauthorized")

    summary = await orchestrator.refresh_offer(offer.offer_id)
    return summary.to_dict()
