from datetime import datetime
from typing import Callable

from offer_monitor.models.database import utcnow
from offer_monitor.scrapers.types import ScrapeResult, ScrapeSuccess
from offer_monitor.store import MonitoredPage, OfferStore
from offer_monitor.utils.logger import get_logger

logger = get_logger("snapshot_recorder")


class SnapshotRecorder:
    """Persists successful scrape results as snapshots."""

    def __init__(self, store: OfferStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    def record(self, offer_id: int, page: MonitoredPage, result: ScrapeResult) -> bool:
        """Insert a snapshot for a successful result and refresh the page name.

        Every success is inserted, even if identical to the previous one.
        Failures write nothing. Returns True when a snapshot was inserted.
        Persistence errors propagate.
        """
        if not isinstance(result, ScrapeSuccess):
            return False

        self.store.insert_snapshot(
            offer_id=offer_id,
            page_id=page.page_id,
            creative_count=result.creative_count,
            scraped_at=self.clock(),
        )
        logger.info(
            "snapshot_recorded",
            offer_id=offer_id,
            page_id=page.page_id,
            creative_count=result.creative_count,
        )

        if result.page_name and result.page_name != page.page_name:
            self.store.update_page_name(page.page_id, result.page_name)
            logger.info(
                "page_name_updated",
                page_id=page.page_id,
                old_name=page.page_name,
                new_name=result.page_name,
            )

        return True
