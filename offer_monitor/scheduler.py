"""
APScheduler wiring for the recurring scrape pass.

Schedule (UTC)
--------------
  hourly_scrape:   minute SCRAPE_CRON_MINUTE of every hour
  startup_scrape:  once, STARTUP_SCRAPE_DELAY seconds after start()

Both jobs go through run_pass(), which refuses to start a pass while another
one is still running.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from offer_monitor.config import SCRAPE_CRON_MINUTE, STARTUP_SCRAPE_DELAY
from offer_monitor.scrapers.orchestrator import PassSummary, ScrapeOrchestrator
from offer_monitor.utils.logger import get_logger

logger = get_logger("scheduler")


class ScrapeScheduler:
    """Owns the timers that trigger scrape passes."""

    def __init__(
        self,
        orchestrator: ScrapeOrchestrator,
        cron_minute: int = SCRAPE_CRON_MINUTE,
        startup_delay: int = STARTUP_SCRAPE_DELAY,
    ):
        self.orchestrator = orchestrator
        self.cron_minute = cron_minute
        self.startup_delay = startup_delay
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._pass_in_progress = False

    @property
    def pass_in_progress(self) -> bool:
        return self._pass_in_progress

    async def run_pass(self) -> Optional[PassSummary]:
        """Run one scrape pass unless one is already running."""
        if self._pass_in_progress:
            logger.warning("scrape_pass_skipped", reason="previous pass still running")
            return None

        self._pass_in_progress = True
        try:
            return await self.orchestrator.scrape_all_offers()
        except Exception as e:
            logger.error("scrape_pass_failed", error=str(e))
            return None
        finally:
            self._pass_in_progress = False

    def start(self):
        """Schedule the hourly and startup passes. Needs a running event loop."""
        if self.scheduler and self.scheduler.running:
            return

        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.scheduler.add_job(
            self.run_pass,
            trigger="cron",
            minute=self.cron_minute,
            id="hourly_scrape",
            name="Hourly offer scrape",
            replace_existing=True,
            misfire_grace_time=600,
            coalesce=True,
        )
        self.scheduler.add_job(
            self.run_pass,
            trigger="date",
            run_date=datetime.now(timezone.utc) + timedelta(seconds=self.startup_delay),
            id="startup_scrape",
            name="Initial scrape after startup",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(
            "scheduler_started",
            cron_minute=self.cron_minute,
            startup_delay=self.startup_delay,
        )

    def stop(self):
        """Remove pending timers. A pass already running is left to finish."""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("scheduler_stopped")
        self.scheduler = None
