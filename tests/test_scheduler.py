"""
tests/test_scheduler.py

ScrapeScheduler lifecycle and the single-flight guard around passes.
"""

from __future__ import annotations

import asyncio

from offer_monitor.scheduler import ScrapeScheduler
from offer_monitor.scrapers.orchestrator import PassSummary


class BlockingOrchestrator:
    """scrape_all_offers() waits until released."""

    def __init__(self):
        self.calls = 0
        self.release = asyncio.Event()

    async def scrape_all_offers(self) -> PassSummary:
        self.calls += 1
        await self.release.wait()
        return PassSummary(pages_succeeded=1, pages_attempted=1)


class FailingOrchestrator:
    async def scrape_all_offers(self) -> PassSummary:
        raise RuntimeError("database down")


class TestScheduleLifecycle:
    async def test_start_registers_hourly_and_startup_jobs(self) -> None:
        scheduler = ScrapeScheduler(BlockingOrchestrator(), cron_minute=0, startup_delay=60)
        scheduler.start()
        try:
            jobs = {job.id: job for job in scheduler.scheduler.get_jobs()}
            assert set(jobs) == {"hourly_scrape", "startup_scrape"}
            assert "minute='0'" in str(jobs["hourly_scrape"].trigger)
        finally:
            scheduler.stop()

        assert scheduler.scheduler is None

    async def test_start_twice_keeps_one_scheduler(self) -> None:
        scheduler = ScrapeScheduler(BlockingOrchestrator())
        scheduler.start()
        first = scheduler.scheduler
        scheduler.start()
        try:
            assert scheduler.scheduler is first
        finally:
            scheduler.stop()

    def test_stop_without_start(self) -> None:
        ScrapeScheduler(BlockingOrchestrator()).stop()


class TestSingleFlight:
    async def test_overlapping_pass_is_skipped(self) -> None:
        orchestrator = BlockingOrchestrator()
        scheduler = ScrapeScheduler(orchestrator)

        first = asyncio.create_task(scheduler.run_pass())
        await asyncio.sleep(0)
        assert scheduler.pass_in_progress is True

        assert await scheduler.run_pass() is None
        assert orchestrator.calls == 1

        orchestrator.release.set()
        summary = await first
        assert summary.pages_succeeded == 1
        assert scheduler.pass_in_progress is False

    async def test_next_pass_runs_after_previous_finished(self) -> None:
        orchestrator = BlockingOrchestrator()
        orchestrator.release.set()
        scheduler = ScrapeScheduler(orchestrator)

        await scheduler.run_pass()
        await scheduler.run_pass()

        assert orchestrator.calls == 2

    async def test_failed_pass_releases_guard(self) -> None:
        scheduler = ScrapeScheduler(FailingOrchestrator())

        assert await scheduler.run_pass() is None
        assert scheduler.pass_in_progress is False
