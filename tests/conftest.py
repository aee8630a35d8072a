"""
Shared fixtures: in-memory SQLite store, fake fetcher and fake store.

Environment is set before any offer_monitor import so the module-level
engine and log file never touch the working tree.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "offer_monitor_tests.log"))

from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from offer_monitor.exceptions import FetchError
from offer_monitor.models import init_db
from offer_monitor.scrapers.fetcher import PageContent
from offer_monitor.store import MonitoredPage, OfferRef, SqlAlchemyOfferStore


class FakeFetcher:
    """Returns canned content per URL; exceptions in the map are raised."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.calls: list[str] = []

    async def fetch(self, url: str) -> PageContent:
        self.calls.append(url)
        outcome = self.pages.get(url)
        if outcome is None:
            raise FetchError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeStore:
    """In-memory OfferStore."""

    def __init__(self, offers: Optional[list[OfferRef]] = None, pages: Optional[dict] = None):
        self.offers = offers or []
        self.pages = pages or {}
        self.snapshots: list[dict] = []
        self.name_updates: list[tuple[int, str]] = []
        self.owners: dict[str, str] = {}
        self.fail_pages_for: set[int] = set()
        self.fail_insert = False

    def list_active_offers(self) -> list[OfferRef]:
        return list(self.offers)

    def list_pages_for_offer(self, offer_id: int) -> list[MonitoredPage]:
        if offer_id in self.fail_pages_for:
            raise RuntimeError("database unavailable")
        return list(self.pages.get(offer_id, []))

    def insert_snapshot(self, offer_id: int, page_id: int, creative_count: int, scraped_at: datetime) -> None:
        if self.fail_insert:
            raise RuntimeError("insert failed")
        self.snapshots.append({
            "offer_id": offer_id,
            "page_id": page_id,
            "creative_count": creative_count,
            "scraped_at": scraped_at,
        })

    def update_page_name(self, page_id: int, page_name: str) -> None:
        self.name_updates.append((page_id, page_name))

    def find_offer_for_user(self, offer_uuid: str, user_id: str) -> Optional[OfferRef]:
        for offer in self.offers:
            if offer.uuid == offer_uuid and self.owners.get(offer_uuid) == user_id:
                return offer
        return None


def ads_page(url: str, text: str, html: str = "") -> PageContent:
    return PageContent(url=url, text=text, html=html)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture()
def sql_store(session_factory) -> SqlAlchemyOfferStore:
    return SqlAlchemyOfferStore(session_factory)
