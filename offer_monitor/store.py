"""Persistence collaborator used by the scraping core.

The core only needs a handful of reads and two writes; everything else about
offers and pages is owned by the application that manages them.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from offer_monitor.models import (
    SessionLocal,
    Offer,
    FacebookPage,
    OfferPage,
    CreativeSnapshot,
    utcnow,
)


@dataclass(frozen=True)
class OfferRef:
    offer_id: int
    name: Optional[str] = None
    uuid: Optional[str] = None


@dataclass(frozen=True)
class MonitoredPage:
    page_id: int
    url: str
    page_name: Optional[str] = None


@dataclass(frozen=True)
class SnapshotRow:
    offer_id: int
    page_id: Optional[int]
    creative_count: int
    scraped_at: datetime


class OfferStore(Protocol):
    def list_active_offers(self) -> list[OfferRef]:
        ...

    def list_pages_for_offer(self, offer_id: int) -> list[MonitoredPage]:
        ...

    def insert_snapshot(self, offer_id: int, page_id: int, creative_count: int, scraped_at: datetime) -> None:
        ...

    def update_page_name(self, page_id: int, page_name: str) -> None:
        ...

    def find_offer_for_user(self, offer_uuid: str, user_id: str) -> Optional[OfferRef]:
        ...


class SqlAlchemyOfferStore:
    """OfferStore backed by the SQLAlchemy models. One session per call."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        session: Session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list_active_offers(self) -> list[OfferRef]:
        with self._session_scope() as db:
            offers = db.query(Offer).filter(Offer.is_active == True).order_by(Offer.id).all()
            return [OfferRef(offer_id=o.id, name=o.name, uuid=o.uuid) for o in offers]

    def list_pages_for_offer(self, offer_id: int) -> list[MonitoredPage]:
        with self._session_scope() as db:
            rows = (
                db.query(FacebookPage)
                .join(OfferPage, OfferPage.page_id == FacebookPage.id)
                .filter(OfferPage.offer_id == offer_id)
                .order_by(OfferPage.id)
                .all()
            )
            return [MonitoredPage(page_id=p.id, url=p.url, page_name=p.page_name) for p in rows]

    def insert_snapshot(self, offer_id: int, page_id: int, creative_count: int, scraped_at: datetime) -> None:
        with self._session_scope() as db:
            db.add(CreativeSnapshot(
                offer_id=offer_id,
                page_id=page_id,
                creative_count=creative_count,
                scraped_at=scraped_at,
            ))

    def update_page_name(self, page_id: int, page_name: str) -> None:
        with self._session_scope() as db:
            page = db.get(FacebookPage, page_id)
            if page is None:
                return
            page.page_name = page_name
            page.updated_at = utcnow()

    def find_offer_for_user(self, offer_uuid: str, user_id: str) -> Optional[OfferRef]:
        with self._session_scope() as db:
            offer = (
                db.query(Offer)
                .filter(Offer.uuid == offer_uuid, Offer.user_id == user_id)
                .first()
            )
            if offer is None:
                return None
            return OfferRef(offer_id=offer.id, name=offer.name, uuid=offer.uuid)

    def list_snapshots(
        self,
        offer_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 30,
    ) -> list[SnapshotRow]:
        """Snapshots of an offer, newest first."""
        with self._session_scope() as db:
            query = db.query(CreativeSnapshot).filter(CreativeSnapshot.offer_id == offer_id)
            if start:
                query = query.filter(CreativeSnapshot.scraped_at >= start)
            if end:
                query = query.filter(CreativeSnapshot.scraped_at <= end)
            rows = (
                query.order_by(CreativeSnapshot.scraped_at.desc(), CreativeSnapshot.id.desc())
                .limit(limit)
                .all()
            )
            return [
                SnapshotRow(
                    offer_id=s.offer_id,
                    page_id=s.page_id,
                    creative_count=s.creative_count,
                    scraped_at=s.scraped_at,
                )
                for s in rows
            ]
