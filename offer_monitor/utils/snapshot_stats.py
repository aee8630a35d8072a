"""Creative count trends for offers.

An offer's creative count at a point in time is the sum of the most recent
snapshot of each of its pages. Comparing the current total with the total
as of a day earlier tells whether an offer is scaling or declining.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from offer_monitor.store import SnapshotRow

SCALING = "scaling"
DECLINING = "declining"
STABLE = "stable"


@dataclass
class OfferTotal:
    offer_id: int
    creative_count: int
    scraped_at: datetime


@dataclass
class OfferDelta:
    offer_id: int
    current: int
    previous: int
    delta: int
    trend: str

    def to_dict(self) -> dict:
        return {
            "offer_id": self.offer_id,
            "current": self.current,
            "previous": self.previous,
            "delta": self.delta,
            "trend": self.trend,
        }


def latest_totals(snapshots: Iterable[SnapshotRow], as_of: Optional[datetime] = None) -> dict[int, OfferTotal]:
    """Sum each offer's latest snapshot per page, ignoring snapshots after as_of."""
    latest: dict[tuple[int, Optional[int]], SnapshotRow] = {}
    for snapshot in snapshots:
        if as_of is not None and snapshot.scraped_at > as_of:
            continue
        key = (snapshot.offer_id, snapshot.page_id)
        current = latest.get(key)
        if current is None or snapshot.scraped_at > current.scraped_at:
            latest[key] = snapshot

    totals: dict[int, OfferTotal] = {}
    for snapshot in latest.values():
        total = totals.get(snapshot.offer_id)
        if total is None:
            totals[snapshot.offer_id] = OfferTotal(
                offer_id=snapshot.offer_id,
                creative_count=snapshot.creative_count,
                scraped_at=snapshot.scraped_at,
            )
        else:
            total.creative_count += snapshot.creative_count
            total.scraped_at = max(total.scraped_at, snapshot.scraped_at)
    return totals


def classify_trend(current: int, previous: int, threshold: float = 0.1) -> str:
    """Label a change as scaling, declining or stable.

    threshold is the relative change needed to count as movement.
    """
    if previous == 0:
        return SCALING if current > 0 else STABLE
    change = (current - previous) / previous
    if change >= threshold:
        return SCALING
    if change <= -threshold:
        return DECLINING
    return STABLE


def offer_deltas(
    snapshots: Iterable[SnapshotRow],
    offer_ids: Iterable[int],
    now: datetime,
    window: timedelta = timedelta(hours=24),
    threshold: float = 0.1,
) -> list[OfferDelta]:
    """Current total vs. total as of `window` ago, for each offer id."""
    snapshots = list(snapshots)
    current_totals = latest_totals(snapshots, as_of=now)
    previous_totals = latest_totals(snapshots, as_of=now - window)

    deltas = []
    for offer_id in offer_ids:
        current = current_totals[offer_id].creative_count if offer_id in current_totals else 0
        previous = previous_totals[offer_id].creative_count if offer_id in previous_totals else 0
        deltas.append(OfferDelta(
            offer_id=offer_id,
            current=current,
            previous=previous,
            delta=current - previous,
            trend=classify_trend(current, previous, threshold),
        ))
    return deltas
