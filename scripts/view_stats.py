#!/usr/bin/env python3
"""
View creative count snapshots and trends.

Usage:
    python scripts/view_stats.py
    python scripts/view_stats.py --offer {uuid} --limit 20
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import click

from offer_monitor.models import SessionLocal, Offer, utcnow
from offer_monitor.store import SqlAlchemyOfferStore
from offer_monitor.utils.snapshot_stats import latest_totals, offer_deltas


@click.command()
@click.option("--offer", "offer_uuid", type=str, help="Show the snapshot series of one offer")
@click.option("--limit", type=int, default=30, help="Number of snapshots to show")
def main(offer_uuid: str, limit: int):
    """View offer monitor statistics."""

    db = SessionLocal()
    store = SqlAlchemyOfferStore()

    try:
        if offer_uuid:
            show_offer_series(db, store, offer_uuid, limit)
        else:
            show_trends(db, store)
    finally:
        db.close()


def show_trends(db, store: SqlAlchemyOfferStore):
    """Show current totals and 24h change for every active offer."""
    click.echo("\n=== Offer Trends (24h) ===\n")

    offers = db.query(Offer).filter(Offer.is_active == True).order_by(Offer.name).all()
    if not offers:
        click.echo("No active offers found.")
        return

    snapshots = []
    for offer in offers:
        snapshots.extend(store.list_snapshots(offer.id, limit=1000))

    deltas = {d.offer_id: d for d in offer_deltas(snapshots, [o.id for o in offers], now=utcnow())}
    totals = latest_totals(snapshots)

    click.echo(f"{'Offer':<30} {'Current':>8} {'24h ago':>8} {'Delta':>7}  {'Trend':<10} Last scraped")
    click.echo("-" * 90)
    for offer in offers:
        delta = deltas[offer.id]
        last = totals[offer.id].scraped_at.strftime("%Y-%m-%d %H:%M") if offer.id in totals else "never"
        click.echo(
            f"{(offer.name or offer.uuid)[:30]:<30} {delta.current:>8} {delta.previous:>8} "
            f"{delta.delta:>+7}  {delta.trend:<10} {last}"
        )


def show_offer_series(db, store: SqlAlchemyOfferStore, offer_uuid: str, limit: int):
    """Show the most recent snapshots of one offer."""
    offer = db.query(Offer).filter(Offer.uuid == offer_uuid).first()
    if not offer:
        click.echo(f"Error: Offer {offer_uuid} not found")
        sys.exit(1)

    click.echo(f"\n=== Snapshots for {offer.name or offer.uuid} ===\n")

    snapshots = store.list_snapshots(offer.id, limit=limit)
    if not snapshots:
        click.echo("No snapshots found.")
        return

    for snapshot in snapshots:
        click.echo(
            f"  {snapshot.scraped_at.strftime('%Y-%m-%d %H:%M')}  "
            f"page {snapshot.page_id}: {snapshot.creative_count} creatives"
        )


if __name__ == "__main__":
    main()
