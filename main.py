#!/usr/bin/env python3
"""
Offer Monitor - Main CLI Entry Point

Usage:
    python main.py                                  # Run one scrape pass over all active offers
    python main.py --serve                          # Run hourly passes until interrupted
    python main.py --offer {uuid} --user {user_id}  # Refresh one offer now
    python main.py --init-db                        # Create database tables
"""

import asyncio
import json
import sys
import click

from offer_monitor.exceptions import NoPagesError, OfferNotFoundError
from offer_monitor.models import init_db
from offer_monitor.scheduler import ScrapeScheduler
from offer_monitor.scrapers.orchestrator import ScrapeOrchestrator, trigger_refresh
from offer_monitor.store import SqlAlchemyOfferStore
from offer_monitor.utils.logger import get_logger

logger = get_logger("main")


async def serve(orchestrator: ScrapeOrchestrator):
    """Start the scheduler and keep the event loop alive."""
    scheduler = ScrapeScheduler(orchestrator)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.stop()


@click.command()
@click.option("--serve", "serve_forever", is_flag=True, help="Run the hourly scrape scheduler")
@click.option("--offer", "offer_uuid", type=str, help="Refresh a single offer by uuid")
@click.option("--user", "user_id", type=str, help="Owner of the offer to refresh")
@click.option("--init-db", "initialize_db", is_flag=True, help="Initialize database tables")
def main(serve_forever: bool, offer_uuid: str, user_id: str, initialize_db: bool):
    """Facebook Ad Library offer monitor CLI."""

    if initialize_db:
        click.echo("Initializing database tables...")
        init_db()
        click.echo("Database initialized successfully!")
        return

    store = SqlAlchemyOfferStore()
    orchestrator = ScrapeOrchestrator(store)

    try:
        if offer_uuid:
            if not user_id:
                click.echo("Error: --user is required when refreshing an offer")
                sys.exit(1)
            click.echo(f"Refreshing offer: {offer_uuid}")
            response = asyncio.run(trigger_refresh(store, orchestrator, offer_uuid, user_id))
            click.echo(json.dumps(response, indent=2))
            sys.exit(0 if response["success"] else 1)

        if serve_forever:
            click.echo("Starting scrape scheduler...")
            asyncio.run(serve(orchestrator))
            return

        click.echo("Starting scrape pass...")
        summary = asyncio.run(orchestrator.scrape_all_offers())
        click.echo(
            f"Scrape pass complete: {summary.pages_succeeded} succeeded, "
            f"{summary.pages_failed} failed, {summary.pages_attempted} attempted "
            f"({summary.offers_failed} offers failed)"
        )
        sys.exit(0)
    except (OfferNotFoundError, NoPagesError) as e:
        click.echo(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error("command_failed", error=str(e))
        click.echo(f"Failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
