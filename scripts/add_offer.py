#!/usr/bin/env python3
"""
Add or manage offers and their monitored pages.

Usage:
    python scripts/add_offer.py --user {user_id} --name {name} --url {ad_library_url}
    python scripts/add_offer.py --offer {uuid} --url {ad_library_url} [--primary]
    python scripts/add_offer.py --list
    python scripts/add_offer.py --deactivate {uuid}
    python scripts/add_offer.py --activate {uuid}
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from sqlalchemy.exc import IntegrityError

from offer_monitor.models import SessionLocal, Offer, FacebookPage, OfferPage, init_db


@click.command()
@click.option("--user", "user_id", type=str, help="Owner of the new offer")
@click.option("--name", type=str, help="Name of the new offer")
@click.option("--offer", "offer_uuid", type=str, help="Existing offer uuid to attach a page to")
@click.option("--url", type=str, help="Facebook Ad Library URL to monitor")
@click.option("--primary", is_flag=True, help="Mark the attached page as primary")
@click.option("--list", "list_offers", is_flag=True, help="List all offers and pages")
@click.option("--deactivate", type=str, help="Deactivate an offer by uuid")
@click.option("--activate", type=str, help="Activate an offer by uuid")
@click.option("--init-db", "initialize_db", is_flag=True, help="Initialize database tables")
def main(
    user_id: str,
    name: str,
    offer_uuid: str,
    url: str,
    primary: bool,
    list_offers: bool,
    deactivate: str,
    activate: str,
    initialize_db: bool
):
    """Manage offers in the offer monitor."""

    if initialize_db:
        click.echo("Initializing database tables...")
        init_db()
        click.echo("Database initialized successfully!")
        return

    db = SessionLocal()

    try:
        if list_offers:
            list_all_offers(db)
        elif deactivate:
            set_offer_active(db, deactivate, False)
        elif activate:
            set_offer_active(db, activate, True)
        elif offer_uuid and url:
            attach_page(db, offer_uuid, url, primary)
        elif user_id and name:
            offer = add_offer(db, user_id, name)
            if url:
                attach_page(db, offer.uuid, url, primary=True)
        elif name or user_id:
            click.echo("Error: --user and --name are both required when adding an offer")
            sys.exit(1)
        else:
            click.echo("Use --help for usage information")
            sys.exit(1)
    finally:
        db.close()


def add_offer(db, user_id: str, name: str) -> Offer:
    """Add a new offer."""
    offer = Offer(user_id=user_id, name=name)
    db.add(offer)
    db.commit()
    click.echo(f"Added offer: {name} (uuid: {offer.uuid})")
    return offer


def attach_page(db, offer_uuid: str, url: str, primary: bool = False):
    """Attach a monitored page to an offer, creating the page if needed."""
    offer = db.query(Offer).filter(Offer.uuid == offer_uuid).first()
    if not offer:
        click.echo(f"Error: Offer {offer_uuid} not found")
        sys.exit(1)

    page = db.query(FacebookPage).filter(FacebookPage.url == url).first()
    if not page:
        page = FacebookPage(url=url)
        db.add(page)
        db.flush()

    try:
        db.add(OfferPage(offer_id=offer.id, page_id=page.id, is_primary=primary))
        db.commit()
        click.echo(f"Attached page {page.id} to offer {offer.name}")
    except IntegrityError:
        db.rollback()
        click.echo(f"Error: Page is already attached to offer {offer_uuid}")
        sys.exit(1)


def list_all_offers(db):
    """List all offers with their pages."""
    offers = db.query(Offer).order_by(Offer.name).all()

    if not offers:
        click.echo("No offers found. Add one with --user and --name")
        return

    click.echo(f"\n{'UUID':<38} {'Name':<30} {'User':<15} {'Active':<8}")
    click.echo("-" * 93)

    for o in offers:
        status = "Yes" if o.is_active else "No"
        click.echo(f"{o.uuid:<38} {(o.name or ''):<30} {o.user_id:<15} {status:<8}")
        for link in o.page_links:
            marker = "*" if link.is_primary else " "
            click.echo(f"   {marker} [{link.page.id}] {link.page.page_name or 'Unknown'} - {link.page.url}")

    click.echo(f"\nTotal: {len(offers)} offers")


def set_offer_active(db, offer_uuid: str, active: bool):
    """Set offer active status."""
    offer = db.query(Offer).filter(Offer.uuid == offer_uuid).first()

    if not offer:
        click.echo(f"Error: Offer {offer_uuid} not found")
        sys.exit(1)

    offer.is_active = active
    db.commit()

    status = "activated" if active else "deactivated"
    click.echo(f"Offer {offer.name} ({offer_uuid}) has been {status}")


if __name__ == "__main__":
    main()
