#!/usr/bin/env python3
"""Debug script to check what each extraction strategy finds on a page."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import click

from offer_monitor.exceptions import FetchError
from offer_monitor.scrapers.extractor import (
    DEFAULT_COUNT_STRATEGIES,
    DEFAULT_NAME_STRATEGIES,
    Extractor,
)
from offer_monitor.scrapers.fetcher import PlaywrightFetcher


async def debug_extraction(url: str, headless: bool, dump: str):
    """Fetch url once and report every strategy's result."""
    fetcher = PlaywrightFetcher(headless=headless)

    print(f"Navigating to: {url}")
    try:
        content = await fetcher.fetch(url)
    except FetchError as e:
        print(f"Fetch failed: {e.reason}")
        return

    print(f"Body text length: {len(content.text)}")

    print("\n=== Name strategies ===")
    for strategy in DEFAULT_NAME_STRATEGIES:
        try:
            print(f"  {strategy!r}: {strategy.try_extract(content)!r}")
        except Exception as e:
            print(f"  {strategy!r}: Error - {e}")

    print("\n=== Count strategies ===")
    for strategy in DEFAULT_COUNT_STRATEGIES:
        try:
            print(f"  {strategy!r}: {strategy.try_extract(content)!r}")
        except Exception as e:
            print(f"  {strategy!r}: Error - {e}")

    print("\n=== Extractor result ===")
    print(f"  {Extractor().extract(content)!r}")

    if dump:
        Path(dump).write_text(content.html, encoding="utf-8")
        print(f"\nHTML saved to: {dump}")


@click.command()
@click.argument("url")
@click.option("--visible", is_flag=True, help="Show the browser window")
@click.option("--dump", type=str, help="Save the rendered HTML to this file")
def main(url: str, visible: bool, dump: str):
    asyncio.run(debug_extraction(url, headless=not visible, dump=dump))


if __name__ == "__main__":
    main()
