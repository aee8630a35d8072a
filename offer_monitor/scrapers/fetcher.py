import asyncio
from dataclasses import dataclass, field
from typing import Optional, Protocol

from bs4 import BeautifulSoup
from playwright.async_api import async_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from offer_monitor.config import (
    HEADLESS,
    NAVIGATION_TIMEOUT,
    SETTLE_DELAY,
    USER_AGENT,
)
from offer_monitor.exceptions import FetchError
from offer_monitor.utils.logger import get_logger

logger = get_logger("fetcher")


@dataclass
class PageContent:
    """Rendered content of one page, captured before the browser closes."""

    url: str
    text: str
    html: str = ""
    _soup: Optional[BeautifulSoup] = field(default=None, init=False, repr=False, compare=False)

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html or "", "html.parser")
        return self._soup

    def select_text(self, selector: str) -> Optional[str]:
        """Trimmed text of the first element matching selector, or None."""
        element = self.soup.select_one(selector)
        if element is None:
            return None
        text = element.get_text().strip()
        return text or None

    def count(self, selector: str) -> int:
        """Number of elements matching selector."""
        return len(self.soup.select(selector))


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> PageContent:
        ...


class PlaywrightFetcher:
    """Loads one Ad Library page in its own headless chromium instance."""

    def __init__(
        self,
        headless: bool = HEADLESS,
        navigation_timeout: int = NAVIGATION_TIMEOUT,
        settle_delay: float = SETTLE_DELAY,
        user_agent: str = USER_AGENT,
        sleep=asyncio.sleep,
    ):
        self.headless = headless
        self.navigation_timeout = navigation_timeout
        self.settle_delay = settle_delay
        self.user_agent = user_agent
        self._sleep = sleep

    async def fetch(self, url: str) -> PageContent:
        """Render url and return its body text and HTML.

        Raises FetchError on launch failure, navigation timeout, network
        errors or a browser crash. The browser is closed on every path.
        """
        logger.info("fetching_page", url=url)

        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.headless,
                    args=[
                        "--disable-blink-features=AutomationControlled",
                        "--no-sandbox",
                        "--disable-setuid-sandbox",
                    ]
                )
                try:
                    context = await browser.new_context(
                        viewport={"width": 1920, "height": 1080},
                        user_agent=self.user_agent,
                    )
                    page = await context.new_page()

                    # Ad Library keeps loading in the background, so networkidle never settles
                    await page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout)
                    await self._sleep(self.settle_delay)

                    text = await page.text_content("body") or ""
                    html = await page.content()
                finally:
                    await browser.close()

        except PlaywrightTimeout as e:
            logger.warning("fetch_timeout", url=url, error=str(e))
            raise FetchError(f"Navigation timed out after {self.navigation_timeout}ms: {url}") from e
        except PlaywrightError as e:
            logger.warning("fetch_error", url=url, error=str(e))
            raise FetchError(str(e) or type(e).__name__) from e
        except Exception as e:
            logger.warning("fetch_error", url=url, error=str(e), error_type=type(e).__name__)
            raise FetchError(str(e) or type(e).__name__) from e

        logger.info("page_fetched", url=url, text_length=len(text))
        return PageContent(url=url, text=text, html=html)
