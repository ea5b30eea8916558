"""Playwright browser provider adapter.

Renders pages in headless Chromium so client-side script can populate the
DOM before extraction.  Each :meth:`PlaywrightBrowserProvider.launch` call
starts a fresh Playwright driver, browser, and page; closing the session
tears all three down.

Setup: ``pip install playwright && playwright install chromium``.  Point
``BROWSER_EXECUTABLE_PATH`` at a system Chromium to skip the download.
"""

from __future__ import annotations

from typing import Callable, TypeVar

import structlog
from bs4 import BeautifulSoup
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from syncbrain.config.settings import Settings
from syncbrain.interfaces.browser_provider import IBrowserProvider, IBrowserSession
from syncbrain.utils.errors import ExtractionError, ExtractionTimeoutError

logger = structlog.get_logger(logger_name=__name__)

T = TypeVar("T")

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
_LAUNCH_ARGS = ["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"]


class PlaywrightBrowserSession(IBrowserSession):
    """A single Chromium page owned by one extraction."""

    def __init__(self, playwright: Playwright, browser: Browser, page: Page) -> None:
        self._playwright = playwright
        self._browser = browser
        self._page = page
        self._closed = False

    async def navigate(self, url: str, timeout: float, wait_for: str | None = None) -> None:
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise ExtractionTimeoutError(
                message=f"Timed out after {timeout:g}s loading {url}",
                provider_name="playwright",
            ) from exc
        except PlaywrightError as exc:
            raise ExtractionError(
                message=f"Navigation to {url} failed: {exc}",
                provider_name="playwright",
            ) from exc

        if wait_for:
            try:
                await self._page.wait_for_selector(wait_for, timeout=timeout * 1000)
            except PlaywrightTimeoutError:
                logger.debug("wait_for_selector_missed", url=url, selector=wait_for)

    async def extract_dom(self, extractor: Callable[[BeautifulSoup], T]) -> T:
        try:
            html = await self._page.content()
        except PlaywrightError as exc:
            raise ExtractionError(
                message=f"Could not read rendered page: {exc}",
                provider_name="playwright",
            ) from exc
        return extractor(BeautifulSoup(html, "html.parser"))

    @property
    def current_url(self) -> str:
        return self._page.url

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        except PlaywrightError as exc:
            logger.warning("browser_close_failed", error=str(exc))
        finally:
            await self._playwright.stop()


class PlaywrightBrowserProvider(IBrowserProvider):
    """Launches one isolated headless Chromium per session."""

    def __init__(self, settings: Settings) -> None:
        self._headless = settings.browser_headless
        self._executable_path = settings.browser_executable_path or None

    async def launch(self) -> IBrowserSession:
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=self._headless,
                executable_path=self._executable_path,
                args=_LAUNCH_ARGS,
            )
            page = await browser.new_page(user_agent=_USER_AGENT)
        except PlaywrightError as exc:
            await playwright.stop()
            raise ExtractionError(
                message=f"Could not start browser: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("browser_launched", headless=self._headless)
        return PlaywrightBrowserSession(playwright, browser, page)

    def get_provider_name(self) -> str:
        return "playwright"
