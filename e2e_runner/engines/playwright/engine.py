"""Playwright engine implementation."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from playwright.async_api import Browser as PlaywrightBrowserHandle
from playwright.async_api import BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import ElementHandle as PlaywrightElementHandle
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from e2e_runner.engines.base import Browser, BrowserPage, ElementHandle
from e2e_runner.engines.playwright.config import PlaywrightConfig
from e2e_runner.errors import NavigationError
from e2e_runner.models.config import Viewport, WaitUntil

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class PlaywrightElement(ElementHandle):
    """Element handle backed by a Playwright element handle."""

    handle: PlaywrightElementHandle = field(repr=False)

    async def text_content(self) -> str | None:
        """Return the element's text content."""
        return await self.handle.text_content()


@dataclass(frozen=True, kw_only=True)
class PlaywrightPage(BrowserPage):
    """Page backed by a Playwright page in its own browser context."""

    context: BrowserContext = field(repr=False)
    page: Page = field(repr=False)

    async def goto_url(
        self, url: str, *, wait_until: WaitUntil, timeout: float
    ) -> None:
        """Navigate with Playwright, translating its errors."""
        try:
            await self.page.goto(url, wait_until=wait_until, timeout=timeout * 1000)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(e.message) from e
        except PlaywrightError as e:
            raise NavigationError(url, e.message) from e

    async def query_selector(self, selector: str) -> ElementHandle | None:
        """Query the DOM once without waiting."""
        if (handle := await self.page.query_selector(selector)) is None:
            return None
        return PlaywrightElement(handle=handle)

    async def document_title(self) -> str:
        """Return the current document title."""
        return await self.page.title()

    async def close_page(self) -> None:
        """Close the page together with its browser context."""
        await self.context.close()


@dataclass(frozen=True, kw_only=True)
class PlaywrightBrowser(Browser):
    """Playwright browser engine.

    Browsers are launched lazily, one per headless mode, the first time a page
    in that mode is requested. Each page gets its own browser context so that
    cookies and storage never leak between sessions.
    """

    config: PlaywrightConfig
    playwright: Playwright = field(repr=False)
    browsers: dict[bool, PlaywrightBrowserHandle] = field(
        default_factory=dict, repr=False
    )
    launch_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: PlaywrightConfig
    ) -> AsyncGenerator["PlaywrightBrowser", None]:
        """Create engine with managed Playwright lifecycle."""
        async with async_playwright() as playwright:
            browser = cls(config=config, playwright=playwright)
            try:
                yield browser
            finally:
                await browser.close()

    async def new_page(self, *, headless: bool, viewport: Viewport) -> BrowserPage:
        """Open a page in a fresh browser context."""
        browser = await self.get_browser(headless)
        context = await browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height}
        )
        page = await context.new_page()
        return PlaywrightPage(context=context, page=page)

    async def start(self, *, headless: bool) -> None:
        """Launch the browser for the run's headless mode up front."""
        await self.get_browser(headless)

    async def get_browser(self, headless: bool) -> PlaywrightBrowserHandle:
        """Return the browser for a headless mode, launching it if needed."""
        async with self.launch_lock:
            if (browser := self.browsers.get(headless)) is not None:
                return browser

            log.info(
                "Launching browser: browser_type=%s, headless=%s",
                self.config.browser_type,
                headless,
            )
            browser_type = getattr(self.playwright, self.config.browser_type)
            browser = await browser_type.launch(
                headless=headless,
                slow_mo=self.config.slow_mo,
                args=list(self.config.launch_args),
            )
            self.browsers[headless] = browser
            return browser

    async def close(self) -> None:
        """Close every launched browser."""
        for browser in self.browsers.values():
            await browser.close()
        self.browsers.clear()
