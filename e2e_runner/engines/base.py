"""Abstract browser engine contract.

The runner depends on nothing but these primitives: navigate a page, query a
selector, read the document title, and close the page. Everything else about
a concrete engine stays behind this boundary.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from e2e_runner.models.config import Viewport, WaitUntil


class ElementHandle(ABC):
    """A live reference to an element in a page."""

    @abstractmethod
    async def text_content(self) -> str | None:
        """Return the element's text content, or None if it has none."""


class BrowserPage(ABC):
    """A single page (tab) driven by an engine."""

    @abstractmethod
    async def goto_url(
        self, url: str, *, wait_until: WaitUntil, timeout: float
    ) -> None:
        """Navigate to url and wait for the readiness condition.

        Args:
            url: Absolute URL to load
            wait_until: Readiness condition that completes the navigation
            timeout: Seconds the engine may spend on the navigation

        Raises:
            NavigationError: If the engine reports a network or DNS failure
            TimeoutError: If the engine's own navigation timer fires

        """

    @abstractmethod
    async def query_selector(self, selector: str) -> ElementHandle | None:
        """Return the first element matching selector, or None."""

    @abstractmethod
    async def document_title(self) -> str:
        """Return the current document title."""

    @abstractmethod
    async def close_page(self) -> None:
        """Close the page and release its resources."""


class Browser(ABC):
    """A launched browser able to open pages."""

    @abstractmethod
    async def new_page(self, *, headless: bool, viewport: Viewport) -> BrowserPage:
        """Open a new, blank page.

        Args:
            headless: Whether the page belongs to a headless browser
            viewport: Viewport size of the page

        """

    async def start(self, *, headless: bool) -> None:
        """Bring up whatever the engine needs before the first page opens.

        Engines that launch lazily override this so that a missing browser
        binary surfaces before any test runs. The default does nothing.

        Raises:
            Exception: Whatever the engine raises when it cannot start

        """


@dataclass(frozen=True, kw_only=True)
class EngineManifest[ConfigT: BaseModel]:
    """Entry-point payload of an engine plugin.

    config_cls validates the JSON given with --engine-config, and
    browser_factory turns the validated config into a running Browser for the
    duration of a run.
    """

    config_cls: type[ConfigT]
    browser_factory: Callable[[ConfigT], AbstractAsyncContextManager[Browser]]
