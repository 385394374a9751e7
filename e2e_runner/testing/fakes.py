"""In-memory browser engine for tests."""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field

from e2e_runner.engines.base import Browser, BrowserPage, ElementHandle
from e2e_runner.errors import NavigationError
from e2e_runner.models.config import Viewport, WaitUntil


@dataclass(frozen=True, kw_only=True)
class FakeDocument:
    """A page the fake engine can load.

    elements maps selectors to text content. Selectors listed in appear_after
    only match once that many seconds have passed since the page loaded.
    """

    title: str = ""
    elements: Mapping[str, str | None] = field(default_factory=dict)
    appear_after: Mapping[str, float] = field(default_factory=dict)
    load_delay: float = 0


REACT_APP = FakeDocument(
    title="React App",
    elements={
        "#root": "Edit src/App.js and save to reload. Learn React",
        "header p": "Edit src/App.js and save to reload.",
        "a.App-link": "  Learn React\n",
        "img.App-logo": None,
    },
)


@dataclass(frozen=True, kw_only=True)
class FakeElement(ElementHandle):
    """Element with fixed text."""

    text: str | None

    async def text_content(self) -> str | None:
        """Return the configured text."""
        return self.text


@dataclass(kw_only=True)
class FakePage(BrowserPage):
    """Page serving FakeDocuments by URL.

    URLs listed in failures raise NavigationError with the given reason. Any
    other URL without a document never finishes loading.
    """

    documents: Mapping[str, FakeDocument]
    failures: Mapping[str, str]
    headless: bool
    viewport: Viewport
    document: FakeDocument | None = None
    loaded_at: float = 0.0
    visited: list[str] = field(default_factory=list)
    query_count: int = 0
    closed: bool = False

    async def goto_url(
        self, url: str, *, wait_until: WaitUntil, timeout: float
    ) -> None:
        """Load a fake document."""
        self.visited.append(url)
        if url in self.failures:
            raise NavigationError(url, self.failures[url])
        if (document := self.documents.get(url)) is None:
            await asyncio.Event().wait()
            return

        await asyncio.sleep(document.load_delay)
        self.document = document
        self.loaded_at = asyncio.get_running_loop().time()

    async def query_selector(self, selector: str) -> ElementHandle | None:
        """Look up the selector in the loaded document."""
        self.query_count += 1
        if self.document is None or selector not in self.document.elements:
            return None

        delay = self.document.appear_after.get(selector, 0)
        if asyncio.get_running_loop().time() - self.loaded_at < delay:
            return None
        return FakeElement(text=self.document.elements[selector])

    async def document_title(self) -> str:
        """Return the loaded document's title, or empty for a blank page."""
        return self.document.title if self.document is not None else ""

    async def close_page(self) -> None:
        """Mark the page closed; closing twice is a bug in the caller."""
        if self.closed:
            raise RuntimeError("Page already closed")
        self.closed = True


@dataclass(kw_only=True)
class FakeBrowser(Browser):
    """Browser handing out FakePages that share one set of documents."""

    documents: Mapping[str, FakeDocument] = field(default_factory=dict)
    failures: Mapping[str, str] = field(default_factory=dict)
    pages: list[FakePage] = field(default_factory=list)

    async def new_page(self, *, headless: bool, viewport: Viewport) -> BrowserPage:
        """Open a blank fake page."""
        page = FakePage(
            documents=self.documents,
            failures=self.failures,
            headless=headless,
            viewport=viewport,
        )
        self.pages.append(page)
        return page

    @property
    def open_pages(self) -> list[FakePage]:
        """Pages not closed yet."""
        return [page for page in self.pages if not page.closed]
