"""Page session lifecycle: open, navigate, read the title, close."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import urljoin

from e2e_runner.engines.base import Browser, BrowserPage
from e2e_runner.errors import InvalidSessionError, NavigationTimeoutError
from e2e_runner.models.config import NavigateOptions, SessionConfig

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class Session:
    """One live browser page plus its navigation state.

    The page handle is owned by the session: only the functions in this
    module touch it directly, and nothing else may close it.
    """

    page: BrowserPage = field(repr=False)
    config: SessionConfig
    current_url: str | None = None
    status: Literal["open", "closed"] = "open"

    @property
    def is_open(self) -> bool:
        """Whether the session still holds a live page."""
        return self.status == "open"


def ensure_open(session: Session) -> None:
    """Raise InvalidSessionError unless the session is open."""
    if not session.is_open:
        raise InvalidSessionError("Session is closed")


def resolve_url(base_url: str | None, url: str) -> str:
    """Resolve a navigation target against the configured base URL."""
    if base_url is None:
        return url
    return urljoin(base_url, url)


async def open_session(
    browser: Browser, config: SessionConfig | None = None
) -> Session:
    """Open a new page and wrap it in a session."""
    config = config or SessionConfig()
    page = await browser.new_page(headless=config.headless, viewport=config.viewport)
    log.debug("Session opened: headless=%s", config.headless)
    return Session(page=page, config=config)


async def navigate(
    session: Session, url: str, options: NavigateOptions | None = None
) -> None:
    """Navigate the session's page and wait for the readiness condition.

    Args:
        session: Open session to navigate
        url: Absolute URL, or a path resolved against the base URL
        options: Timeout and readiness condition (defaults from the session)

    Raises:
        InvalidSessionError: If the session is closed
        NavigationTimeoutError: If the page is not ready within the timeout
        NavigationError: If the engine reports a navigation failure

    """
    ensure_open(session)
    options = options or NavigateOptions()
    target = resolve_url(session.config.base_url, url)
    timeout = (
        options.timeout
        if options.timeout is not None
        else session.config.default_timeout
    )

    loop = asyncio.get_running_loop()
    started = loop.time()
    log.debug(
        "Navigating: url=%s, wait_until=%s, timeout=%.1fs",
        target,
        options.wait_until,
        timeout,
    )

    try:
        async with asyncio.timeout(timeout):
            await session.page.goto_url(
                target, wait_until=options.wait_until, timeout=timeout
            )
    except TimeoutError as e:
        raise NavigationTimeoutError(target, loop.time() - started) from e

    session.current_url = target


async def title(session: Session) -> str:
    """Return the current document title."""
    ensure_open(session)
    return await session.page.document_title()


async def close(session: Session) -> None:
    """Release the session's page. Closing a closed session does nothing.

    If the engine fails to close the page the session stays open, so the
    close can be retried.
    """
    if not session.is_open:
        return
    await session.page.close_page()
    session.status = "closed"
    log.debug("Session closed: url=%s", session.current_url)


@asynccontextmanager
async def session_scope(
    browser: Browser, config: SessionConfig | None = None
) -> AsyncGenerator[Session, None]:
    """Open a session and close it on exit."""
    session = await open_session(browser, config)
    try:
        yield session
    finally:
        await close(session)
