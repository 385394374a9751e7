"""Resolution of locators into live element handles."""

import asyncio
import logging

from e2e_runner.engines.base import ElementHandle
from e2e_runner.errors import EmptyContentError, LocatorTimeoutError
from e2e_runner.models.locator import Locator
from e2e_runner.session import Session, ensure_open

log = logging.getLogger(__name__)


async def resolve(session: Session, locator: Locator) -> ElementHandle:
    """Poll the page until an element matches the locator's selector.

    Args:
        session: Open session to query
        locator: Selector and wait policy

    Returns:
        Handle of the first matching element

    Raises:
        InvalidSessionError: If the session is closed
        LocatorTimeoutError: If nothing matched before the timeout elapsed

    """
    ensure_open(session)
    timeout = (
        locator.timeout
        if locator.timeout is not None
        else session.config.default_timeout
    )

    loop = asyncio.get_running_loop()
    started = loop.time()
    deadline = started + timeout

    while True:
        if (handle := await session.page.query_selector(locator.selector)) is not None:
            return handle

        now = loop.time()
        if now >= deadline:
            raise LocatorTimeoutError(locator.selector, now - started)

        await asyncio.sleep(min(locator.poll_interval, deadline - now))


async def resolve_text(session: Session, locator: Locator) -> str:
    """Resolve the locator and return the element's stripped text.

    Raises:
        EmptyContentError: If the element has no text and the locator requires it

    """
    handle = await resolve(session, locator)
    text = (await handle.text_content() or "").strip()
    if not text and locator.require_text:
        raise EmptyContentError(locator.selector)
    log.debug("Resolved text: selector=%s, text=%r", locator.selector, text)
    return text
