"""Wait for the application under test to start answering requests."""

import asyncio
import logging

import aiohttp

from e2e_runner.errors import ServerNotReadyError

log = logging.getLogger(__name__)


async def probe(session: aiohttp.ClientSession, url: str) -> bool:
    """Return True if url answers with a non-5xx status."""
    try:
        async with session.get(url) as response:
            if response.status < 500:
                return True
            log.info("Server at %s answered with status=%d", url, response.status)
    except (aiohttp.ClientError, TimeoutError) as e:
        log.info("Server at %s not reachable yet: %s", url, e)
    return False


async def wait_for_server(
    url: str,
    timeout: float = 30,
    poll_interval: float = 0.5,
) -> None:
    """Poll url until the server answers.

    Args:
        url: URL of the application under test
        timeout: Maximum wait time in seconds
        poll_interval: Seconds between requests

    Raises:
        ServerNotReadyError: If the server does not answer within timeout

    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    request_timeout = aiohttp.ClientTimeout(total=max(poll_interval, 1.0))

    async with aiohttp.ClientSession(timeout=request_timeout) as session:
        while True:
            if await probe(session, url):
                log.info("Server at %s is ready", url)
                return

            if loop.time() >= deadline:
                raise ServerNotReadyError(
                    f"Server at {url} did not answer within {timeout} seconds"
                )

            await asyncio.sleep(poll_interval)
