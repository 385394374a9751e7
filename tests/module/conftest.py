"""Fixtures for module tests driving a real browser through Playwright."""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from playwright.async_api import Error as PlaywrightError

from e2e_runner.engines.playwright import PlaywrightBrowser, PlaywrightConfig
from e2e_runner.models.config import SessionConfig

FIXTURES = Path(__file__).parent / "fixtures"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark every test in this directory as a module test."""
    for item in items:
        if item.path.is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.module)


async def react_app(request: web.Request) -> web.Response:
    """Serve the React App welcome page."""
    html = (FIXTURES / "react_app.html").read_text()
    return web.Response(text=html, content_type="text/html")


async def about(request: web.Request) -> web.Response:
    """Serve a second page with a different title."""
    return web.Response(
        text="<html><head><title>About</title></head><body></body></html>",
        content_type="text/html",
    )


async def never_responds(request: web.Request) -> web.Response:
    """Hold the request open far longer than any test waits."""
    await asyncio.sleep(30)
    return web.Response(text="too late")


@pytest.fixture
async def app_server() -> AsyncGenerator[TestServer, None]:
    """Serve the fixture application on a random local port."""
    app = web.Application()
    app.router.add_get("/", react_app)
    app.router.add_get("/about", about)
    app.router.add_get("/slow", never_responds)

    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
async def browser() -> AsyncGenerator[PlaywrightBrowser, None]:
    """Start Playwright, skipping when no browser binary is installed."""
    async with PlaywrightBrowser.from_config(PlaywrightConfig()) as engine:
        try:
            await engine.get_browser(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Playwright browser unavailable: {e.message}")
        yield engine


@pytest.fixture
def session_config(app_server: TestServer) -> SessionConfig:
    """Create session config pointing at the fixture application."""
    return SessionConfig(default_timeout=10, base_url=str(app_server.make_url("/")))
