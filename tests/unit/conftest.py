"""Fixtures for unit tests using the in-memory engine."""

import pytest

from e2e_runner.models.config import SessionConfig
from e2e_runner.session import Session, open_session
from e2e_runner.testing.fakes import REACT_APP, FakeBrowser, FakeDocument


@pytest.fixture
def browser() -> FakeBrowser:
    """Create fake browser serving the React App fixture page."""
    return FakeBrowser(
        documents={
            "http://app.test/": REACT_APP,
            "http://app.test/about": FakeDocument(title="About"),
        },
        failures={"http://dns.invalid/": "net::ERR_NAME_NOT_RESOLVED"},
    )


@pytest.fixture
def session_config() -> SessionConfig:
    """Create session config with short waits and the fixture base URL."""
    return SessionConfig(default_timeout=1.0, base_url="http://app.test/")


@pytest.fixture
async def session(browser: FakeBrowser, session_config: SessionConfig) -> Session:
    """Open a session on the fake browser."""
    return await open_session(browser, session_config)
