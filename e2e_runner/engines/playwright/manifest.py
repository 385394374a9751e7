"""Playwright engine manifest."""

from e2e_runner.engines.base import EngineManifest
from e2e_runner.engines.playwright.config import PlaywrightConfig
from e2e_runner.engines.playwright.engine import PlaywrightBrowser

playwright_manifest = EngineManifest(
    config_cls=PlaywrightConfig,
    browser_factory=PlaywrightBrowser.from_config,
)
