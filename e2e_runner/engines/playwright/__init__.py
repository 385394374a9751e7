"""Playwright browser engine module."""

from e2e_runner.engines.playwright.config import PlaywrightConfig
from e2e_runner.engines.playwright.engine import PlaywrightBrowser
from e2e_runner.engines.playwright.manifest import playwright_manifest

__all__ = ["PlaywrightBrowser", "PlaywrightConfig", "playwright_manifest"]
