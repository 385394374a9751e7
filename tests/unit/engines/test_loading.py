"""Tests for engine loading module."""

from importlib.metadata import EntryPoint
from unittest.mock import patch

import pytest

from e2e_runner.engines.loading import (
    ENTRY_POINT_GROUP,
    available_engines,
    load_engine_manifest,
)
from e2e_runner.engines.playwright import PlaywrightConfig, playwright_manifest
from e2e_runner.errors import EngineNotFoundError


def test_load_engine_manifest_returns_manifest() -> None:
    """Loads engine manifest by key."""
    manifest = load_engine_manifest("playwright")

    assert manifest is playwright_manifest
    assert manifest.config_cls is PlaywrightConfig


def test_load_engine_manifest_raises_for_unknown_engine() -> None:
    """Raises EngineNotFoundError for unknown engine key."""
    with pytest.raises(EngineNotFoundError) as exc_info:
        load_engine_manifest("unknown-engine")

    assert "unknown-engine" in str(exc_info.value)
    assert "Available engines" in str(exc_info.value)


def test_playwright_config_defaults() -> None:
    """Defaults to chromium with no extra launch arguments."""
    config = PlaywrightConfig()

    assert config.browser_type == "chromium"
    assert config.slow_mo == 0
    assert list(config.launch_args) == []


def test_available_engines_lists_installed_keys() -> None:
    """Lists the built-in engine among installed engines."""
    assert "playwright" in available_engines()


def test_load_engine_manifest_rejects_non_manifest_entry_point() -> None:
    """Raises EngineNotFoundError when an entry point names something else."""
    entry = EntryPoint(name="broken", value="os:sep", group=ENTRY_POINT_GROUP)

    with (
        patch("e2e_runner.engines.loading.entry_points", return_value=[entry]),
        pytest.raises(EngineNotFoundError, match="not an EngineManifest"),
    ):
        load_engine_manifest("broken")
