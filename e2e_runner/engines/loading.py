"""Discovery of browser engine plugins."""

import logging
from importlib.metadata import entry_points
from typing import Any

from e2e_runner.engines.base import EngineManifest
from e2e_runner.errors import EngineNotFoundError

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "e2e_runner.engines"


def available_engines() -> list[str]:
    """Return the keys of every installed engine, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_engine_manifest(key: str) -> EngineManifest[Any]:
    """Import the engine registered under key.

    Args:
        key: Entry-point name of the engine (e.g., "playwright")

    Returns:
        The engine's manifest

    Raises:
        EngineNotFoundError: If no installed engine has that key, or its entry
            point does not name an EngineManifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise EngineNotFoundError(
            f"Engine '{key}' not found. Available engines: {available_engines()}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, EngineManifest):
        raise EngineNotFoundError(
            f"Engine '{key}' points at {entry.value}, which is not an EngineManifest"
        )

    log.debug("Loaded engine %s from %s", key, entry.value)
    return manifest
