"""Configuration for Playwright engine."""

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel


class PlaywrightConfig(BaseModel):
    """Configuration for Playwright engine."""

    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    # Milliseconds Playwright waits between operations, for watching headed runs
    slow_mo: float = 0
    launch_args: Sequence[str] = ()
