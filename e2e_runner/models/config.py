"""Configuration models for sessions and navigation."""

from typing import Literal

from pydantic import Field

from e2e_runner.models.base import Model

type WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]


class Viewport(Model):
    """Browser viewport size in CSS pixels."""

    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)


class SessionConfig(Model):
    """Options applied when a session is opened."""

    headless: bool = True
    viewport: Viewport = Field(default_factory=Viewport)
    default_timeout: float = Field(
        default=60.0, gt=0, description="Seconds for navigation and locator waits"
    )
    base_url: str | None = Field(
        default=None, description="Base URL for relative navigation targets"
    )


class NavigateOptions(Model):
    """Per-call navigation options."""

    timeout: float | None = Field(
        default=None, gt=0, description="Seconds (None uses the session default)"
    )
    wait_until: WaitUntil = "networkidle"
