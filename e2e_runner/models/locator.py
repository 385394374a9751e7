"""Declarative element descriptor."""

from pydantic import Field

from e2e_runner.models.base import Model


class Locator(Model):
    """Selector plus the policy used to wait for it.

    A locator is a value: resolving it never changes it, and the same locator
    can be resolved against any number of sessions.
    """

    selector: str = Field(..., min_length=1, description="CSS selector")
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a match (None uses the session default)",
    )
    poll_interval: float = Field(
        default=0.1, gt=0, description="Seconds between DOM queries"
    )
    require_text: bool = Field(
        default=True, description="Whether resolved text must be non-empty"
    )
