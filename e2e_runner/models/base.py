"""Shared pydantic base for configuration and spec models."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that rejects keys it does not declare.

    Spec files and CLI options are user input, so a misspelt key fails
    validation instead of silently falling back to a default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
