"""Models for spec definitions loaded from YAML spec files."""

from collections.abc import Sequence

from pydantic import Field

from e2e_runner.models.base import Model
from e2e_runner.models.config import WaitUntil
from e2e_runner.models.locator import Locator


class Step(Model):
    """Base for spec steps; each step type is told apart by its key."""


class NavigateStep(Step):
    """Navigate the session to a URL (relative URLs use the base URL)."""

    navigate: str = Field(..., description="Target URL or path")
    timeout: float | None = Field(default=None, gt=0, description="Seconds")
    wait_until: WaitUntil = "networkidle"


class ExpectTitleStep(Step):
    """Assert the document title."""

    expect_title: str = Field(..., description="Expected document title")


class ExpectTextStep(Step):
    """Assert the trimmed text of a located element."""

    expect_text: str = Field(..., description="Expected element text")
    locator: Locator = Field(..., description="Element to read text from")


type SpecStep = NavigateStep | ExpectTitleStep | ExpectTextStep


class TestSpec(Model):
    """A single named test case."""

    __test__ = False

    name: str = Field(..., min_length=1, description="Test name")
    steps: Sequence[SpecStep] = Field(default_factory=list)


class SuiteSpec(Model):
    """A describe block: hooks, test cases and nested suites."""

    name: str = Field(..., min_length=1, description="Suite name")
    before_each: Sequence[SpecStep] = Field(default_factory=list)
    after_each: Sequence[SpecStep] = Field(default_factory=list)
    tests: Sequence[TestSpec] = Field(default_factory=list)
    suites: Sequence["SuiteSpec"] = Field(default_factory=list)


class SpecDefinition(Model):
    """Complete spec file."""

    version: str = Field(..., description="Spec file schema version")
    suites: Sequence[SuiteSpec] = Field(default_factory=list)
