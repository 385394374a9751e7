"""Models for test execution results."""

from dataclasses import dataclass
from typing import Literal

type TestStatus = Literal["passed", "failed", "errored"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Finalized outcome of a single test case."""

    __test__ = False

    name: str
    status: TestStatus
    duration: float
    message: str | None = None
    error_kind: str | None = None
