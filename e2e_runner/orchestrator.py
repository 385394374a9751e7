"""Test orchestrator: declares suites, hooks and test cases, and runs them."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Literal, overload

from e2e_runner.engines.base import Browser
from e2e_runner.errors import EmptyContentError
from e2e_runner.models.config import SessionConfig
from e2e_runner.models.result import TestResult, TestStatus
from e2e_runner.session import Session, close, open_session

log = logging.getLogger(__name__)

type SessionFn = Callable[[Session], Awaitable[None]]
type SuiteState = Literal["pending", "running", "completed"]
type CaseState = Literal["pending", "running", "passed", "failed", "errored"]

# Exceptions that count as a failed comparison rather than a fault
FAILURE_ERRORS: tuple[type[Exception], ...] = (AssertionError, EmptyContentError)


@dataclass(kw_only=True)
class TestCase:
    """A single named test body."""

    __test__ = False

    name: str
    fn: SessionFn = field(repr=False)
    state: CaseState = "pending"


@dataclass(kw_only=True)
class Suite:
    """A describe block holding hooks, test cases and nested suites."""

    name: str
    parent: "Suite | None" = field(default=None, repr=False)
    before_each_hooks: list[SessionFn] = field(default_factory=list, repr=False)
    after_each_hooks: list[SessionFn] = field(default_factory=list, repr=False)
    children: list["Suite | TestCase"] = field(default_factory=list)
    state: SuiteState = "pending"

    def lineage(self) -> Sequence["Suite"]:
        """Suites from the outermost ancestor down to this one."""
        chain: list[Suite] = []
        suite: Suite | None = self
        while suite is not None:
            chain.append(suite)
            suite = suite.parent
        return chain[::-1]

    def setup_hooks(self) -> Iterator[SessionFn]:
        """before_each hooks, outermost suite first."""
        for suite in self.lineage():
            yield from suite.before_each_hooks

    def teardown_hooks(self) -> Iterator[SessionFn]:
        """after_each hooks, innermost suite first."""
        for suite in reversed(self.lineage()):
            yield from suite.after_each_hooks

    def qualified_name(self, case: TestCase) -> str:
        """Full name of a case: suite names and test name joined with ' > '."""
        names = [suite.name for suite in self.lineage() if suite.name]
        return " > ".join([*names, case.name])

    def reset(self) -> None:
        """Return this suite and everything below it to the pending state."""
        self.state = "pending"
        for child in self.children:
            if isinstance(child, Suite):
                child.reset()
            else:
                child.state = "pending"


@dataclass(frozen=True, kw_only=True)
class Outcome:
    """Outcome of a case before it is finalized into a TestResult."""

    status: TestStatus
    message: str | None = None
    error: BaseException | None = None

    @property
    def error_kind(self) -> str | None:
        """Exception class name, if the outcome came from an exception."""
        return type(self.error).__name__ if self.error is not None else None


def describe_error(error: BaseException) -> str:
    """Human-readable message for an exception."""
    return str(error) or type(error).__name__


def body_outcome(error: Exception) -> Outcome:
    """Classify an exception raised by a test body."""
    status: TestStatus = "failed" if isinstance(error, FAILURE_ERRORS) else "errored"
    return Outcome(status=status, message=describe_error(error), error=error)


def hook_outcome(phase: str, error: Exception) -> Outcome:
    """Any exception raised outside the test body errors the case."""
    return Outcome(
        status="errored",
        message=f"{phase} failed: {type(error).__name__}: {describe_error(error)}",
        error=error,
    )


@dataclass(kw_only=True)
class TestOrchestrator:
    """Declares and runs test cases, one fresh session per case.

    Cases run sequentially in declaration order. Every case gets its own
    session, opened before its before_each hooks and closed after its
    after_each hooks, so no page state leaks from one case into the next.
    """

    __test__ = False

    browser: Browser
    session_config: SessionConfig = field(default_factory=SessionConfig)
    # Seconds for the whole run; None disables the suite-level timeout
    timeout: float | None = None
    root: Suite = field(default_factory=lambda: Suite(name=""), repr=False)
    current: Suite = field(init=False, repr=False)
    scope: asyncio.Timeout | None = field(default=None, init=False, repr=False)
    cancel_reason: str | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.current = self.root

    def describe(self, name: str, body: Callable[[], None]) -> Suite:
        """Declare a suite; everything body declares belongs to it."""
        suite = Suite(name=name, parent=self.current)
        self.current.children.append(suite)

        self.current = suite
        try:
            body()
        finally:
            self.current = suite.parent or self.root
        return suite

    @overload
    def it(self, name: str) -> Callable[[SessionFn], SessionFn]: ...

    @overload
    def it(self, name: str, fn: SessionFn) -> SessionFn: ...

    def it(
        self, name: str, fn: SessionFn | None = None
    ) -> SessionFn | Callable[[SessionFn], SessionFn]:
        """Declare a test case, directly or as a decorator."""

        def register(test_fn: SessionFn) -> SessionFn:
            self.current.children.append(TestCase(name=name, fn=test_fn))
            return test_fn

        if fn is None:
            return register
        return register(fn)

    def before_each(self, fn: SessionFn) -> SessionFn:
        """Run fn before every test case of the enclosing suite."""
        self.current.before_each_hooks.append(fn)
        return fn

    def after_each(self, fn: SessionFn) -> SessionFn:
        """Run fn after every test case of the enclosing suite."""
        self.current.after_each_hooks.append(fn)
        return fn

    def cancel(self, reason: str = "Suite cancelled") -> None:
        """Abort the run: the active case and all remaining cases error out."""
        if self.cancel_reason is None:
            self.cancel_reason = reason
        if self.scope is not None:
            self.scope.reschedule(asyncio.get_running_loop().time())

    async def run(self) -> AsyncIterator[TestResult]:
        """Run every declared test case and yield results in order.

        Each call starts a fresh run from the first case.
        """
        self.root.reset()
        self.cancel_reason = None
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout if self.timeout is not None else None

        async for result in self._run_suite(self.root, deadline):
            yield result

    async def _run_suite(
        self, suite: Suite, deadline: float | None
    ) -> AsyncIterator[TestResult]:
        suite.state = "running"
        if suite.name:
            log.info("Running suite: %s", suite.name)

        for child in suite.children:
            if isinstance(child, Suite):
                async for result in self._run_suite(child, deadline):
                    yield result
            else:
                yield await self._run_case(suite, child, deadline)

        suite.state = "completed"

    async def _run_case(
        self, suite: Suite, case: TestCase, deadline: float | None
    ) -> TestResult:
        name = suite.qualified_name(case)
        loop = asyncio.get_running_loop()
        started = loop.time()
        case.state = "running"

        if deadline is not None and started >= deadline:
            self.cancel_reason = self.cancel_reason or self._timeout_reason()

        if self.cancel_reason is not None:
            outcome = self._cancelled_outcome("not started")
        else:
            try:
                async with asyncio.timeout_at(deadline) as scope:
                    self.scope = scope
                    outcome = await self._execute(suite, case)
            except TimeoutError:
                self.cancel_reason = self.cancel_reason or self._timeout_reason()
                outcome = self._cancelled_outcome("aborted")
            finally:
                self.scope = None

        return self._finalize(case, name, outcome, loop.time() - started)

    async def _execute(self, suite: Suite, case: TestCase) -> Outcome:
        try:
            session = await open_session(self.browser, self.session_config)
        except Exception as e:
            return hook_outcome("opening session", e)

        try:
            outcome = await self._run_hooks_and_body(suite, case, session)
        finally:
            close_error = await self._close_session(session)

        if close_error is not None and outcome.status == "passed":
            return hook_outcome("closing session", close_error)
        return outcome

    async def _run_hooks_and_body(
        self, suite: Suite, case: TestCase, session: Session
    ) -> Outcome:
        outcome: Outcome | None = None

        for hook in suite.setup_hooks():
            try:
                await hook(session)
            except Exception as e:
                outcome = hook_outcome("before_each hook", e)
                break

        if outcome is None:
            try:
                await case.fn(session)
            except Exception as e:
                outcome = body_outcome(e)
            else:
                outcome = Outcome(status="passed")

        for hook in suite.teardown_hooks():
            try:
                await hook(session)
            except Exception as e:
                log.warning("after_each hook failed for %s: %s", case.name, e)
                if outcome.status == "passed":
                    outcome = hook_outcome("after_each hook", e)

        return outcome

    async def _close_session(self, session: Session) -> Exception | None:
        try:
            await close(session)
        except Exception as e:
            log.error("Failed to close session: %s", e, exc_info=e)
            return e
        return None

    def _timeout_reason(self) -> str:
        return f"Suite timed out after {self.timeout}s"

    def _cancelled_outcome(self, detail: str) -> Outcome:
        return Outcome(
            status="errored",
            message=f"{self.cancel_reason} ({detail})",
            error=asyncio.CancelledError(),
        )

    def _finalize(
        self, case: TestCase, name: str, outcome: Outcome, duration: float
    ) -> TestResult:
        case.state = outcome.status
        result = TestResult(
            name=name,
            status=outcome.status,
            duration=duration,
            message=outcome.message,
            error_kind=outcome.error_kind,
        )

        if outcome.status == "errored" and not isinstance(
            outcome.error, asyncio.CancelledError
        ):
            log.error(
                "Test errored: name=%s message=%s",
                name,
                outcome.message,
                exc_info=outcome.error,
            )
        log.info(
            "Test completed: name=%s status=%s duration=%.2fs",
            name,
            result.status,
            result.duration,
        )
        return result
