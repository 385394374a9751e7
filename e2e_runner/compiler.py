"""Turn spec definitions into orchestrator declarations."""

from collections.abc import Sequence

from e2e_runner.locator import resolve_text
from e2e_runner.models.config import NavigateOptions
from e2e_runner.models.definition import (
    ExpectTextStep,
    ExpectTitleStep,
    NavigateStep,
    SpecDefinition,
    SpecStep,
    SuiteSpec,
)
from e2e_runner.orchestrator import SessionFn, TestOrchestrator
from e2e_runner.session import Session, navigate, title


async def run_step(session: Session, step: SpecStep) -> None:
    """Execute one spec step against a session."""
    match step:
        case NavigateStep():
            options = NavigateOptions(timeout=step.timeout, wait_until=step.wait_until)
            await navigate(session, step.navigate, options)
        case ExpectTitleStep():
            actual = await title(session)
            if actual != step.expect_title:
                raise AssertionError(
                    f"expected title {step.expect_title!r}, got {actual!r}"
                )
        case ExpectTextStep():
            actual = await resolve_text(session, step.locator)
            if actual != step.expect_text:
                raise AssertionError(
                    f"expected text of {step.locator.selector!r} to be "
                    f"{step.expect_text!r}, got {actual!r}"
                )


def compile_steps(steps: Sequence[SpecStep]) -> SessionFn:
    """Build a session function running steps in order."""

    async def run_steps(session: Session) -> None:
        for step in steps:
            await run_step(session, step)

    return run_steps


def register_suite(orchestrator: TestOrchestrator, suite: SuiteSpec) -> None:
    """Declare a suite spec and everything nested in it."""

    def body() -> None:
        if suite.before_each:
            orchestrator.before_each(compile_steps(suite.before_each))
        if suite.after_each:
            orchestrator.after_each(compile_steps(suite.after_each))
        for test in suite.tests:
            orchestrator.it(test.name, compile_steps(test.steps))
        for child in suite.suites:
            register_suite(orchestrator, child)

    orchestrator.describe(suite.name, body)


def register_definition(
    orchestrator: TestOrchestrator, definition: SpecDefinition
) -> None:
    """Declare every suite of a spec definition on the orchestrator."""
    for suite in definition.suites:
        register_suite(orchestrator, suite)
