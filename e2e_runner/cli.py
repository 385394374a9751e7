"""CLI entry point for the end-to-end test runner."""

import argparse
import asyncio
import glob
import json
import logging
import os
import sys
from collections.abc import Sequence
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from e2e_runner.compiler import register_definition
from e2e_runner.definition_loader import load_spec_definition
from e2e_runner.engines.loading import load_engine_manifest
from e2e_runner.errors import (
    EngineNotFoundError,
    ServerNotReadyError,
    SpecDefinitionError,
)
from e2e_runner.models.config import SessionConfig
from e2e_runner.models.definition import SpecDefinition
from e2e_runner.models.result import TestResult
from e2e_runner.orchestrator import TestOrchestrator
from e2e_runner.server_probe import wait_for_server

BASE_URL_ENV = "E2E_BASE_URL"

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_SETUP_ERROR = 2

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "errored": "!",
}


class SetupError(Exception):
    """Raised when the run cannot start; maps to exit code 2."""


def log_results_summary(log: logging.Logger, results: Sequence[TestResult]) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration
        )
        if result.error_kind:
            log.info("  Error: %s", result.error_kind)
        if result.message:
            log.info("  Message: %s", result.message)


def format_output(results: Sequence[TestResult]) -> dict[str, Any]:
    """Format test results for JSON output."""
    all_results = [
        {
            "name": result.name,
            "status": result.status,
            "duration": result.duration,
            "message": result.message,
            "error_kind": result.error_kind,
        }
        for result in results
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "passed"),
        "failed": sum(1 for r in all_results if r["status"] == "failed"),
        "errors": sum(1 for r in all_results if r["status"] == "errored"),
        "results": all_results,
    }


def collect_spec_files(patterns: Sequence[str]) -> Sequence[Path]:
    """Expand glob patterns into a sorted, de-duplicated list of files."""
    paths = {
        Path(match)
        for pattern in patterns
        for match in glob.glob(pattern, recursive=True)
        if Path(match).is_file()
    }
    return sorted(paths)


async def load_spec_definitions(paths: Sequence[Path]) -> Sequence[SpecDefinition]:
    """Load every spec file, failing on the first invalid one."""
    return [await load_spec_definition(path) for path in paths]


async def prepare(
    patterns: Sequence[str],
    base_url: str | None,
    wait_for_server_timeout: float | None,
) -> Sequence[SpecDefinition]:
    """Find and load spec files, then wait for the application under test."""
    log = logging.getLogger("e2e_runner")

    paths = collect_spec_files(patterns)
    if not paths:
        raise SetupError(f"No spec files matched: {', '.join(patterns)}")
    log.info("Loading %d spec file(s)...", len(paths))

    try:
        definitions = await load_spec_definitions(paths)
    except (OSError, SpecDefinitionError) as e:
        raise SetupError(str(e)) from e

    if wait_for_server_timeout is not None:
        if base_url is None:
            raise SetupError("--wait-for-server requires a base URL")
        log.info("Waiting for server at %s...", base_url)
        try:
            await wait_for_server(base_url, timeout=wait_for_server_timeout)
        except ServerNotReadyError as e:
            raise SetupError(str(e)) from e

    return definitions


async def run(
    patterns: Sequence[str],
    engine_key: str,
    engine_config_json: str,
    base_url: str | None = None,
    default_timeout: float = 60.0,
    suite_timeout: float | None = None,
    wait_for_server_timeout: float | None = None,
    headless: bool = True,
) -> int:
    """Run spec files and return exit code."""
    log = logging.getLogger("e2e_runner")

    try:
        log.info("Loading engine: %s", engine_key)
        manifest = load_engine_manifest(engine_key)
        config = manifest.config_cls.model_validate(json.loads(engine_config_json))
        session_config = SessionConfig(
            headless=headless, default_timeout=default_timeout, base_url=base_url
        )
        definitions = await prepare(patterns, base_url, wait_for_server_timeout)
    except (EngineNotFoundError, ValidationError, SetupError) as e:
        log.error("Setup failed: %s", e)
        return EXIT_SETUP_ERROR
    except json.JSONDecodeError as e:
        log.error("Setup failed: invalid engine config JSON: %s", e)
        return EXIT_SETUP_ERROR

    async with AsyncExitStack() as stack:
        try:
            browser = await stack.enter_async_context(manifest.browser_factory(config))
            await browser.start(headless=session_config.headless)
        except Exception as e:
            log.error("Setup failed: could not start engine %s: %s", engine_key, e)
            return EXIT_SETUP_ERROR

        orchestrator = TestOrchestrator(
            browser=browser, session_config=session_config, timeout=suite_timeout
        )
        for definition in definitions:
            register_definition(orchestrator, definition)

        log.info("Running tests...")
        results = [result async for result in orchestrator.run()]

    log_results_summary(log, results)
    print(json.dumps(format_output(results), indent=2))

    if any(result.status != "passed" for result in results):
        return EXIT_FAILED
    return EXIT_PASSED


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run end-to-end browser tests")
    parser.add_argument(
        "patterns",
        nargs="+",
        help="Glob patterns of YAML spec files (quote them to use '**')",
    )
    parser.add_argument(
        "--engine",
        default="playwright",
        help="Browser engine key (default: playwright)",
    )
    parser.add_argument(
        "--engine-config",
        default="{}",
        help="JSON configuration for the engine",
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get(BASE_URL_ENV),
        help=f"Base URL of the application under test (default: ${BASE_URL_ENV})",
    )
    parser.add_argument(
        "--default-timeout",
        type=float,
        default=60.0,
        help="Seconds for navigation and locator waits (default: 60)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds for the whole run before remaining tests are cancelled",
    )
    parser.add_argument(
        "--wait-for-server",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Wait up to SECONDS for the base URL to answer before running",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            patterns=args.patterns,
            engine_key=args.engine,
            engine_config_json=args.engine_config,
            base_url=args.base_url,
            default_timeout=args.default_timeout,
            suite_timeout=args.timeout,
            wait_for_server_timeout=args.wait_for_server,
            headless=not args.headed,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
