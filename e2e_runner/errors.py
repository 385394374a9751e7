"""Exception hierarchy raised by sessions, locators and the runner."""


class E2ERunnerError(Exception):
    """Base exception for all runner errors."""


class InvalidSessionError(E2ERunnerError):
    """Raised when an operation targets a closed session."""


class LocatorTimeoutError(E2ERunnerError, TimeoutError):
    """Raised when no element matched a selector within the wait timeout."""

    def __init__(self, selector: str, elapsed: float) -> None:
        self.selector = selector
        self.elapsed = elapsed
        super().__init__(
            f"No element matched selector {selector!r} after {elapsed:.3f}s"
        )


class EmptyContentError(E2ERunnerError):
    """Raised when a located element has no text content."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Element matching {selector!r} has no text content")


class NavigationError(E2ERunnerError):
    """Raised when the browser engine reports a navigation failure."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class NavigationTimeoutError(E2ERunnerError, TimeoutError):
    """Raised when a page did not become ready within the navigation timeout."""

    def __init__(self, url: str, elapsed: float) -> None:
        self.url = url
        self.elapsed = elapsed
        super().__init__(f"Navigation to {url} timed out after {elapsed:.3f}s")


class EngineNotFoundError(E2ERunnerError):
    """Raised when a browser engine is not found."""


class SpecDefinitionError(E2ERunnerError):
    """Raised when a spec file cannot be read or validated."""


class ServerNotReadyError(E2ERunnerError):
    """Raised when the application under test did not answer in time."""
