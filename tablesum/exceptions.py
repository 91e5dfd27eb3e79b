"""Custom exception hierarchy for TableSum.

Every exception carries a human-readable message plus a context dictionary
(URL, selector, timeout) so failures can be logged with structured fields.
Token normalization never raises; these types cover the browser, the
driver's page fetches, reporting and logging setup.
"""

from datetime import UTC, datetime
from typing import Any


class TableSumError(Exception):
    """Base exception for all TableSum errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class BrowserInitializationError(TableSumError):
    """Raised when the browser instance fails to launch.

    Usually a missing Playwright browser binary or resource exhaustion.
    """

    def __init__(self, reason: str, browser_type: str = "chromium") -> None:
        super().__init__(
            message=f"Failed to initialize {browser_type} browser: {reason}",
            context={"browser_type": browser_type, "reason": reason},
        )


class NavigationError(TableSumError):
    """Raised when a page cannot be loaded."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            message=f"Navigation to '{url}' failed: {reason}",
            context={"url": url, "reason": reason, "status_code": status_code},
        )


class ExtractionError(TableSumError):
    """Raised when cell texts cannot be read from a loaded page."""

    def __init__(self, selector: str, url: str, reason: str) -> None:
        super().__init__(
            message=f"Cell text extraction failed for selector '{selector}': {reason}",
            context={"selector": selector, "url": url, "reason": reason},
        )


class PageTimeoutError(TableSumError):
    """Raised when fetching a single page exceeds its time budget."""

    def __init__(self, url: str, timeout_sec: float) -> None:
        super().__init__(
            message=f"Fetching '{url}' timed out after {timeout_sec:g}s",
            context={"url": url, "timeout_sec": timeout_sec},
        )
        self.timeout_sec = timeout_sec


class ReportGenerationError(TableSumError):
    """Raised when an Excel or HTML report cannot be written."""

    def __init__(self, report_type: str, reason: str, output_path: str | None = None) -> None:
        super().__init__(
            message=f"Failed to generate {report_type} report: {reason}",
            context={"report_type": report_type, "reason": reason, "output_path": output_path},
        )


class LoggingInitializationError(TableSumError):
    """Raised when the logging system fails to initialize.

    Startup-blocking: the run does not start without working logs.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
