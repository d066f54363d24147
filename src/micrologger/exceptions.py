"""
Unified exception hierarchy for micrologger.

Sink I/O failures (``OSError``, ``ValueError`` from closed files, ...) are not
part of this hierarchy: they propagate to the caller of ``log``/``log_async``
exactly as the underlying writer raised them.
"""

from __future__ import annotations

from typing import Any


class MicroLoggerError(Exception):
    """Root of all errors raised by micrologger itself."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class LogFormatError(MicroLoggerError):
    """Placeholder substitution or header rendering failed.

    Raised for bad templates, missing arguments, negative tag widths,
    invalid padding characters and broken timestamp patterns.
    """

    def __init__(self, *, template: str, reason: str) -> None:
        super().__init__(
            f"Failed to format log message {template!r}: {reason}",
            code="LOG_FORMAT",
            details={"template": template, "reason": reason},
        )


class LoggerClosedError(MicroLoggerError):
    """The logger was used after ``close()``."""

    def __init__(self, *, operation: str) -> None:
        super().__init__(
            f"Cannot {operation}: logger is closed",
            code="LOGGER_CLOSED",
            details={"operation": operation},
        )


class SinkClosedError(MicroLoggerError):
    """A sink was written to after ``close()``."""

    def __init__(self, *, sink: str) -> None:
        super().__init__(
            f"Sink {sink} is closed",
            code="SINK_CLOSED",
            details={"sink": sink},
        )


class LoggerBusyError(MicroLoggerError):
    """A blocking call was made on an event loop whose own task holds the logger.

    Waiting would deadlock: the holder can only finish once the loop runs
    again. Use ``log_async`` from coroutines while async logging is active.
    """

    def __init__(self, *, operation: str) -> None:
        super().__init__(
            f"Cannot {operation}: an async call on this event loop holds the logger",
            code="LOGGER_BUSY",
            details={"operation": operation},
        )
