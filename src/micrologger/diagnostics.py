"""
Diagnostics logging for micrologger's own lifecycle events.

Loggers are structlog wrappers around stdlib loggers in the ``micrologger``
namespace, so they stay silent until the host application enables that
namespace through ``logging`` configuration.
"""

from __future__ import annotations

import logging

import structlog

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    structlog.dev.ConsoleRenderer(colors=False),
]


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name or "micrologger"),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
