"""
Interceptors for routing standard library logging into a MicroLogger.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .levels import LogLevel
from .logger import MicroLogger

_OWN_NAMESPACE = "micrologger"


class MicroLoggerHandler(logging.Handler):
    """
    Redirect standard library logging events to a MicroLogger.

    The record's formatted message is logged verbatim, so ``%``-style
    arguments are resolved by ``logging`` and braces are never treated as
    placeholders. The tag is ``tag`` when given, otherwise the record's
    logger name.

    Records from micrologger's own loggers are skipped; attaching this
    handler to the root logger would otherwise feed the debug mirror back
    into the logger that produced it.
    """

    def __init__(self, logger: MicroLogger, tag: str | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.logger = logger
        self.tag = tag

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_NAMESPACE or record.name.startswith(_OWN_NAMESPACE + "."):
            return

        try:
            msg = self.format(record)
            self.logger.log(
                "{0}",
                msg,
                timestamp=datetime.fromtimestamp(record.created).astimezone(),
                level=LogLevel.from_stdlib(record.levelno),
                tag=self.tag or record.name or "root",
            )
        except Exception:
            self.handleError(record)
