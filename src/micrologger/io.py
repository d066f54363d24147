"""
I/O redirection utilities.
"""

from __future__ import annotations

from .levels import LogLevel
from .logger import MicroLogger


class LoggerStream:
    """File-like object that logs every completed line through a MicroLogger.

    Text is buffered until a newline arrives; ``flush()`` emits whatever is
    pending. Lines are logged verbatim, never as format templates. Writing
    from a coroutine while a task of the same loop is inside ``log_async``
    raises ``LoggerBusyError``.

        with contextlib.redirect_stdout(LoggerStream(log, tag="print")):
            print("captured")
    """

    def __init__(
        self,
        logger: MicroLogger,
        level: LogLevel = LogLevel.INFO,
        tag: str | None = None,
        encoding: str = "utf-8",
    ):
        self.logger = logger
        self.level = level
        self.tag = tag
        self.encoding = encoding
        self.linebuf = ""

    def write(self, buf: str | bytes) -> int:
        if isinstance(buf, bytes):
            buf = buf.decode(self.encoding, errors="replace")

        for line in buf.splitlines(True):
            if line.endswith(("\n", "\r")):
                self.linebuf += line.rstrip("\r\n")
                if self.linebuf:
                    self._emit(self.linebuf)
                self.linebuf = ""
            else:
                self.linebuf += line
        return len(buf)

    def flush(self) -> None:
        if self.linebuf:
            self._emit(self.linebuf)
            self.linebuf = ""

    def isatty(self) -> bool:
        return False

    def writable(self) -> bool:
        return True

    def _emit(self, text: str) -> None:
        self.logger.log("{0}", text, level=self.level, tag=self.tag)
