"""
Log sink abstractions and concrete implementations.

Sinks receive already formatted lines and write them to one destination.
They never catch errors from the destination: a failed write or flush
propagates to the logger, and from there to the caller.
"""

from __future__ import annotations

import asyncio
import io
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, BinaryIO

from .exceptions import SinkClosedError
from .formatting import FormattedLine
from .levels import LogLevel

DEFAULT_ENCODING = "utf-8"

# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    Subclasses implement the blocking operations. The async variants default
    to running them on a worker thread so the event loop is never blocked.
    ``close()`` is idempotent.
    """

    def __init__(self) -> None:
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write_line(self, line: FormattedLine) -> None:
        """Write one formatted line followed by a line terminator."""
        self._ensure_open()
        self._write(line)

    def flush(self) -> None:
        self._ensure_open()
        self._flush()

    async def write_line_async(self, line: FormattedLine) -> None:
        self._ensure_open()
        await asyncio.to_thread(self._write, line)

    async def flush_async(self) -> None:
        self._ensure_open()
        await asyncio.to_thread(self._flush)

    def close(self) -> None:
        """Release the destination. Calling again is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._close()

    @abstractmethod
    def _write(self, line: FormattedLine) -> None:
        ...

    @abstractmethod
    def _flush(self) -> None:
        ...

    @abstractmethod
    def _close(self) -> None:
        ...

    def _ensure_open(self) -> None:
        if self._closed:
            raise SinkClosedError(sink=type(self).__name__)

    def __enter__(self) -> BaseSink:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# =============================================================================
# Console Sink
# =============================================================================


class ConsoleSink(BaseSink):
    """Console sink with per-level ANSI colouring.

    Args:
        stream: Output stream (default: stdout)
        use_color: Force colouring on or off; auto-detected from ``isatty``
            when omitted.
    """

    RESET = "\x1b[0m"
    CRITICAL_STYLE = "\x1b[30;41m"
    TIMESTAMP_COLOR = "\x1b[37m"
    TAG_COLOR = "\x1b[34m"
    MESSAGE_COLOR = "\x1b[97m"
    LEVEL_COLORS = {
        LogLevel.ERROR: "\x1b[31m",
        LogLevel.WARNING: "\x1b[33m",
        LogLevel.INFO: "\x1b[36m",
        LogLevel.DEBUG: "\x1b[35m",
        LogLevel.VERBOSE: "\x1b[32m",
    }

    def __init__(self, stream: IO[str] | None = None, use_color: bool | None = None):
        super().__init__()
        self._stream = stream if stream is not None else sys.stdout
        if use_color is None:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
        self._use_color = use_color

    def render(self, line: FormattedLine) -> str:
        if not self._use_color:
            return line.text
        if line.level == LogLevel.CRITICAL:
            return f"{self.CRITICAL_STYLE}{line.text}{self.RESET}"

        level_color = self.LEVEL_COLORS[line.level]
        return "".join(
            [
                f"{self.TIMESTAMP_COLOR}[{line.timestamp}] ",
                f"{self.TAG_COLOR}[{line.tag}] ",
                f"{level_color}[{line.level_name}] ",
                f"{self.MESSAGE_COLOR}{line.message}",
                self.RESET,
            ]
        )

    async def write_line_async(self, line: FormattedLine) -> None:
        self.write_line(line)

    async def flush_async(self) -> None:
        self.flush()

    def _write(self, line: FormattedLine) -> None:
        self._stream.write(self.render(line) + "\n")

    def _flush(self) -> None:
        self._stream.flush()

    def _close(self) -> None:
        # The process stream outlives the sink.
        pass


# =============================================================================
# Text Writer Sink
# =============================================================================


class TextWriterSink(BaseSink):
    """Delegates to a caller-supplied text writer.

    ``writer`` is anything with ``write(str)``; ``flush()`` and ``close()``
    are used when present. The sink takes ownership: closing the sink closes
    the writer.
    """

    def __init__(self, writer: Any, newline: str = "\n"):
        super().__init__()
        self._writer = writer
        self._newline = newline

    @property
    def writer(self) -> Any:
        return self._writer

    def _write(self, line: FormattedLine) -> None:
        self._writer.write(line.text + self._newline)

    def _flush(self) -> None:
        flush = getattr(self._writer, "flush", None)
        if flush is not None:
            flush()

    def _close(self) -> None:
        close = getattr(self._writer, "close", None)
        if close is not None:
            close()


# =============================================================================
# Stream / File Sinks
# =============================================================================


class StreamSink(BaseSink):
    """Writes encoded lines to a binary stream, flushing after every line.

    The stream is wrapped in a ``TextIOWrapper`` (UTF-8 without BOM by
    default), which translates ``\\n`` into the platform line terminator.
    Closing the sink closes the stream.
    """

    def __init__(self, stream: BinaryIO, encoding: str = DEFAULT_ENCODING):
        super().__init__()
        self._stream = stream
        self._writer = io.TextIOWrapper(stream, encoding=encoding, write_through=True)

    @property
    def encoding(self) -> str:
        return self._writer.encoding

    def _write(self, line: FormattedLine) -> None:
        self._writer.write(line.text + "\n")
        self._writer.flush()

    def _flush(self) -> None:
        self._writer.flush()

    def _close(self) -> None:
        self._writer.close()


class FileSink(StreamSink):
    """Appends lines to a file.

    Args:
        target: Path to open for appending (parent directories are created),
            or an already open binary file, which is positioned at its end.
        encoding: Text encoding (default: UTF-8 without BOM)
    """

    def __init__(self, target: str | os.PathLike[str] | BinaryIO, encoding: str = DEFAULT_ENCODING):
        if isinstance(target, (str, os.PathLike)):
            self._path: Path | None = Path(target)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            stream: BinaryIO = open(self._path, "ab")
            try:
                super().__init__(stream, encoding=encoding)
            except Exception:
                stream.close()
                raise
        else:
            self._path = Path(target.name) if isinstance(getattr(target, "name", None), str) else None
            target.seek(0, io.SEEK_END)
            super().__init__(target, encoding=encoding)

    @property
    def path(self) -> Path | None:
        return self._path
