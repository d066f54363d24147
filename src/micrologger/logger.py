"""
MicroLogger: fan-out of formatted lines to registered sinks.

A single lock per logger guards the sink list, emission and close, so lines
from two calls never interleave within a sink and a registration never races
an emission. The blocking path holds the lock directly; the async path
acquires the same lock from a worker thread and then awaits the sinks.

A blocking call made on an event loop thread while a task of that loop holds
(or is acquiring) the lock raises ``LoggerBusyError`` instead of waiting, since
the holder cannot finish until the loop runs again.
"""

from __future__ import annotations

import asyncio
import threading
import weakref
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Iterator

from .diagnostics import get_logger
from .exceptions import LogFormatError, LoggerBusyError, LoggerClosedError
from .formatting import FormattedLine, format_lines
from .levels import LogLevel
from .settings import LoggerSettings
from .sinks import BaseSink, TextWriterSink

logger = get_logger("micrologger.logger")
_debug_channel = get_logger("micrologger.debug")

EmissionStep = tuple[BaseSink, FormattedLine | None]


def _mirror_to_debug(text: str) -> None:
    _debug_channel.debug(text)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class _LockClaim:
    """Hands a lock acquired in a worker thread over to a task.

    If the task is cancelled before taking delivery, whichever side comes
    second releases the lock, so no event loop turn is needed to free it.
    """

    def __init__(self, lock: threading.Lock):
        self._lock = lock
        self._guard = threading.Lock()
        self._abandoned = False
        self._claimed = False

    def acquire(self) -> bool:
        self._lock.acquire()
        with self._guard:
            if self._abandoned:
                self._lock.release()
                return False
            self._claimed = True
            return True

    def abandon(self) -> None:
        with self._guard:
            self._abandoned = True
            if self._claimed:
                self._lock.release()


async def _run_to_completion(task: asyncio.Future[None]) -> None:
    """Await ``task``, deferring a cancellation of the caller until it is done."""
    cancelled = False
    while not task.done():
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            cancelled = True
    if cancelled and (task.cancelled() or task.exception() is None):
        raise asyncio.CancelledError
    task.result()


class MicroLogger:
    """Leveled text logger writing to any number of sinks.

    Usage:
        with MicroLogger(LoggerSettings(logging_level="verbose")) as log:
            log.register_output(ConsoleSink())
            log.log("Listening on {0}:{1}", host, port, tag="server")
            await log.log_async("Shutting down", level=LogLevel.WARNING)

    Messages are templates for ``str.format``; literal braces must be
    doubled. ``timestamp``, ``level`` and ``tag`` are keyword-only and
    default to now, ``LogLevel.INFO`` and ``settings.default_tag``.
    """

    def __init__(self, settings: LoggerSettings | None = None):
        self.settings = settings or LoggerSettings()
        self._outputs: list[BaseSink] = []
        self._lock = threading.Lock()
        self._loop_gates: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock] = (
            weakref.WeakKeyDictionary()
        )
        self._closed = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def logging_level(self) -> LogLevel:
        return self.settings.logging_level

    @logging_level.setter
    def logging_level(self, value: LogLevel | int | str) -> None:
        self.settings.logging_level = LogLevel.parse(value)

    @property
    def outputs(self) -> tuple[BaseSink, ...]:
        """Registered sinks, in registration order."""
        with self._locked("read outputs"):
            return tuple(self._outputs)

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Registration
    # =========================================================================

    def register_output(self, output: BaseSink | Any) -> BaseSink:
        """Register a sink, or a text writer wrapped in a ``TextWriterSink``.

        Registering something that is already registered does nothing and
        returns the existing sink.
        """
        if not isinstance(output, BaseSink) and not callable(getattr(output, "write", None)):
            raise TypeError(f"Expected a sink or a text writer, got {type(output).__name__}")

        with self._locked("register output"):
            self._ensure_open("register output")
            existing = self._find(output)
            if existing is not None:
                return existing
            sink = output if isinstance(output, BaseSink) else TextWriterSink(output)
            self._outputs.append(sink)
            count = len(self._outputs)

        logger.debug("sink_registered", sink=type(sink).__name__, outputs=count)
        return sink

    def unregister_output(self, output: BaseSink | Any) -> None:
        """Remove a sink (or wrapped writer) without closing it."""
        with self._locked("unregister output"):
            sink = self._find(output)
            if sink is None:
                return
            self._outputs.remove(sink)
            count = len(self._outputs)

        logger.debug("sink_unregistered", sink=type(sink).__name__, outputs=count)

    def _find(self, output: Any) -> BaseSink | None:
        for sink in self._outputs:
            if sink is output:
                return sink
            if isinstance(sink, TextWriterSink) and sink.writer is output:
                return sink
        return None

    # =========================================================================
    # Logging
    # =========================================================================

    def log(
        self,
        message: str,
        *args: Any,
        timestamp: datetime | None = None,
        level: LogLevel | int | str = LogLevel.INFO,
        tag: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Format ``message`` with the arguments and write it to every sink."""
        lines = self._prepare(message, args, kwargs, timestamp, level, tag)
        if lines is None:
            return

        with self._locked("log"):
            self._ensure_open("log")
            for sink, line in self._emission(lines):
                if line is None:
                    sink.flush()
                else:
                    sink.write_line(line)

    async def log_async(
        self,
        message: str,
        *args: Any,
        timestamp: datetime | None = None,
        level: LogLevel | int | str = LogLevel.INFO,
        tag: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Async counterpart of :meth:`log`; writes are byte-identical."""
        lines = self._prepare(message, args, kwargs, timestamp, level, tag)
        if lines is None:
            return

        async with self._locked_async():
            self._ensure_open("log")
            # Once writing starts the call runs to completion; a cancellation
            # is re-raised only after the last sink operation has returned.
            await _run_to_completion(asyncio.ensure_future(self._emit_async(lines)))

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.CRITICAL, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.ERROR, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.WARNING, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.INFO, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.DEBUG, **kwargs)

    def verbose(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.log(message, *args, level=LogLevel.VERBOSE, **kwargs)

    def _prepare(
        self,
        message: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        timestamp: datetime | None,
        level: LogLevel | int | str,
        tag: str | None,
    ) -> list[FormattedLine] | None:
        """Format and mirror a message; None when the threshold filters it out."""
        self._ensure_open("log")
        settings = self.settings
        level = LogLevel.parse(level)
        if timestamp is None:
            timestamp = datetime.now().astimezone()
        if tag is None:
            tag = settings.default_tag

        try:
            text = message.format(*args, **kwargs)
            lines = format_lines(settings, timestamp, level, tag, text)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            raise LogFormatError(template=str(message), reason=str(exc)) from exc

        if settings.output_to_debug:
            mirror = settings.debug_writer or _mirror_to_debug
            for line in lines:
                mirror(line.text)

        if not level.passes(settings.logging_level):
            return None
        return lines

    def _emission(self, lines: list[FormattedLine]) -> Iterator[EmissionStep]:
        """Steps in emission order; a ``None`` line means flush that sink."""
        for sink in self._outputs:
            for line in lines:
                yield sink, line
            yield sink, None

    async def _emit_async(self, lines: list[FormattedLine]) -> None:
        for sink, line in self._emission(lines):
            if line is None:
                await sink.flush_async()
            else:
                await sink.write_line_async(line)

    @contextmanager
    def _locked(self, operation: str) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            loop = _running_loop()
            gate = self._loop_gates.get(loop) if loop is not None else None
            if gate is not None and gate.locked():
                raise LoggerBusyError(operation=operation)
            self._lock.acquire()
        try:
            yield
        finally:
            self._lock.release()

    @asynccontextmanager
    async def _locked_async(self) -> AsyncIterator[None]:
        # Tasks of one loop queue on an asyncio.Lock first, so at most one of
        # them blocks an executor thread on the shared lock.
        loop = asyncio.get_running_loop()
        gate = self._loop_gates.get(loop)
        if gate is None:
            gate = self._loop_gates.setdefault(loop, asyncio.Lock())

        async with gate:
            if not self._lock.acquire(blocking=False):
                claim = _LockClaim(self._lock)
                try:
                    await asyncio.shield(loop.run_in_executor(None, claim.acquire))
                except asyncio.CancelledError:
                    claim.abandon()
                    raise
            try:
                yield
            finally:
                self._lock.release()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close every registered sink once. Calling again is a no-op."""
        with self._locked("close"):
            result = self._close_outputs()
        self._closed_with(result)

    async def aclose(self) -> None:
        """Async counterpart of :meth:`close`, waiting for the lock without blocking the loop."""
        async with self._locked_async():
            result = self._close_outputs()
        self._closed_with(result)

    def _close_outputs(self) -> tuple[int, BaseException | None] | None:
        if self._closed:
            return None
        self._closed = True

        failure: BaseException | None = None
        for sink in self._outputs:
            try:
                sink.close()
            except Exception as exc:
                if failure is None:
                    failure = exc
        return len(self._outputs), failure

    def _closed_with(self, result: tuple[int, BaseException | None] | None) -> None:
        if result is None:
            return
        count, failure = result
        logger.debug("logger_closed", outputs=count)
        if failure is not None:
            raise failure

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise LoggerClosedError(operation=operation)

    def __enter__(self) -> MicroLogger:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> MicroLogger:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
