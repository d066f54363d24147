"""
Shared fixtures for micrologger tests.
"""

from __future__ import annotations

import typing as t
from datetime import datetime, timedelta, timezone

import pytest

from micrologger import BaseSink, FormattedLine, LoggerSettings, LogLevel, MicroLogger


class RecordingSink(BaseSink):
    """Sink that remembers every write and flush, in order."""

    def __init__(self, name: str = "recorder", events: list[tuple[str, str]] | None = None):
        super().__init__()
        self.name = name
        self.events = events if events is not None else []
        self.lines: list[FormattedLine] = []
        self.close_calls = 0

    @property
    def texts(self) -> list[str]:
        return [line.text for line in self.lines]

    def _write(self, line: FormattedLine) -> None:
        self.lines.append(line)
        self.events.append((self.name, line.text))

    def _flush(self) -> None:
        self.events.append((self.name, "<flush>"))

    def _close(self) -> None:
        self.close_calls += 1


class BrokenSink(BaseSink):
    """Sink whose destination rejects every write."""

    def _write(self, line: FormattedLine) -> None:
        raise OSError("disk full")

    def _flush(self) -> None:
        pass

    def _close(self) -> None:
        pass


@pytest.fixture
def stamp() -> datetime:
    return datetime(2024, 5, 17, 13, 4, 5, 123456, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def stamp_text() -> str:
    return "2024-05-17 13:04:05 +02:00"


@pytest.fixture
def settings() -> LoggerSettings:
    """Default layout with every level enabled."""
    return LoggerSettings(logging_level=LogLevel.VERBOSE)


@pytest.fixture
def micro(settings: LoggerSettings) -> t.Iterator[MicroLogger]:
    logger = MicroLogger(settings)
    yield logger
    logger.close()


@pytest.fixture
def make_recorder() -> t.Callable[..., RecordingSink]:
    return RecordingSink


@pytest.fixture
def recorder() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def broken_sink() -> BrokenSink:
    return BrokenSink()
