"""
Line formatting: newline splitting and fixed-width headers.

Everything here is pure. No I/O, no locking, no shared state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from .levels import LogLevel
from .settings import LEVEL_WIDTH, LoggerSettings
from .timestamps import format_timestamp

_LINE_BREAKS = re.compile(r"[\r\n]+")


def fixed_width(value: str, width: int, padding: str = " ") -> str:
    """Truncate or right-pad ``value`` to exactly ``width`` characters.

    A value that already has the target width is returned as is.

    Raises:
        ValueError: ``width`` is negative.
        TypeError: Padding is needed and ``padding`` is not exactly one character.
    """
    if width < 0:
        raise ValueError(f"Column width must be non-negative, got {width}")
    if len(value) == width:
        return value
    if len(value) > width:
        return value[:width]
    return value.ljust(width, padding)


def split_lines(message: str) -> list[str]:
    """Split on line breaks, treating any run of CR/LF as a single break.

    >>> split_lines("a\\r\\nb\\n\\nc")
    ['a', 'b', 'c']
    """
    fragments = [fragment for fragment in _LINE_BREAKS.split(message) if fragment]
    return fragments or [""]


@dataclass(frozen=True)
class FormattedLine:
    """One output line, kept as rendered segments so sinks can style them."""

    timestamp: str
    tag: str
    level: LogLevel
    level_name: str
    message: str

    @property
    def header(self) -> str:
        return f"[{self.timestamp}] [{self.tag}] [{self.level_name}]"

    @property
    def text(self) -> str:
        return f"{self.header} {self.message}"

    def __str__(self) -> str:
        return self.text


def format_lines(
    settings: LoggerSettings,
    timestamp: datetime,
    level: LogLevel,
    tag: str,
    message: str,
) -> list[FormattedLine]:
    """Expand a message into header-prefixed lines, one per fragment."""
    padding = settings.padding_character
    stamp = format_timestamp(timestamp, settings.datetime_format)
    fixed_tag = fixed_width(tag, settings.tag_length, padding)
    level_name = fixed_width(level.label, LEVEL_WIDTH, padding)

    return [
        FormattedLine(
            timestamp=stamp,
            tag=fixed_tag,
            level=level,
            level_name=level_name,
            message=fragment,
        )
        for fragment in split_lines(message)
    ]
