"""
Severity levels.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class LogLevel(IntEnum):
    """Message severity, ordered from most to least severe.

    A message passes the filter when its rank is numerically lower than or
    equal to the configured threshold.
    """

    CRITICAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    VERBOSE = 5

    @property
    def label(self) -> str:
        """Name as rendered in line headers (``Info``, ``Critical``, ...)."""
        return self.name.capitalize()

    def passes(self, threshold: LogLevel) -> bool:
        return self <= threshold

    @classmethod
    def parse(cls, value: LogLevel | int | str) -> LogLevel:
        """Resolve a member, an integer rank or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().upper()
            if key.isdigit():
                return cls(int(key))
            key = _ALIASES.get(key, key)
            try:
                return cls[key]
            except KeyError:
                pass
        raise ValueError(f"Invalid log level: {value!r}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> LogLevel:
        """Map a stdlib ``logging`` level number onto the closest severity."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.VERBOSE


_ALIASES = {
    "WARN": "WARNING",
    "FATAL": "CRITICAL",
    "TRACE": "VERBOSE",
}
