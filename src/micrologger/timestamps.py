"""
Timestamp pattern rendering.

Patterns use the custom date/time syntax shared with existing log consumers
(``yyyy-MM-dd HH:mm:ss zzz`` renders as ``2024-05-17 13:04:05 +02:00``)
rather than ``strftime`` directives.
"""

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache

_TOKEN_RE = re.compile(r"""'[^']*'|"[^"]*"|\\.|([yMdHhmsfFtz])\1*|.""", re.DOTALL)

_LITERAL = "literal"
_FIELD = "field"

MAX_FRACTION_DIGITS = 7


@lru_cache(maxsize=64)
def _tokenize(pattern: str) -> tuple[tuple[str, str], ...]:
    tokens: list[tuple[str, str]] = []
    for match in _TOKEN_RE.finditer(pattern):
        text = match.group(0)
        if match.group(1) or text == "K":
            tokens.append((_FIELD, text))
        elif len(text) >= 2 and text[0] in "'\"":
            tokens.append((_LITERAL, text[1:-1]))
        elif len(text) == 2 and text[0] == "\\":
            tokens.append((_LITERAL, text[1]))
        elif text in ("'", '"'):
            raise ValueError(f"Unterminated quoted literal in timestamp pattern {pattern!r}")
        elif text == "\\":
            raise ValueError(f"Dangling escape at end of timestamp pattern {pattern!r}")
        else:
            tokens.append((_LITERAL, text))
    return tuple(tokens)


def _offset(ts: datetime, width: int) -> str:
    offset = ts.utcoffset()
    total = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    if width == 1:
        return f"{sign}{hours}"
    if width == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _fraction(ts: datetime, width: int, trim: bool) -> str:
    if width > MAX_FRACTION_DIGITS:
        raise ValueError(f"Fractional seconds support at most {MAX_FRACTION_DIGITS} digits, got {width}")
    digits = f"{ts.microsecond:06d}0"[:width]
    return digits.rstrip("0") if trim else digits


def _render_field(ts: datetime, token: str, naive: bool) -> str:
    letter, width = token[0], len(token)

    if letter == "y":
        if width == 1:
            return str(ts.year % 100)
        if width == 2:
            return f"{ts.year % 100:02d}"
        return f"{ts.year:0{width}d}"
    if letter == "M":
        if width == 1:
            return str(ts.month)
        if width == 2:
            return f"{ts.month:02d}"
        return ts.strftime("%b" if width == 3 else "%B")
    if letter == "d":
        if width == 1:
            return str(ts.day)
        if width == 2:
            return f"{ts.day:02d}"
        return ts.strftime("%a" if width == 3 else "%A")
    if letter == "H":
        return str(ts.hour) if width == 1 else f"{ts.hour:02d}"
    if letter == "h":
        hour = ts.hour % 12 or 12
        return str(hour) if width == 1 else f"{hour:02d}"
    if letter == "m":
        return str(ts.minute) if width == 1 else f"{ts.minute:02d}"
    if letter == "s":
        return str(ts.second) if width == 1 else f"{ts.second:02d}"
    if letter == "f":
        return _fraction(ts, width, trim=False)
    if letter == "F":
        return _fraction(ts, width, trim=True)
    if letter == "t":
        designator = "AM" if ts.hour < 12 else "PM"
        return designator[0] if width == 1 else designator
    if letter == "z":
        return _offset(ts, min(width, 3))
    # K
    return "" if naive else _offset(ts, 3)


def format_timestamp(timestamp: datetime, pattern: str) -> str:
    """Render ``timestamp`` with ``pattern``.

    Naive datetimes are taken as local time. Characters that are not pattern
    letters are copied through; quote them (``'T'``) or escape them (``\\T``)
    to emit pattern letters literally.

    Raises:
        ValueError: The pattern has an unterminated quote, a dangling escape
            or more than seven fractional-second digits.
    """
    naive = timestamp.tzinfo is None
    ts = timestamp.astimezone() if naive else timestamp

    parts = []
    for kind, value in _tokenize(pattern):
        parts.append(value if kind == _LITERAL else _render_field(ts, value, naive))
    return "".join(parts)
