"""
micrologger: a small multi-sink, leveled text logger.

Messages are formatted into fixed-width ``[timestamp] [tag] [level]`` lines
and fanned out, synchronously or asynchronously, to console, file, stream
and text-writer sinks.
"""

from .exceptions import (
    LogFormatError,
    LoggerBusyError,
    LoggerClosedError,
    MicroLoggerError,
    SinkClosedError,
)
from .formatting import FormattedLine, fixed_width, format_lines, split_lines
from .interceptors import MicroLoggerHandler
from .io import LoggerStream
from .levels import LogLevel
from .logger import MicroLogger
from .settings import LoggerSettings
from .sinks import BaseSink, ConsoleSink, FileSink, StreamSink, TextWriterSink
from .timestamps import format_timestamp

__all__ = [
    "BaseSink",
    "ConsoleSink",
    "FileSink",
    "FormattedLine",
    "LogFormatError",
    "LogLevel",
    "LoggerBusyError",
    "LoggerClosedError",
    "LoggerSettings",
    "LoggerStream",
    "MicroLogger",
    "MicroLoggerError",
    "MicroLoggerHandler",
    "SinkClosedError",
    "StreamSink",
    "TextWriterSink",
    "fixed_width",
    "format_lines",
    "format_timestamp",
    "split_lines",
]
