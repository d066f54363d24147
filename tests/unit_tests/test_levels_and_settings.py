"""
Severity level and settings unit tests.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from micrologger import LoggerSettings, LogLevel


class TestLogLevel:
    """LogLevel ordering and parsing"""

    def test_ranks_run_from_most_to_least_severe(self) -> None:
        assert list(LogLevel) == [
            LogLevel.CRITICAL,
            LogLevel.ERROR,
            LogLevel.WARNING,
            LogLevel.INFO,
            LogLevel.DEBUG,
            LogLevel.VERBOSE,
        ]
        assert [int(level) for level in LogLevel] == [0, 1, 2, 3, 4, 5]

    def test_labels(self) -> None:
        assert [level.label for level in LogLevel] == ["Critical", "Error", "Warning", "Info", "Debug", "Verbose"]

    def test_passes_threshold(self) -> None:
        assert LogLevel.CRITICAL.passes(LogLevel.ERROR)
        assert LogLevel.ERROR.passes(LogLevel.ERROR)
        assert not LogLevel.INFO.passes(LogLevel.ERROR)
        assert LogLevel.VERBOSE.passes(LogLevel.VERBOSE)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (LogLevel.DEBUG, LogLevel.DEBUG),
            (2, LogLevel.WARNING),
            ("info", LogLevel.INFO),
            ("  Verbose ", LogLevel.VERBOSE),
            ("WARN", LogLevel.WARNING),
            ("fatal", LogLevel.CRITICAL),
            ("trace", LogLevel.VERBOSE),
            ("4", LogLevel.DEBUG),
        ],
    )
    def test_parse(self, value, expected: LogLevel) -> None:
        assert LogLevel.parse(value) is expected

    @pytest.mark.parametrize("value", ["loud", 6, -1, True, None, 2.5])
    def test_parse_rejects_unknown_values(self, value) -> None:
        with pytest.raises(ValueError):
            LogLevel.parse(value)

    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [
            (logging.CRITICAL, LogLevel.CRITICAL),
            (logging.ERROR, LogLevel.ERROR),
            (logging.WARNING, LogLevel.WARNING),
            (logging.INFO, LogLevel.INFO),
            (logging.DEBUG, LogLevel.DEBUG),
            (5, LogLevel.VERBOSE),
            (25, LogLevel.INFO),
        ],
    )
    def test_from_stdlib(self, levelno: int, expected: LogLevel) -> None:
        assert LogLevel.from_stdlib(levelno) is expected


class TestLoggerSettings:
    """LoggerSettings defaults and sources"""

    def test_defaults(self) -> None:
        settings = LoggerSettings()

        assert settings.padding_character == " "
        assert settings.default_tag == "stdout"
        assert settings.tag_length == 15
        assert settings.datetime_format == "yyyy-MM-dd HH:mm:ss zzz"
        assert settings.logging_level is LogLevel.ERROR
        assert settings.output_to_debug is False
        assert settings.debug_writer is None

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MICROLOG_LOGGING_LEVEL", "verbose")
        monkeypatch.setenv("MICROLOG_TAG_LENGTH", "20")
        monkeypatch.setenv("MICROLOG_OUTPUT_TO_DEBUG", "true")
        monkeypatch.setenv("MICROLOG_DEFAULT_TAG", "worker")

        settings = LoggerSettings()

        assert settings.logging_level is LogLevel.VERBOSE
        assert settings.tag_length == 20
        assert settings.output_to_debug is True
        assert settings.default_tag == "worker"

    def test_assignment_parses_level_names(self) -> None:
        settings = LoggerSettings()
        settings.logging_level = "debug"
        assert settings.logging_level is LogLevel.DEBUG

    def test_unknown_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggerSettings(logging_level="loud")

    def test_debug_writer_is_not_serialized(self) -> None:
        captured: list[str] = []
        settings = LoggerSettings(debug_writer=captured.append)

        assert settings.debug_writer is not None
        assert "debug_writer" not in settings.model_dump()

    def test_range_problems_are_not_rejected_here(self) -> None:
        settings = LoggerSettings(tag_length=-3, padding_character="ab")
        assert settings.tag_length == -3
