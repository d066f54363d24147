"""
Logger Configuration.

Values can be supplied directly, through ``MICROLOG_*`` environment variables
or through a ``.env`` file in the working directory:

    MICROLOG_LOGGING_LEVEL=verbose
    MICROLOG_TAG_LENGTH=20
    MICROLOG_OUTPUT_TO_DEBUG=true
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .levels import LogLevel

DEFAULT_DATETIME_FORMAT = "yyyy-MM-dd HH:mm:ss zzz"
LEVEL_WIDTH = 8

DebugWriter = Callable[[str], None]


class LoggerSettings(BaseSettings):
    """Line layout, severity threshold and debug mirroring for a logger.

    Only types are checked here. Values that cannot be rendered (negative
    widths, multi-character padding, broken timestamp patterns) fail when a
    message is formatted.
    """

    model_config = SettingsConfigDict(
        env_prefix="MICROLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    padding_character: str = Field(default=" ", description="Fill character for fixed-width columns")
    default_tag: str = Field(default="stdout", description="Tag used when a call does not supply one")
    tag_length: int = Field(default=15, description="Width of the tag column")
    datetime_format: str = Field(default=DEFAULT_DATETIME_FORMAT, description="Timestamp pattern")
    logging_level: LogLevel = Field(default=LogLevel.ERROR, description="Least severe level that is emitted")
    output_to_debug: bool = Field(default=False, description="Mirror every line to the debug channel")
    debug_writer: DebugWriter | None = Field(
        default=None,
        exclude=True,
        description="Debug channel; the micrologger.debug logger is used when unset",
    )

    @field_validator("logging_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)
