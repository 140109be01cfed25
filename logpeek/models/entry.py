"""Parsed log entry value types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class LogLevel(IntEnum):
    """Log severity, numbered by verbosity.

    A lower value is more severe: ``ERROR < WARN < INFO < DEBUG < TRACE``. A
    minimum-level filter of ``WARN`` therefore admits every entry whose value
    is ``<= WARN``.
    """

    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        """Parse a standard level name, ignoring case. Raises ``ValueError``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid log level: {name}") from None


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: datetime
    level: LogLevel
    module: str
    message: str
    application: int


__all__ = ["LogEntry", "LogLevel"]
