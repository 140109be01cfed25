"""Turn raw log lines into :class:`LogEntry` values.

Each configured application supplies a regular expression with named groups
(``timestamp``, ``level``, ``module``, ``message``), a timestamp format and an
optional table that maps its own level names onto the standard ones. Only the
``message`` group is required.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Mapping

from logpeek.models.entry import LogEntry, LogLevel

logger = logging.getLogger(__name__)

DEFAULT_MODULE = "N/A"

_RFC3339 = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
# Full date-time: basic or extended calendar date, "T", then at least hours
_ISO8601_DATETIME = re.compile(r"^\d{4}-?\d{2}-?\d{2}T\d{2}")
_STRPTIME_DIRECTIVE = re.compile(r"%(.)")
_STRPTIME_CODES = frozenset("aAbBcdfGHIjmMpSuUVwWxXyYzZ%")


class LogParseError(Exception):
    """A single line could not be turned into an entry."""


class NoCaptureGroupsFound(LogParseError):
    def __init__(self, line: str) -> None:
        super().__init__(f"No capture groups found in line: {line}")
        self.line = line


class InvalidMessage(LogParseError):
    def __init__(self, line: str) -> None:
        super().__init__(f"Invalid message: {line}")
        self.line = line


class InvalidTimestamp(LogParseError):
    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"Invalid timestamp {value!r}: {reason}")
        self.value = value


class TimeFormatKind(str, Enum):
    ISO8601 = "iso8601"
    RFC3339 = "rfc3339"
    RFC2822 = "rfc2822"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TimeFormat:
    """One of the well-known timestamp formats, or a custom ``strptime`` format."""

    kind: TimeFormatKind
    pattern: str | None = None

    @classmethod
    def from_config(cls, value: str) -> TimeFormat:
        """Build a format from its configuration string. Raises ``ValueError``."""
        named = value.strip().lower()
        if named in (TimeFormatKind.ISO8601.value, TimeFormatKind.RFC3339.value, TimeFormatKind.RFC2822.value):
            return cls(TimeFormatKind(named))
        directives = _STRPTIME_DIRECTIVE.findall(value.replace("%%", ""))
        if not directives:
            raise ValueError(f"Invalid custom time format: {value!r} has no % directives")
        unknown = sorted({d for d in directives if d not in _STRPTIME_CODES})
        if unknown or value.replace("%%", "").endswith("%"):
            raise ValueError(f"Invalid custom time format: {value!r}")
        return cls(TimeFormatKind.CUSTOM, value)


def parse_timestamp(value: str, time_format: TimeFormat) -> datetime:
    """Parse ``value`` per ``time_format`` into an aware UTC datetime.

    Timestamps without an offset are taken to be UTC.
    """
    kind = time_format.kind
    try:
        if kind is TimeFormatKind.ISO8601:
            if not _ISO8601_DATETIME.match(value):
                raise ValueError("not an ISO 8601 date-time")
            parsed = datetime.fromisoformat(value)
        elif kind is TimeFormatKind.RFC3339:
            if not _RFC3339.match(value):
                raise ValueError("not an RFC 3339 date-time")
            parsed = datetime.fromisoformat(value.upper().replace("Z", "+00:00"))
        elif kind is TimeFormatKind.RFC2822:
            parsed = parsedate_to_datetime(value)
        else:
            parsed = datetime.strptime(value, time_format.pattern or "")
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidTimestamp(value, str(exc) or kind.value) from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _resolve_level(raw: str | None, level_map: Mapping[str, str] | None) -> LogLevel:
    if raw is None:
        return LogLevel.INFO
    if level_map and raw in level_map:
        mapped = level_map[raw]
        try:
            return LogLevel.from_name(mapped)
        except ValueError:
            logger.warning("Invalid log level mapping: %s. Using INFO instead", mapped)
            return LogLevel.INFO
    try:
        return LogLevel.from_name(raw)
    except ValueError:
        logger.warning(
            "Invalid log level: %s. Consider adding a mapping for it under the "
            "application's level_map field.",
            raw,
        )
        return LogLevel.INFO


def parse_entry(
    line: str,
    pattern: re.Pattern[str],
    time_format: TimeFormat,
    app_handle: int,
    level_map: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> LogEntry:
    """Parse one line. Raises a :class:`LogParseError` subclass on failure."""
    match = pattern.search(line)
    if match is None:
        raise NoCaptureGroupsFound(line)
    groups = match.groupdict()

    raw_timestamp = groups.get("timestamp")
    if raw_timestamp is not None:
        timestamp = parse_timestamp(raw_timestamp, time_format)
    else:
        timestamp = now or datetime.now(timezone.utc)

    message = groups.get("message")
    if message is None:
        raise InvalidMessage(line)

    module = groups.get("module")
    return LogEntry(
        timestamp=timestamp,
        level=_resolve_level(groups.get("level"), level_map),
        module=module if module is not None else DEFAULT_MODULE,
        message=message,
        application=app_handle,
    )


__all__ = [
    "DEFAULT_MODULE",
    "InvalidMessage",
    "InvalidTimestamp",
    "LogParseError",
    "NoCaptureGroupsFound",
    "TimeFormat",
    "TimeFormatKind",
    "parse_entry",
    "parse_timestamp",
]
