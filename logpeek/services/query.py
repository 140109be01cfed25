"""Dashboard aggregates and filtered, paginated search over the log store."""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from itertools import islice
from typing import TYPE_CHECKING, Callable, Sequence

from logpeek.models.entry import LogEntry, LogLevel
from logpeek.services.merge import ChronoMergeIterator
from logpeek.services.parser import InvalidTimestamp, TimeFormat, TimeFormatKind, parse_timestamp

if TYPE_CHECKING:
    from logpeek.services.store import LogStore

logger = logging.getLogger(__name__)

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
TOP_MODULES = 5

_ISO8601 = TimeFormat(TimeFormatKind.ISO8601)


class QueryError(Exception):
    """The caller supplied an invalid filter or page request."""


@dataclass(frozen=True)
class SearchFilter:
    """Entry filter for the log table.

    ``max_verbosity`` admits entries whose level value is at most this number
    (see :class:`LogLevel`); ``0`` admits nothing.
    """

    max_verbosity: int | None = None
    module: re.Pattern[str] | None = None
    message: re.Pattern[str] | None = None
    start: datetime | None = None
    end: datetime | None = None

    @classmethod
    def build(
        cls,
        min_log_level: str | None = None,
        module_name: str | None = None,
        message: str | None = None,
        start_timestamp: str | None = None,
        end_timestamp: str | None = None,
    ) -> SearchFilter:
        """Build a filter from raw request values; blank values are ignored."""
        return cls(
            max_verbosity=_parse_level_filter(min_log_level),
            module=_compile(module_name, "module_name"),
            message=_compile(message, "message"),
            start=_parse_bound(start_timestamp, "start_timestamp"),
            end=_parse_bound(end_timestamp, "end_timestamp"),
        )

    @property
    def is_pass_through(self) -> bool:
        """True when only the level (if anything) needs checking."""
        return self.module is None and self.message is None and self.start is None and self.end is None

    def matches_level(self, entry: LogEntry) -> bool:
        return self.max_verbosity is None or entry.level <= self.max_verbosity

    def matches(self, entry: LogEntry) -> bool:
        if not self.matches_level(entry):
            return False
        if self.module is not None and not self.module.search(entry.module):
            return False
        if self.message is not None and not self.message.search(entry.message):
            return False
        if self.start is not None and entry.timestamp < self.start:
            return False
        if self.end is not None and entry.timestamp > self.end:
            return False
        return True


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _parse_level_filter(value: str | None) -> int | None:
    if _blank(value):
        return None
    if value.strip().lower() == "off":
        return 0
    try:
        return int(LogLevel.from_name(value))
    except ValueError as exc:
        raise QueryError(f"Invalid min_log_level: {value}") from exc


def _compile(value: str | None, label: str) -> re.Pattern[str] | None:
    if _blank(value):
        return None
    try:
        return re.compile(value)
    except re.error as exc:
        raise QueryError(f"Invalid {label} regex: {exc}") from exc


def _parse_bound(value: str | None, label: str) -> datetime | None:
    if _blank(value):
        return None
    try:
        return parse_timestamp(value.strip(), _ISO8601)
    except InvalidTimestamp as exc:
        raise QueryError(f"Invalid {label}: {exc}") from exc


@dataclass(frozen=True)
class NamedEntry:
    application: str
    entry: LogEntry


@dataclass
class SearchResult:
    total_items: int = 0
    entries: list[NamedEntry] = field(default_factory=list)


@dataclass
class DashboardStats:
    total_logs_24: list[int]
    error_logs_24: list[int]
    warning_logs_24: list[int]
    total_logs_week: list[int]
    error_logs_week: list[int]
    warning_logs_week: list[int]
    top_modules_24: list[tuple[str, int]]
    top_modules_week: list[tuple[str, int]]
    log_buffer_usage: float
    total_entries: int


def top_modules(error_counts: Counter[str], limit: int = TOP_MODULES) -> list[tuple[str, int]]:
    ranked = sorted(error_counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


class QueryEngine:
    """Read-only queries; each one holds the store's read lock while it runs."""

    def __init__(self, store: LogStore, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _handles(self, applications: Sequence[str] | None) -> list[int] | None:
        if not applications:
            return None
        return self.store.registry.handles_for(applications)

    def dashboard(
        self,
        applications: Sequence[str] | None = None,
        utc_offset_minutes: int = 0,
        now: datetime | None = None,
    ) -> DashboardStats:
        """Hourly and daily counts plus top error modules for the last week.

        ``utc_offset_minutes`` is added to UTC to get the caller's local time
        (``+60`` for UTC+1); day buckets start at local midnight, bucket 0
        being today.
        """
        now = now or self._clock()
        offset = timedelta(minutes=utc_offset_minutes)
        local_midnight = (now + offset).replace(hour=0, minute=0, second=0, microsecond=0)

        total_24 = [0] * HOURS_PER_DAY
        error_24 = [0] * HOURS_PER_DAY
        warning_24 = [0] * HOURS_PER_DAY
        total_week = [0] * DAYS_PER_WEEK
        error_week = [0] * DAYS_PER_WEEK
        warning_week = [0] * DAYS_PER_WEEK
        module_errors: Counter[str] = Counter()
        top_24: list[tuple[str, int]] | None = None

        with self.store.reading():
            handles = self._handles(applications)
            for entry in ChronoMergeIterator(self.store.buffers, handles):
                days_ago = max(0, -((entry.timestamp + offset - local_midnight) // DAY))
                if days_ago >= DAYS_PER_WEEK:
                    break

                age = now - entry.timestamp
                if age < DAY:
                    hours_ago = max(0, age // HOUR)
                    total_24[hours_ago] += 1
                    if entry.level is LogLevel.ERROR:
                        error_24[hours_ago] += 1
                    elif entry.level is LogLevel.WARN:
                        warning_24[hours_ago] += 1
                elif top_24 is None:
                    top_24 = top_modules(module_errors)

                total_week[days_ago] += 1
                if entry.level is LogLevel.ERROR:
                    error_week[days_ago] += 1
                    module_errors[entry.module] += 1
                elif entry.level is LogLevel.WARN:
                    warning_week[days_ago] += 1

            usage = self.store.buffer_utilization(handles)
            total_entries = self.store.total_entries(handles)

        top_week = top_modules(module_errors)
        return DashboardStats(
            total_logs_24=total_24,
            error_logs_24=error_24,
            warning_logs_24=warning_24,
            total_logs_week=total_week,
            error_logs_week=error_week,
            warning_logs_week=warning_week,
            top_modules_24=top_week if top_24 is None else top_24,
            top_modules_week=top_week,
            log_buffer_usage=usage,
            total_entries=total_entries,
        )

    def search(
        self,
        page: int,
        items_per_page: int,
        search_filter: SearchFilter | None = None,
        applications: Sequence[str] | None = None,
    ) -> SearchResult:
        """Return one page of matching entries, newest first, and the total match count."""
        if page < 1:
            raise QueryError("page must be a positive integer")
        if items_per_page < 1:
            raise QueryError("items_per_page must be a positive integer")
        search_filter = search_filter or SearchFilter()
        index = (page - 1) * items_per_page

        with self.store.reading():
            handles = self._handles(applications)
            entries = ChronoMergeIterator(self.store.buffers, handles)

            if search_filter.is_pass_through and search_filter.max_verbosity is None:
                total = self.store.total_entries(handles)
                selected = list(islice(entries, index, index + items_per_page))
            else:
                match = search_filter.matches_level if search_filter.is_pass_through else search_filter.matches
                total = 0
                selected = []
                for entry in entries:
                    if not match(entry):
                        continue
                    if index <= total < index + items_per_page:
                        selected.append(entry)
                    total += 1

            registry = self.store.registry
            named = [NamedEntry(registry.name_of(e.application), e) for e in selected]
        return SearchResult(total_items=total, entries=named)


__all__ = [
    "DashboardStats",
    "NamedEntry",
    "QueryEngine",
    "QueryError",
    "SearchFilter",
    "SearchResult",
    "top_modules",
]
