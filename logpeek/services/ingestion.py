"""Read configured log files into the per-application ring buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, TextIO

from logpeek.core.app_config import CompiledApplication
from logpeek.models.entry import LogEntry
from logpeek.services.file_cache import FileCache
from logpeek.services.parser import LogParseError, parse_entry
from logpeek.services.registry import ApplicationRegistry
from logpeek.services.ring_buffer import RingBuffer

logger = logging.getLogger(__name__)

# Rough resident size of one parsed entry (object, datetime, two short strings).
APPROX_ENTRY_BYTES = 256


class InsufficientMemoryError(Exception):
    """The configured buffer capacity cannot fit in available memory."""


@dataclass
class IngestReport:
    files_scanned: int = 0
    files_processed: int = 0
    files_failed: int = 0
    lines_parsed: int = 0
    lines_failed: int = 0


def _open_log(path: str) -> TextIO:
    return open(path, "r", encoding="utf-8", errors="replace")


def count_lines(path: str) -> int:
    with _open_log(path) as fh:
        return sum(1 for _ in fh)


def discover_files(path: str) -> list[tuple[str, int]]:
    """Return ``(path, mtime_ns)`` for a single file or every file under a directory."""

    root = Path(path)
    if root.is_file():
        candidates = [root]
    elif root.is_dir():
        candidates = sorted(p for p in root.rglob("*") if p.is_file())
    else:
        logger.warning("Log path %s does not exist", root)
        return []

    files: list[tuple[str, int]] = []
    for candidate in candidates:
        try:
            files.append((str(candidate), candidate.stat().st_mtime_ns))
        except OSError as exc:
            logger.error("Failed to read metadata for log file %s: %s", candidate, exc)
    return files


class IngestionEngine:
    """Incrementally parse new log lines into ring buffers.

    The engine mutates the registry, buffers and cache it was given; callers
    must hold exclusive access to them for the duration of :meth:`ingest`.
    """

    def __init__(
        self,
        registry: ApplicationRegistry,
        buffers: dict[int, RingBuffer[LogEntry]],
        cache: FileCache,
        available_memory: Callable[[], int] | None = None,
    ) -> None:
        self.registry = registry
        self.buffers = buffers
        self.cache = cache
        self._available_memory = available_memory

    def ingest(self, applications: Iterable[CompiledApplication], initial_load: bool = False) -> IngestReport:
        report = IngestReport()
        applications = list(applications)
        if initial_load:
            self._reserve_memory(applications)

        for app in applications:
            handle = self.registry.resolve(app.name)
            files = discover_files(app.path)
            report.files_scanned += len(files)

            if initial_load:
                self._seed_initial(files, app.buffer_size)

            pending = [f for f in files if self.cache.should_process(*f)]
            pending.sort(key=lambda f: (f[1], f[0]))

            buffer = self.buffers.get(handle)
            if buffer is None:
                buffer = RingBuffer(app.buffer_size)
                self.buffers[handle] = buffer

            for path, modified_ns in pending:
                self._ingest_file(app, handle, buffer, path, modified_ns, report)
        return report

    def _reserve_memory(self, applications: list[CompiledApplication]) -> None:
        """Check that every buffer can fill at once before any is created.

        Buffers grow lazily, so the check sums the full capacity of all
        applications against a single reading of available memory.
        """
        if self._available_memory is None:
            return
        available = self._available_memory()
        reserved = 0
        for app in applications:
            required = app.buffer_size * APPROX_ENTRY_BYTES
            if reserved + required > available:
                raise InsufficientMemoryError(
                    f"Application {app.name!r} needs ~{required} bytes for {app.buffer_size} entries "
                    f"but only {available - reserved} of {available} bytes remain after earlier "
                    "applications; lower buffer_size"
                )
            reserved += required
        if reserved > available / 2:
            logger.warning(
                "Log buffers for %d application(s) will use ~%d bytes, more than half of the %d bytes available",
                len(applications),
                reserved,
                available,
            )

    def _seed_initial(self, files: list[tuple[str, int]], capacity: int) -> None:
        """Pre-fill the cache so only the newest ``capacity`` lines get parsed.

        Files are walked newest-first. The file whose lines push the running
        total to ``capacity`` is seeded with the number of its oldest lines
        to skip; every older file is marked as fully read.
        """
        total = 0
        crossed = False
        for path, modified_ns in sorted(files, key=lambda f: (f[1], f[0]), reverse=True):
            try:
                lines = count_lines(path)
            except OSError as exc:
                logger.error("Failed to count lines in %s: %s", path, exc)
                continue
            if crossed:
                self.cache.record(path, modified_ns, lines)
                continue
            total += lines
            if total >= capacity:
                self.cache.record(path, None, total - capacity)
                crossed = True

    def _ingest_file(
        self,
        app: CompiledApplication,
        handle: int,
        buffer: RingBuffer[LogEntry],
        path: str,
        modified_ns: int,
        report: IngestReport,
    ) -> None:
        skip = self.cache.lines_to_skip(path)
        line_no = 0
        try:
            with _open_log(path) as fh:
                for line_no, line in enumerate(fh, start=1):
                    if line_no <= skip:
                        continue
                    try:
                        entry = parse_entry(
                            line.rstrip("\r\n"),
                            app.pattern,
                            app.time_format,
                            handle,
                            app.level_map,
                        )
                    except LogParseError as exc:
                        report.lines_failed += 1
                        logger.warning("%s on line %d in file %s", exc, line_no, path)
                        continue
                    buffer.push(entry)
                    report.lines_parsed += 1
        except OSError as exc:
            report.files_failed += 1
            logger.error("Failed to read log file %s after line %d: %s", path, line_no, exc)
            if line_no > skip:
                # Keep what was pushed; no mtime so the rest is retried next refresh
                self.cache.record(path, None, line_no)
            return

        self.cache.record(path, modified_ns, max(line_no, skip))
        report.files_processed += 1


__all__ = [
    "APPROX_ENTRY_BYTES",
    "IngestReport",
    "IngestionEngine",
    "InsufficientMemoryError",
    "count_lines",
    "discover_files",
]
