"""Shared ingestion state: registry, ring buffers, file cache and refresh timing."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Collection, Iterator

from logpeek.core.app_config import ServerConfig
from logpeek.models.entry import LogEntry
from logpeek.services.file_cache import FileCache
from logpeek.services.ingestion import IngestionEngine, IngestReport
from logpeek.services.locks import ReadWriteLock
from logpeek.services.registry import ApplicationRegistry
from logpeek.services.ring_buffer import RingBuffer

logger = logging.getLogger(__name__)


class LogStore:
    """In-memory log window shared by the refresh path and query handlers.

    Refreshes take the write side of a readers/writer lock for the whole
    ingest; queries take the read side via :meth:`reading`. The cooldown
    check and the refresh itself are serialised by a separate mutex so
    requests arriving together trigger at most one ingest.
    """

    def __init__(
        self,
        config: ServerConfig,
        available_memory: Callable[[], int] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.registry = ApplicationRegistry()
        self.buffers: dict[int, RingBuffer[LogEntry]] = {}
        self.cache = FileCache()
        self.last_refresh: float | None = None
        self._clock = clock
        self._lock = ReadWriteLock()
        self._refresh_lock = threading.Lock()
        self._generation = 0
        self._engine = IngestionEngine(self.registry, self.buffers, self.cache, available_memory)

    @contextmanager
    def reading(self) -> Iterator[None]:
        with self._lock.read():
            yield

    def load_initial(self) -> IngestReport:
        """First ingest at startup; bounds reads to each buffer's capacity."""
        with self._refresh_lock:
            return self._ingest(initial_load=True)

    def refresh(self, force: bool = False) -> bool:
        """Ingest new lines if the cooldown has elapsed or ``force`` is set.

        Returns True when an ingest ran. A caller that queued behind a refresh
        which completed meanwhile returns False without ingesting again.
        """
        seen = self._generation
        with self._refresh_lock:
            if self._generation != seen:
                return False
            cooldown = self.config.buffer_update_cooldown
            if not force and self.last_refresh is not None and self._clock() - self.last_refresh <= cooldown:
                return False
            self._ingest(initial_load=False)
            return True

    def _ingest(self, initial_load: bool) -> IngestReport:
        with self._lock.write():
            report = self._engine.ingest(self.config.applications, initial_load=initial_load)
            self.last_refresh = self._clock()
            self._generation += 1
        logger.info(
            "Log entries updated: %d lines parsed, %d lines failed, %d/%d files read (%d failed)",
            report.lines_parsed,
            report.lines_failed,
            report.files_processed,
            report.files_scanned,
            report.files_failed,
        )
        return report

    # The helpers below do not lock; call them inside ``reading()`` or use
    # the locked public wrappers.

    def _scope(self, handles: Collection[int] | None) -> list[RingBuffer[LogEntry]]:
        if handles is None:
            return list(self.buffers.values())
        return [self.buffers[h] for h in handles if h in self.buffers]

    def buffer_utilization(self, handles: Collection[int] | None = None) -> float:
        """Percentage of in-scope buffer capacity currently filled."""
        scope = self._scope(handles)
        capacity = sum(b.capacity for b in scope)
        if capacity == 0:
            return 0.0
        return sum(len(b) for b in scope) / capacity * 100

    def total_entries(self, handles: Collection[int] | None = None) -> int:
        return sum(len(b) for b in self._scope(handles))

    def list_applications(self) -> list[str]:
        with self.reading():
            return self.registry.names()

    def usage_summary(self) -> tuple[float, int]:
        with self.reading():
            return self.buffer_utilization(), self.total_entries()


__all__ = ["LogStore"]
