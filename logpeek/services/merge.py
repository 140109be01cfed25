"""Newest-first k-way merge across per-application ring buffers."""

from __future__ import annotations

from typing import Collection, Iterator, Mapping

from logpeek.models.entry import LogEntry
from logpeek.services.ring_buffer import RingBuffer


class ChronoMergeIterator(Iterator[LogEntry]):
    """Yield entries from several buffers in descending timestamp order.

    Each buffer is assumed to be non-decreasing by timestamp from oldest to
    newest, so a single reverse cursor per buffer is enough. The buffers are
    read, never copied or mutated; the caller must keep them stable (hold the
    store's read lock) until iteration finishes. Equal timestamps are broken
    by the lower application handle.
    """

    def __init__(
        self,
        buffers: Mapping[int, RingBuffer[LogEntry]],
        handles: Collection[int] | None = None,
    ) -> None:
        selected = sorted(buffers) if handles is None else sorted(h for h in set(handles) if h in buffers)
        self._buffers = buffers
        # [handle, remaining]; the next entry for a cursor is buffer[remaining - 1]
        self._cursors: list[list[int]] = [[h, len(buffers[h])] for h in selected if len(buffers[h])]

    def __iter__(self) -> ChronoMergeIterator:
        return self

    def __next__(self) -> LogEntry:
        best = -1
        best_entry: LogEntry | None = None
        for i, (handle, remaining) in enumerate(self._cursors):
            candidate = self._buffers[handle][remaining - 1]
            if best_entry is None or candidate.timestamp > best_entry.timestamp:
                best = i
                best_entry = candidate
        if best_entry is None:
            raise StopIteration

        cursor = self._cursors[best]
        cursor[1] -= 1
        if cursor[1] == 0:
            del self._cursors[best]
        return best_entry


__all__ = ["ChronoMergeIterator"]
