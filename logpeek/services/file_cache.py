"""Per-file read progress used to avoid re-reading unchanged log files."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CachedFile:
    # ``None`` means "seeded but never read", so any modification time passes
    modified_ns: int | None
    lines_read: int


class FileCache:
    """Remember, per path, the last seen mtime and how many lines were consumed.

    Progress is tracked by line index, not byte offset. A file truncated and
    rewritten with fewer lines than were cached will have its new lines skipped
    until it grows past the old count; rotation by identity is not detected.
    """

    def __init__(self) -> None:
        self._files: dict[str, CachedFile] = {}

    def should_process(self, path: str, modified_ns: int) -> bool:
        cached = self._files.get(path)
        if cached is None or cached.modified_ns is None:
            return True
        return modified_ns > cached.modified_ns

    def lines_to_skip(self, path: str) -> int:
        cached = self._files.get(path)
        return cached.lines_read if cached else 0

    def record(self, path: str, modified_ns: int | None, line_count: int) -> None:
        self._files[path] = CachedFile(modified_ns, line_count)

    def get(self, path: str) -> CachedFile | None:
        return self._files.get(path)

    def snapshot(self) -> dict[str, CachedFile]:
        return dict(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files


__all__ = ["CachedFile", "FileCache"]
