"""Application name <-> dense integer handle mapping."""

from __future__ import annotations

from typing import Iterable


class ApplicationRegistry:
    """Assign handles 0, 1, 2, ... to application names in first-seen order.

    Handles are never reused or removed for the lifetime of the process.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._handles: dict[str, int] = {}

    def resolve(self, name: str) -> int:
        """Return the handle for ``name``, assigning a new one if unseen."""
        handle = self._handles.get(name)
        if handle is None:
            handle = len(self._names)
            self._names.append(name)
            self._handles[name] = handle
        return handle

    def handle_of(self, name: str) -> int | None:
        return self._handles.get(name)

    def name_of(self, handle: int) -> str:
        return self._names[handle]

    def handles_for(self, names: Iterable[str]) -> list[int]:
        """Known handles for ``names``; unknown names are dropped."""
        handles = {self._handles[n] for n in names if n in self._handles}
        return sorted(handles)

    def names(self) -> list[str]:
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._handles


__all__ = ["ApplicationRegistry"]
