"""Fixed-capacity circular buffer that overwrites its oldest element."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Holds at most ``capacity`` items; each push past that evicts the oldest.

    Index 0 is the oldest retained item and ``len(buf) - 1`` the newest.
    Storage grows lazily up to ``capacity`` so large buffers cost nothing
    until they fill.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._items: list[T] = []
        # Slot of the oldest item once the buffer has wrapped
        self._head = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def is_full(self) -> bool:
        return len(self._items) == self._capacity

    def push(self, item: T) -> None:
        if len(self._items) < self._capacity:
            self._items.append(item)
            return
        self._items[self._head] = item
        self._head = (self._head + 1) % self._capacity

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.push(item)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        size = len(self._items)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("ring buffer index out of range")
        return self._items[(self._head + index) % self._capacity]

    def __iter__(self) -> Iterator[T]:
        for i in range(len(self._items)):
            yield self[i]

    def __reversed__(self) -> Iterator[T]:
        for i in range(len(self._items) - 1, -1, -1):
            yield self[i]


__all__ = ["RingBuffer"]
