"""Bounded first-in first-out queue used to hold pending errors."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class FifoFullError(Exception):
    """Raised when adding to a queue that is already full."""


class FifoEmptyError(Exception):
    """Raised when removing from a queue that is empty."""


class Fifo(Generic[T]):
    """A queue holding at most ``size`` items, oldest first."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"fifo size must be at least 1, got {size}")
        self.size = size
        self._items: deque[T] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"Fifo(size={self.size}, items={list(self._items)!r})"

    def is_empty(self) -> bool:
        """Return True when no item is queued."""
        return not self._items

    def is_full(self) -> bool:
        """Return True when the queue holds ``size`` items."""
        return len(self._items) == self.size

    def add(self, value: T) -> None:
        """Append ``value``; raise FifoFullError if there is no room."""
        if self.is_full():
            raise FifoFullError(f"fifo of size {self.size} is full")
        self._items.append(value)

    def remove(self) -> T:
        """Remove and return the oldest item."""
        if not self._items:
            raise FifoEmptyError("fifo is empty")
        return self._items.popleft()

    def remove_last(self) -> T:
        """Remove and return the most recently added item."""
        if not self._items:
            raise FifoEmptyError("fifo is empty")
        return self._items.pop()

    def clear(self) -> None:
        """Drop every queued item."""
        self._items.clear()