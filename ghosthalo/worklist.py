"""Lock-free style worklists of integer indices.

:class:`TreiberStack` is a multi-producer, multi-consumer stack of node
indices in ``range(capacity)``.  :class:`ChaseLevDeque` is a fixed-capacity
work-stealing deque: one owner pushes and pops at the bottom while any number
of thieves steal from the top.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .atomic import AtomicUsize

NONE = (1 << 64) - 1
"""Sentinel for an empty stack or a missing link."""


class TreiberStack:
    """A thread-safe stack of indices ``0 .. capacity - 1``.

    Each index has a single link slot, so an index must not be pushed while it
    is already on the stack.
    """

    __slots__ = ("_head", "_next")

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._head = AtomicUsize(NONE)
        self._next: List[AtomicUsize] = [AtomicUsize(NONE) for _ in range(capacity)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={len(self._next)})"

    @property
    def capacity(self) -> int:
        """The number of distinct indices the stack can hold."""
        return len(self._next)

    def _check(self, idx: int) -> None:
        if not 0 <= idx < len(self._next):
            raise IndexError(f"index {idx} out of range for capacity {len(self._next)}")

    def clear(self) -> None:
        """Empty the stack."""
        self._head.store(NONE)

    def push(self, idx: int) -> None:
        """Push ``idx`` onto the stack."""
        self._check(idx)
        link = self._next[idx]
        while True:
            head = self._head.load()
            link.store(head)
            succeeded, _ = self._head.compare_exchange(head, idx)
            if succeeded:
                return

    def push_batch(self, batch: Iterable[int]) -> None:
        """Push several indices with a single head update.

        The first index of ``batch`` ends up on top, followed by the rest in
        the given order.
        """
        items = list(batch)
        if not items:
            return
        for idx in items:
            self._check(idx)

        for current, following in zip(items, items[1:]):
            self._next[current].store(following)

        first, tail = items[0], self._next[items[-1]]
        while True:
            head = self._head.load()
            tail.store(head)
            succeeded, _ = self._head.compare_exchange(head, first)
            if succeeded:
                return

    def pop(self) -> Optional[int]:
        """Remove and return the top index, or ``None`` if the stack is empty."""
        while True:
            head = self._head.load()
            if head == NONE:
                return None
            following = self._next[head].load()
            succeeded, _ = self._head.compare_exchange(head, following)
            if succeeded:
                return head


class ChaseLevDeque:
    """A fixed-capacity work-stealing deque of indices.

    ``push_bottom`` and ``pop_bottom`` belong to a single owner thread;
    ``steal`` may be called from any thread.
    """

    __slots__ = ("_top", "_bottom", "_buf", "_mask")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0 or capacity & (capacity - 1):
            raise ValueError(f"capacity must be a positive power of two, got {capacity}")
        self._top = AtomicUsize(0)
        self._bottom = AtomicUsize(0)
        self._buf: List[AtomicUsize] = [AtomicUsize(NONE) for _ in range(capacity)]
        self._mask = capacity - 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={len(self._buf)})"

    @property
    def capacity(self) -> int:
        """The maximum number of items held at once."""
        return len(self._buf)

    def clear(self) -> None:
        """Reset the deque to empty."""
        self._top.store(0)
        self._bottom.store(0)

    def push_bottom(self, x: int) -> bool:
        """Push ``x`` at the bottom; return ``False`` if the deque is full."""
        if not 0 <= x < NONE:
            raise ValueError(f"item {x} is not a valid index")
        bottom = self._bottom.load()
        top = self._top.load()
        if bottom < top or bottom - top >= len(self._buf):
            return False
        self._buf[bottom & self._mask].store(x)
        self._bottom.store(bottom + 1)
        return True

    def pop_bottom(self) -> Optional[int]:
        """Pop from the bottom (most recently pushed), or ``None`` if empty."""
        bottom = self._bottom.load()
        if bottom <= self._top.load():
            return None

        last = bottom - 1
        self._bottom.store(last)
        top = self._top.load()
        if top > last:
            self._bottom.store(bottom)
            return None

        item = self._buf[last & self._mask].load()
        if top == last:
            won, _ = self._top.compare_exchange(top, top + 1)
            self._bottom.store(bottom)
            if not won:
                return None
        return item

    def steal(self) -> Optional[int]:
        """Take the oldest item from the top, or ``None`` if empty."""
        while True:
            top = self._top.load()
            bottom = self._bottom.load()
            if top >= bottom:
                return None
            item = self._buf[top & self._mask].load()
            won, _ = self._top.compare_exchange(top, top + 1)
            if won:
                return item