"""Thread-safe atomic primitives: bool, fixed-width integers and a bitset.

Compare-and-exchange style operations return a ``(succeeded, value)`` pair:
on success ``value`` is the previous value, on failure it is the value that
was actually observed.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional, Tuple

_WORD_BITS = 64

ExchangeResult = Tuple[bool, int]


class AtomicBool:
    """A boolean whose operations are atomic with respect to other threads."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: bool = False) -> None:
        self._value = bool(value)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.load()!r})"

    def load(self) -> bool:
        """Return the current value."""
        with self._lock:
            return self._value

    def store(self, value: bool) -> None:
        """Replace the current value."""
        with self._lock:
            self._value = bool(value)

    def swap(self, value: bool) -> bool:
        """Store ``value`` and return the previous value."""
        with self._lock:
            previous = self._value
            self._value = bool(value)
            return previous

    def compare_exchange(self, current: bool, new: bool) -> Tuple[bool, bool]:
        """Store ``new`` if the value equals ``current``.

        Returns ``(True, previous)`` on success, ``(False, actual)`` otherwise.
        """
        with self._lock:
            actual = self._value
            if actual == bool(current):
                self._value = bool(new)
                return True, actual
            return False, actual

    def compare_exchange_weak(self, current: bool, new: bool) -> Tuple[bool, bool]:
        """Like :meth:`compare_exchange`; this implementation never fails spuriously."""
        return self.compare_exchange(current, new)

    def test_and_set(self) -> bool:
        """Set the value to ``True`` if it is ``False``; return whether it was set."""
        succeeded, _ = self.compare_exchange(False, True)
        return succeeded

    def fetch_set(self) -> bool:
        """Set the value to ``True`` and return the previous value."""
        return self.swap(True)


class _AtomicWord:
    """Shared machinery for unsigned integers of fixed bit width."""

    __slots__ = ("_value", "_lock")

    _BITS = _WORD_BITS

    def _setup(self, value: int) -> None:
        self._value = self._check(value)
        self._lock = threading.Lock()

    @classmethod
    def _mask(cls) -> int:
        return (1 << cls._BITS) - 1

    @classmethod
    def _check(cls, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        if not 0 <= value <= cls._mask():
            raise ValueError(f"value {value} does not fit in {cls._BITS} unsigned bits")
        return value

    def __repr__(self) -> str:
        with self._lock:
            return f"{type(self).__name__}({self._value})"

    def _apply(self, op: Callable[[int], int]) -> int:
        with self._lock:
            previous = self._value
            self._value = op(previous) & self._mask()
            return previous

    def _load(self) -> int:
        with self._lock:
            return self._value

    def _store(self, value: int) -> None:
        value = self._check(value)
        with self._lock:
            self._value = value

    def _cas(self, current: int, new: int) -> ExchangeResult:
        new = self._check(new)
        with self._lock:
            actual = self._value
            if actual == current:
                self._value = new
                return True, actual
            return False, actual


class AtomicU64(_AtomicWord):
    """An atomic unsigned 64-bit integer with wrapping arithmetic."""

    __slots__ = ()
    _BITS = 64

    def __init__(self, value: int = 0) -> None:
        self._setup(value)

    def load(self) -> int:
        """Return the current value."""
        return self._load()

    def store(self, value: int) -> None:
        """Replace the current value."""
        self._store(value)

    def swap(self, value: int) -> int:
        """Store ``value`` and return the previous value."""
        value = self._check(value)
        return self._apply(lambda _old: value)

    def compare_exchange(self, current: int, new: int) -> ExchangeResult:
        """Store ``new`` if the value equals ``current``.

        Returns ``(True, previous)`` on success, ``(False, actual)`` otherwise.
        """
        return self._cas(current, new)

    def fetch_add(self, value: int) -> int:
        """Add ``value`` (wrapping) and return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old + value)

    def fetch_sub(self, value: int) -> int:
        """Subtract ``value`` (wrapping) and return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old - value)


class AtomicUsize(_AtomicWord):
    """An atomic machine-word unsigned integer with bitwise operations."""

    __slots__ = ()
    _BITS = _WORD_BITS

    def __init__(self, value: int = 0) -> None:
        self._setup(value)

    def load(self) -> int:
        """Return the current value."""
        return self._load()

    def store(self, value: int) -> None:
        """Replace the current value."""
        self._store(value)

    def swap(self, value: int) -> int:
        """Store ``value`` and return the previous value."""
        value = self._check(value)
        return self._apply(lambda _old: value)

    def compare_exchange(self, current: int, new: int) -> ExchangeResult:
        """Store ``new`` if the value equals ``current``.

        Returns ``(True, previous)`` on success, ``(False, actual)`` otherwise.
        """
        return self._cas(current, new)

    def compare_exchange_weak(self, current: int, new: int) -> ExchangeResult:
        """Like :meth:`compare_exchange`; this implementation never fails spuriously."""
        return self._cas(current, new)

    def fetch_add(self, value: int) -> int:
        """Add ``value`` (wrapping) and return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old + value)

    def fetch_sub(self, value: int) -> int:
        """Subtract ``value`` (wrapping) and return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old - value)

    def fetch_or(self, value: int) -> int:
        """Bitwise OR with ``value``; return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old | value)

    def fetch_and(self, value: int) -> int:
        """Bitwise AND with ``value``; return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old & value)

    def fetch_xor(self, value: int) -> int:
        """Bitwise XOR with ``value``; return the previous value."""
        value = self._check(value)
        return self._apply(lambda old: old ^ value)

    def fetch_update(self, f: Callable[[int], Optional[int]]) -> ExchangeResult:
        """Repeatedly apply ``f`` to the current value until the update sticks.

        ``f`` returns the new value, or ``None`` to abandon the update.
        Returns ``(True, previous)`` if updated, ``(False, current)`` if abandoned.
        ``f`` may be called more than once under contention.
        """
        current = self._load()
        while True:
            new = f(current)
            if new is None:
                return False, current
            succeeded, observed = self._cas(current, new)
            if succeeded:
                return True, observed
            current = observed

    def conditional_store(
        self, new_value: int, predicate: Callable[[int], bool]
    ) -> ExchangeResult:
        """Store ``new_value`` if ``predicate`` holds for the current value.

        The check and the store are a single compare-exchange attempt, so a
        concurrent change between them makes the store fail.
        """
        current = self._load()
        if predicate(current):
            return self._cas(current, new_value)
        return False, current


class AtomicBitset:
    """A fixed-size set of flags packed into atomic words."""

    __slots__ = ("_bits", "_words")

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError("bit count must not be negative")
        self._bits = bits
        word_count = -(-bits // _WORD_BITS)
        self._words = [AtomicUsize(0) for _ in range(word_count)]

    def __len__(self) -> int:
        return self._bits

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._bits})"

    def _locate(self, bit: int) -> Tuple[AtomicUsize, int]:
        if not 0 <= bit < self._bits:
            raise IndexError(f"bit {bit} out of range for bitset of {self._bits} bits")
        word, shift = divmod(bit, _WORD_BITS)
        return self._words[word], 1 << shift

    def clear_all(self) -> None:
        """Clear every bit."""
        for word in self._words:
            word.store(0)

    def is_set(self, bit: int) -> bool:
        """Return whether ``bit`` is set."""
        word, mask = self._locate(bit)
        return bool(word.load() & mask)

    def test_and_set(self, bit: int) -> bool:
        """Set ``bit``; return ``True`` iff it was previously clear."""
        word, mask = self._locate(bit)
        return not word.fetch_or(mask) & mask