"""Scoped thread helpers that share or hand over a token.

A *read scope* shares one token with every thread it spawns.  A *write scope*
hands the token to one thread at a time, which gives it back when it ends
("baton passing").  Every thread spawned in a scope has finished when the
scope returns; an error from a thread that was never joined is raised there.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")
W = TypeVar("W")
Token = TypeVar("Token")


class ScopedHandle(Generic[T]):
    """A handle to a thread spawned inside a scope."""

    __slots__ = ("_thread", "_result", "_error", "_joined")

    def __init__(self, target: Callable[[], T]) -> None:
        self._result: Optional[T] = None
        self._error: Optional[BaseException] = None
        self._joined = False
        self._thread = threading.Thread(target=self._run, args=(target,))
        self._thread.start()

    def _run(self, target: Callable[[], T]) -> None:
        try:
            self._result = target()
        except BaseException as exc:  # re-raised in the joining thread
            self._error = exc

    def _wait(self) -> None:
        self._thread.join()

    def join(self) -> T:
        """Wait for the thread and return its result, re-raising its error."""
        self._thread.join()
        self._joined = True
        if self._error is not None:
            raise self._error
        return self._result  # type: ignore[return-value]


class _Scope:
    __slots__ = ("_handles",)

    def __init__(self) -> None:
        self._handles: List[ScopedHandle[Any]] = []

    def _spawn(self, target: Callable[[], T]) -> ScopedHandle[T]:
        handle = ScopedHandle(target)
        self._handles.append(handle)
        return handle

    def _wait_all(self) -> None:
        for handle in self._handles:
            handle._wait()

    def _finish(self) -> None:
        self._wait_all()
        for handle in self._handles:
            if not handle._joined and handle._error is not None:
                raise handle._error


def _run_scope(scope: _Scope, body: Callable[[], R]) -> R:
    try:
        result = body()
    except BaseException:
        scope._wait_all()
        raise
    scope._finish()
    return result


class ReadScope(_Scope, Generic[Token]):
    """A scope whose threads all receive the same shared token."""

    __slots__ = ("_token",)

    def __init__(self, token: Token) -> None:
        super().__init__()
        self._token = token

    def spawn(self, f: Callable[[Token], T]) -> ScopedHandle[T]:
        """Start a thread running ``f(token)``."""
        token = self._token
        return self._spawn(lambda: f(token))


class WriteScope(_Scope):
    """A scope whose threads take the token and hand it back when done."""

    __slots__ = ()

    def spawn_with_token(
        self, token: Token, f: Callable[[Token], T]
    ) -> ScopedHandle[Tuple[T, Token]]:
        """Start a thread running ``f(token)``; its join yields ``(result, token)``."""

        def body() -> Tuple[T, Token]:
            out = f(token)
            return out, token

        return self._spawn(body)


def with_read_scope(token: Token, f: Callable[[ReadScope[Token]], R]) -> R:
    """Run ``f`` with a :class:`ReadScope` sharing ``token``; return its result."""
    scope: ReadScope[Token] = ReadScope(token)
    return _run_scope(scope, lambda: f(scope))


def with_write_scope(
    token: Token, f: Callable[[WriteScope, Token], Tuple[R, Token]]
) -> Tuple[R, Token]:
    """Run ``f(scope, token)``, which must return ``(result, token)``."""
    scope = WriteScope()
    return _run_scope(scope, lambda: f(scope, token))


def parallel_read_then_commit(
    token: Token,
    threads: int,
    compute: Callable[[Token, int], W],
    commit: Callable[[Token, List[W]], R],
) -> R:
    """Run ``compute(token, tid)`` on ``threads`` threads, then ``commit``.

    The compute results are passed to ``commit`` in thread-id order, on the
    calling thread, after every compute thread has finished.
    """
    if threads <= 0:
        raise ValueError("threads must be > 0")

    def fan_out(scope: ReadScope[Token]) -> List[W]:
        handles = [
            scope.spawn(lambda t, tid=tid: compute(t, tid)) for tid in range(threads)
        ]
        return [handle.join() for handle in handles]

    work = with_read_scope(token, fan_out)
    return commit(token, work)