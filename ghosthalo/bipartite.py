"""Bipartite graphs with compressed adjacency in both directions.

Vertices are split into a left set ``0 .. left_count - 1`` and a right set
``0 .. right_count - 1``; edges only run between the two sets.  Where a single
numbering is needed (matching results, traversal work items), right vertex
``v`` is numbered ``left_count + v``.
"""

from __future__ import annotations

from collections import deque as _fifo
from typing import Iterator, List, Optional, Sequence

from .atomic import AtomicBool
from .worklist import ChaseLevDeque

_INF = (2**31 - 1) // 4


class BipartiteGraph:
    """A bipartite graph with per-vertex visited flags for traversals."""

    __slots__ = (
        "_left_count",
        "_right_count",
        "_left_offsets",
        "_left_edges",
        "_right_offsets",
        "_right_edges",
        "_visited_left",
        "_visited_right",
    )

    def __init__(
        self,
        left_count: int,
        right_count: int,
        left_offsets: List[int],
        left_edges: List[int],
        right_offsets: List[int],
        right_edges: List[int],
    ) -> None:
        self._left_count = left_count
        self._right_count = right_count
        self._left_offsets = left_offsets
        self._left_edges = left_edges
        self._right_offsets = right_offsets
        self._right_edges = right_edges
        self._visited_left = [AtomicBool(False) for _ in range(left_count)]
        self._visited_right = [AtomicBool(False) for _ in range(right_count)]

    @classmethod
    def from_left_adjacency(
        cls, left_adjacency: Sequence[Sequence[int]], right_count: int
    ) -> "BipartiteGraph":
        """Build a graph from the right neighbours of each left vertex.

        Raises ``ValueError`` if an edge names a right vertex out of range.
        """
        if right_count < 0:
            raise ValueError("right_count must not be negative")
        rows = [list(neighbors) for neighbors in left_adjacency]

        left_offsets = [0]
        left_edges: List[int] = []
        in_degrees = [0] * right_count
        for neighbors in rows:
            for right in neighbors:
                if not 0 <= right < right_count:
                    raise ValueError(f"right vertex {right} out of bounds")
                in_degrees[right] += 1
            left_edges.extend(neighbors)
            left_offsets.append(len(left_edges))

        right_offsets = [0]
        for degree in in_degrees:
            right_offsets.append(right_offsets[-1] + degree)

        # Filling by position keeps each right vertex's list ordered by left index.
        right_edges = [0] * len(left_edges)
        write_pos = right_offsets[:right_count]
        for left, neighbors in enumerate(rows):
            for right in neighbors:
                right_edges[write_pos[right]] = left
                write_pos[right] += 1

        return cls(
            len(rows), right_count, left_offsets, left_edges, right_offsets, right_edges
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(left={self._left_count}, "
            f"right={self._right_count}, edges={len(self._left_edges)})"
        )

    def left_count(self) -> int:
        """Number of left vertices."""
        return self._left_count

    def right_count(self) -> int:
        """Number of right vertices."""
        return self._right_count

    def vertex_count(self) -> int:
        """Total number of vertices."""
        return self._left_count + self._right_count

    def edge_count(self) -> int:
        """Number of edges."""
        return len(self._left_edges)

    def reset_visited(self) -> None:
        """Clear every visited flag."""
        for flag in self._visited_left:
            flag.store(False)
        for flag in self._visited_right:
            flag.store(False)

    def _check_left(self, left: int) -> None:
        if not 0 <= left < self._left_count:
            raise IndexError(f"left vertex {left} out of bounds")

    def _check_right(self, right: int) -> None:
        if not 0 <= right < self._right_count:
            raise IndexError(f"right vertex {right} out of bounds")

    def left_neighbors(self, left: int) -> Iterator[int]:
        """Iterate over the right neighbours of a left vertex."""
        self._check_left(left)
        start, end = self._left_offsets[left], self._left_offsets[left + 1]
        return iter(self._left_edges[start:end])

    def right_neighbors(self, right: int) -> Iterator[int]:
        """Iterate over the left neighbours of a right vertex, in increasing order."""
        self._check_right(right)
        start, end = self._right_offsets[right], self._right_offsets[right + 1]
        return iter(self._right_edges[start:end])

    def left_degree(self, left: int) -> int:
        """Degree of a left vertex."""
        self._check_left(left)
        return self._left_offsets[left + 1] - self._left_offsets[left]

    def right_degree(self, right: int) -> int:
        """Degree of a right vertex."""
        self._check_right(right)
        return self._right_offsets[right + 1] - self._right_offsets[right]

    def has_edge(self, left: int, right: int) -> bool:
        """Return whether ``left`` is joined to ``right``."""
        self._check_left(left)
        self._check_right(right)
        return any(r == right for r in self.left_neighbors(left))

    def maximum_matching(self) -> List[Optional[int]]:
        """Compute a maximum cardinality matching (Hopcroft-Karp).

        Returns ``mate`` over the global vertex numbering: ``mate[u]`` is
        ``left_count + v`` for a left vertex ``u`` matched to right ``v``, and
        ``mate[left_count + v]`` is ``u``; unmatched vertices map to ``None``.
        """
        n_left = self._left_count
        pair_u: List[Optional[int]] = [None] * n_left
        pair_v: List[Optional[int]] = [None] * self._right_count
        dist = [_INF] * n_left

        def bfs() -> bool:
            queue: _fifo[int] = _fifo()
            for u in range(n_left):
                if pair_u[u] is None:
                    dist[u] = 0
                    queue.append(u)
                else:
                    dist[u] = _INF
            found_free = False
            while queue:
                u = queue.popleft()
                for v in self.left_neighbors(u):
                    u2 = pair_v[v]
                    if u2 is None:
                        found_free = True
                    elif dist[u2] == _INF:
                        dist[u2] = dist[u] + 1
                        queue.append(u2)
            return found_free

        def dfs(u: int) -> bool:
            for v in self.left_neighbors(u):
                u2 = pair_v[v]
                if u2 is None or (dist[u2] == dist[u] + 1 and dfs(u2)):
                    pair_u[u] = v
                    pair_v[v] = u
                    return True
            dist[u] = _INF
            return False

        while bfs():
            for u in range(n_left):
                if pair_u[u] is None:
                    dfs(u)

        mate: List[Optional[int]] = [None] * self.vertex_count()
        for u, v in enumerate(pair_u):
            if v is not None:
                mate[u] = n_left + v
        for v, u in enumerate(pair_v):
            if u is not None:
                mate[n_left + v] = u
        return mate

    def _push(self, deque: ChaseLevDeque, item: int) -> None:
        if not deque.push_bottom(item):
            raise RuntimeError("deque capacity too small")

    def _drain(self, deque: ChaseLevDeque) -> int:
        count = 1
        n_left = self._left_count
        while (vertex := deque.steal()) is not None:
            if vertex < n_left:
                for right in self.left_neighbors(vertex):
                    flag = self._visited_right[right]
                    if not flag.load():
                        flag.store(True)
                        self._push(deque, n_left + right)
                        count += 1
            else:
                for left in self.right_neighbors(vertex - n_left):
                    flag = self._visited_left[left]
                    if not flag.load():
                        flag.store(True)
                        self._push(deque, left)
                        count += 1
        return count

    def bfs_from_left(self, start_left: int, deque: ChaseLevDeque) -> int:
        """Count the vertices reachable from a left vertex, itself included.

        Raises ``RuntimeError`` if ``deque`` runs out of room.
        """
        self._check_left(start_left)
        self.reset_visited()
        self._visited_left[start_left].store(True)
        self._push(deque, start_left)
        return self._drain(deque)

    def bfs_from_right(self, start_right: int, deque: ChaseLevDeque) -> int:
        """Count the vertices reachable from a right vertex, itself included.

        Raises ``RuntimeError`` if ``deque`` runs out of room.
        """
        self._check_right(start_right)
        self.reset_visited()
        self._visited_right[start_right].store(True)
        self._push(deque, self._left_count + start_right)
        return self._drain(deque)