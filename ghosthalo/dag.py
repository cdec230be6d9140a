"""Directed graphs with topological ordering and traversal helpers.

A :class:`Dag` keeps its edges in compressed form in both directions, so the
successors and the predecessors of a node are both cheap to reach.  Building
one does not require the graph to be acyclic: :meth:`Dag.topological_sort`
returns ``None`` when a cycle is present.
"""

from __future__ import annotations

from collections import deque as _fifo
from typing import Iterator, List, Optional, Sequence, Tuple

from .atomic import AtomicBitset
from .worklist import ChaseLevDeque, TreiberStack


def _compress(rows: Sequence[Sequence[int]]) -> Tuple[List[int], List[int]]:
    offsets = [0]
    edges: List[int] = []
    for row in rows:
        edges.extend(row)
        offsets.append(len(edges))
    return offsets, edges


class Dag:
    """A directed graph with DAG algorithms and a shared visited bitmap."""

    __slots__ = (
        "_n",
        "_out_offsets",
        "_out_edges",
        "_in_offsets",
        "_in_edges",
        "_visited",
        "_topo",
    )

    def __init__(self, adjacency: Sequence[Sequence[int]]) -> None:
        rows = [list(neighbors) for neighbors in adjacency]
        n = len(rows)
        incoming: List[List[int]] = [[] for _ in range(n)]
        for source, neighbors in enumerate(rows):
            for target in neighbors:
                if not 0 <= target < n:
                    raise ValueError(f"vertex {target} out of bounds")
                incoming[target].append(source)

        self._n = n
        self._out_offsets, self._out_edges = _compress(rows)
        self._in_offsets, self._in_edges = _compress(incoming)
        self._visited = AtomicBitset(n)
        self._topo: Optional[List[int]] = None

    @classmethod
    def from_adjacency(cls, adjacency: Sequence[Sequence[int]]) -> "Dag":
        """Build a graph from the successor list of each node.

        Raises ``ValueError`` if an edge names a node out of range.
        """
        return cls(adjacency)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={self._n}, edges={len(self._out_edges)})"

    def _check(self, node: int) -> None:
        if not 0 <= node < self._n:
            raise IndexError(f"node {node} out of bounds")

    def validate_invariants(self) -> bool:
        """Check that both edge directions are in range and mirror each other."""
        n = self._n
        if len(self._out_edges) != len(self._in_edges):
            return False
        if any(not 0 <= v < n for v in self._out_edges):
            return False
        if any(not 0 <= v < n for v in self._in_edges):
            return False
        forward = sorted(
            (u, v) for u in range(n) for v in self.neighbors(u)
        )
        backward = sorted(
            (u, v) for v in range(n) for u in self.in_neighbors(v)
        )
        return forward == backward

    def validate_dag_invariants(self) -> bool:
        """Check the cached topological order; ``False`` if none is cached."""
        topo = self._topo
        if topo is None or len(topo) != self._n:
            return False
        if sorted(topo) != list(range(self._n)):
            return False
        position = {node: pos for pos, node in enumerate(topo)}
        return all(
            position[u] < position[v]
            for u in range(self._n)
            for v in self.neighbors(u)
        )

    def topological_sort(self) -> Optional[List[int]]:
        """Return a topological order (Kahn's algorithm), or ``None`` on a cycle.

        Sources are taken in increasing order; the result is cached.
        """
        if self._topo is not None:
            return list(self._topo)

        indegree = [self.in_degree(u) for u in range(self._n)]
        queue = _fifo(u for u, d in enumerate(indegree) if d == 0)
        order: List[int] = []
        while queue:
            u = queue.popleft()
            order.append(u)
            for v in self.neighbors(u):
                indegree[v] -= 1
                if indegree[v] == 0:
                    queue.append(v)

        if len(order) != self._n:
            return None
        self._topo = order
        return list(order)

    def topo_order(self) -> Optional[List[int]]:
        """Return the cached topological order, if one has been computed."""
        return None if self._topo is None else list(self._topo)

    def is_acyclic(self) -> bool:
        """Return whether the graph has no cycle."""
        return self.topological_sort() is not None

    def node_count(self) -> int:
        """Number of nodes."""
        return self._n

    def edge_count(self) -> int:
        """Number of edges."""
        return len(self._out_edges)

    def neighbors(self, node: int) -> Iterator[int]:
        """Iterate over the successors of ``node``."""
        self._check(node)
        return iter(self._out_edges[self._out_offsets[node]:self._out_offsets[node + 1]])

    def in_neighbors(self, node: int) -> Iterator[int]:
        """Iterate over the predecessors of ``node``, in increasing order."""
        self._check(node)
        return iter(self._in_edges[self._in_offsets[node]:self._in_offsets[node + 1]])

    def degree(self, node: int) -> int:
        """Out-degree of ``node``."""
        self._check(node)
        return self._out_offsets[node + 1] - self._out_offsets[node]

    def in_degree(self, node: int) -> int:
        """In-degree of ``node``."""
        self._check(node)
        return self._in_offsets[node + 1] - self._in_offsets[node]

    def has_edge(self, source: int, target: int) -> bool:
        """Return whether there is an edge from ``source`` to ``target``."""
        return target in self.neighbors(source)

    def reset_visited(self) -> None:
        """Clear the visited bitmap."""
        self._visited.clear_all()

    def dfs_reachable_count(self, start: int, stack: TreiberStack) -> int:
        """Count the nodes reachable from ``start``, itself included, depth first."""
        self._check(start)
        self.reset_visited()
        stack.clear()
        self._visited.test_and_set(start)
        stack.push(start)
        count = 0
        while (u := stack.pop()) is not None:
            count += 1
            for v in reversed(list(self.neighbors(u))):
                if self._visited.test_and_set(v):
                    stack.push(v)
        return count

    def bfs_reachable_count(self, start: int, deque: ChaseLevDeque) -> int:
        """Count the nodes reachable from ``start``, itself included, breadth first.

        Raises ``RuntimeError`` if ``deque`` runs out of room.
        """
        self._check(start)
        self.reset_visited()
        self._visited.test_and_set(start)
        if not deque.push_bottom(start):
            raise RuntimeError("deque capacity too small")
        count = 0
        while (u := deque.steal()) is not None:
            count += 1
            for v in self.neighbors(u):
                if self._visited.test_and_set(v):
                    if not deque.push_bottom(v):
                        raise RuntimeError("deque capacity too small")
        return count