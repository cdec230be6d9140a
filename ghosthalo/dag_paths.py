"""Path lengths, critical paths and dynamic programming over a :class:`Dag`.

Every function here works in the graph's topological order and returns
``None`` when the graph has a cycle.  Computing the order caches it on the
graph, as :meth:`Dag.topological_sort` does.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .dag import Dag

T = TypeVar("T")


def longest_path_lengths(dag: Dag) -> Optional[List[int]]:
    """Return, for each node, the edge count of the longest path from any source."""
    order = dag.topological_sort()
    if order is None:
        return None
    dist = [0] * dag.node_count()
    for u in order:
        for v in dag.neighbors(u):
            dist[v] = max(dist[v], dist[u] + 1)
    return dist


def shortest_path_lengths(dag: Dag) -> Optional[List[int]]:
    """Return, for each node, the edge count of the shortest path from any source."""
    order = dag.topological_sort()
    if order is None:
        return None
    dist: List[Optional[int]] = [
        0 if dag.in_degree(u) == 0 else None for u in range(dag.node_count())
    ]
    for u in order:
        du = dist[u]
        if du is None:
            continue
        for v in dag.neighbors(u):
            dv = dist[v]
            if dv is None or du + 1 < dv:
                dist[v] = du + 1
    # In an acyclic graph every node is reached from some source.
    return [d for d in dist if d is not None]


def critical_path(dag: Dag) -> Optional[Tuple[int, List[int]]]:
    """Return ``(length, path)`` for a longest path in the graph.

    ``length`` counts edges and ``path`` lists the nodes from its source.
    Among equally long paths the one ending at the highest-numbered node is
    chosen, and each node keeps the first predecessor that reached it.
    Returns ``None`` for a cyclic or empty graph.
    """
    order = dag.topological_sort()
    if order is None:
        return None
    n = dag.node_count()
    if n == 0:
        return None

    dist = [0] * n
    pred: List[Optional[int]] = [None] * n
    for u in order:
        for v in dag.neighbors(u):
            candidate = dist[u] + 1
            if candidate > dist[v]:
                dist[v] = candidate
                pred[v] = u

    length = max(dist)
    end = max(node for node, d in enumerate(dist) if d == length)

    path: List[int] = []
    seen = set()
    current: Optional[int] = end
    while current is not None:
        if current in seen or not 0 <= current < n:
            return None
        seen.add(current)
        path.append(current)
        current = pred[current]
    path.reverse()
    return length, path


def dp_compute(
    dag: Dag, f: Callable[[int, Sequence[Tuple[int, T]]], T]
) -> Optional[List[T]]:
    """Compute a value for every node in topological order.

    ``f(node, preds)`` receives the node and a list of
    ``(predecessor, predecessor_value)`` pairs in increasing predecessor order,
    all already computed.  Returns the values indexed by node.
    """
    order = dag.topological_sort()
    if order is None:
        return None
    values: dict = {}
    for u in order:
        preds = [(p, values[p]) for p in dag.in_neighbors(u)]
        values[u] = f(u, preds)
    return [values[u] for u in range(dag.node_count())]