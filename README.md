# ghosthalo

Building blocks for concurrent graph work, and graph algorithms that use them.

- **Atomic primitives** (`ghosthalo.atomic`): `AtomicBool`, `AtomicU64`,
  `AtomicUsize` and a word-packed `AtomicBitset`. Every operation is safe to
  call from several threads. The integer types hold unsigned 64-bit values and
  wrap on `fetch_add` and `fetch_sub`.
- **Worklists** (`ghosthalo.worklist`): `TreiberStack` is a stack of indices in
  `range(capacity)`. `ChaseLevDeque` is a fixed-capacity work-stealing deque
  whose capacity must be a power of two.
- **Scoped token patterns** (`ghosthalo.scoped`): `with_read_scope`,
  `with_write_scope` and `parallel_read_then_commit` run threads that share a
  token or pass it from one thread to the next. Each returns only after every
  thread it spawned has finished.
- **Bipartite graphs** (`ghosthalo.bipartite`): `BipartiteGraph` stores its
  adjacency in compressed form in both directions. It provides Hopcroft–Karp
  maximum matching and reachability counts that start from either side.
- **DAGs** (`ghosthalo.dag`, `ghosthalo.dag_paths`): `Dag` provides a Kahn
  topological sort whose result is cached, cycle detection, invariant checks
  and depth-first and breadth-first reachability counts. `ghosthalo.dag_paths`
  adds `longest_path_lengths`, `shortest_path_lengths`, `critical_path` and
  `dp_compute`.

## Installation

```
pip install ghosthalo
```

The package uses only the standard library. To install pytest for the test
suite as well:

```
pip install "ghosthalo[test]"
```

## Examples

### Atomics

```python
from ghosthalo.atomic import AtomicUsize, AtomicBitset

counter = AtomicUsize(5)
print(counter.fetch_add(1))             # 5
print(counter.compare_exchange(6, 10))  # (True, 6)
print(counter.compare_exchange(6, 0))   # (False, 10)

bits = AtomicBitset(100)
print(bits.test_and_set(70))  # True  (the bit was clear)
print(bits.test_and_set(70))  # False
```

Compare-and-exchange methods return a `(succeeded, value)` pair. On success
`value` is the previous value. On failure it is the value that was found
instead.

### Bipartite matching

```python
from ghosthalo.bipartite import BipartiteGraph
from ghosthalo.worklist import ChaseLevDeque

g = BipartiteGraph.from_left_adjacency([[0, 1], [0], [1]], right_count=2)
print(list(g.left_neighbors(0)))   # [0, 1]
print(list(g.right_neighbors(1)))  # [0, 2]

mate = g.maximum_matching()
# Indices below left_count() are left vertices.
# Right vertex v is at index left_count() + v.
print(mate)

print(g.bfs_from_left(0, ChaseLevDeque(32)))  # 5
```

### DAG algorithms

```python
from ghosthalo.dag import Dag
from ghosthalo.dag_paths import critical_path, dp_compute, longest_path_lengths

dag = Dag.from_adjacency([[1, 2], [3], [3], []])
print(dag.topological_sort())       # [0, 1, 2, 3]
print(longest_path_lengths(dag))    # [0, 1, 1, 2]
print(critical_path(dag))           # (2, [0, 1, 3])

# Count the paths that reach each node from any source.
paths = dp_compute(dag, lambda node, preds: sum(v for _, v in preds) if preds else 1)
print(paths)                        # [1, 1, 1, 2]
```

When the graph has a cycle, `topological_sort` and the functions in
`ghosthalo.dag_paths` return `None`.

### Read-then-commit

```python
from ghosthalo.scoped import parallel_read_then_commit

token = object()
data = [1, 2, 3, 4]

total = parallel_read_then_commit(
    token,
    4,
    lambda tok, tid: data[tid] * 10,
    lambda tok, parts: sum(parts),
)
print(total)  # 100
```

`compute(token, tid)` runs on `threads` threads. When they have all finished,
`commit(token, results)` runs once on the calling thread. It receives the
results in thread-id order. If a spawned thread raises an exception, it is
raised again in the thread that joins it, or at the end of the scope.

## Errors

- An out-of-range vertex, node, bit or stack index raises `IndexError`.
- An edge to a vertex that does not exist raises `ValueError` when the graph is
  built.
- An invalid capacity or thread count raises `ValueError`.
- Storing a non-integer in an atomic integer raises `TypeError`. Storing a
  value outside the unsigned 64-bit range raises `ValueError`.
- A breadth-first traversal whose `ChaseLevDeque` runs out of room raises
  `RuntimeError`.

## What it does not include

The package is a library with no command-line program. Graphs are built from
adjacency lists and live only in memory: nothing is loaded from files or saved
to them. There is no general-purpose graph type apart from `BipartiteGraph`
and `Dag`.