import pytest

from ghosthalo.bipartite import BipartiteGraph
from ghosthalo.worklist import ChaseLevDeque


@pytest.fixture
def sample():
    return BipartiteGraph.from_left_adjacency([[0, 1], [0], [1]], 2)


def test_construction(sample):
    assert sample.left_count() == 3
    assert sample.right_count() == 2
    assert sample.vertex_count() == 5
    assert sample.edge_count() == 4


def test_neighbors(sample):
    assert list(sample.left_neighbors(0)) == [0, 1]
    assert list(sample.left_neighbors(1)) == [0]
    assert list(sample.left_neighbors(2)) == [1]
    assert list(sample.right_neighbors(0)) == [0, 1]
    assert list(sample.right_neighbors(1)) == [0, 2]


def test_degrees(sample):
    assert sample.left_degree(0) == 2
    assert sample.left_degree(1) == 1
    assert sample.left_degree(2) == 1
    assert sample.right_degree(0) == 2
    assert sample.right_degree(1) == 2


def test_has_edge(sample):
    assert sample.has_edge(0, 0)
    assert sample.has_edge(0, 1)
    assert sample.has_edge(1, 0)
    assert sample.has_edge(2, 1)
    assert not sample.has_edge(1, 1)
    assert not sample.has_edge(2, 0)


def test_maximum_matching_complete():
    graph = BipartiteGraph.from_left_adjacency([[0, 1], [0, 1]], 2)
    matching = graph.maximum_matching()
    assert len(matching) == 4
    assert all(m is not None for m in matching)


def _check_matching(graph, mate):
    n_left = graph.left_count()
    size = 0
    for u in range(n_left):
        m = mate[u]
        if m is not None:
            assert m >= n_left
            assert mate[m] == u
            assert graph.has_edge(u, m - n_left)
            size += 1
    return size


def test_maximum_matching_needs_augmenting_path():
    # Greedy matching of left 0 to right 0 blocks left 1; the maximum is 2.
    graph = BipartiteGraph.from_left_adjacency([[0, 1], [0]], 2)
    mate = graph.maximum_matching()
    assert _check_matching(graph, mate) == 2
    assert mate[1] == 2
    assert mate[0] == 3


def test_maximum_matching_limited_by_right_side(sample):
    mate = sample.maximum_matching()
    assert _check_matching(sample, mate) == 2


def test_maximum_matching_empty_edges():
    graph = BipartiteGraph.from_left_adjacency([[], []], 3)
    assert graph.maximum_matching() == [None] * 5


def test_bfs_traversal(sample):
    deque = ChaseLevDeque(32)
    assert sample.bfs_from_left(0, deque) == 5
    assert sample.bfs_from_right(1, deque) == 5


def test_bfs_disconnected():
    graph = BipartiteGraph.from_left_adjacency([[0], [1]], 2)
    deque = ChaseLevDeque(8)
    assert graph.bfs_from_left(0, deque) == 2
    assert graph.bfs_from_right(1, deque) == 2


def test_bfs_deque_too_small():
    graph = BipartiteGraph.from_left_adjacency([[0, 1]], 2)
    with pytest.raises(RuntimeError):
        graph.bfs_from_left(0, ChaseLevDeque(1))


def test_out_of_bounds_edge_rejected():
    with pytest.raises(ValueError):
        BipartiteGraph.from_left_adjacency([[0, 2]], 2)


def test_out_of_bounds_queries(sample):
    with pytest.raises(IndexError):
        sample.left_neighbors(3)
    with pytest.raises(IndexError):
        sample.right_degree(2)
    with pytest.raises(IndexError):
        sample.has_edge(0, 5)
    with pytest.raises(IndexError):
        sample.bfs_from_right(2, ChaseLevDeque(8))