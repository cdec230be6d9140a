import threading

import pytest

from ghosthalo.worklist import NONE, ChaseLevDeque, TreiberStack


def _drain_stack(stack):
    out = []
    while (item := stack.pop()) is not None:
        out.append(item)
    return out


def test_largest_value_below_sentinel_round_trips():
    assert NONE == 2**64 - 1
    deque = ChaseLevDeque(2)
    assert deque.push_bottom(NONE - 1)
    assert deque.steal() == NONE - 1


def test_stack_is_lifo():
    stack = TreiberStack(8)
    for idx in (3, 1, 4):
        stack.push(idx)
    assert _drain_stack(stack) == [4, 1, 3]


def test_empty_stack_pops_none():
    assert TreiberStack(4).pop() is None


def test_push_out_of_range_raises():
    stack = TreiberStack(3)
    with pytest.raises(IndexError):
        stack.push(3)
    with pytest.raises(IndexError):
        stack.push(-1)


def test_push_batch_keeps_order_on_top_of_existing():
    stack = TreiberStack(10)
    stack.push(5)
    stack.push_batch([1, 2, 3])
    assert _drain_stack(stack) == [1, 2, 3, 5]


def test_push_batch_empty_is_noop():
    stack = TreiberStack(4)
    stack.push(2)
    stack.push_batch([])
    assert _drain_stack(stack) == [2]


def test_push_batch_validates_before_linking():
    stack = TreiberStack(4)
    stack.push(0)
    with pytest.raises(IndexError):
        stack.push_batch([1, 9])
    assert _drain_stack(stack) == [0]


def test_stack_clear():
    stack = TreiberStack(4)
    stack.push(1)
    stack.push(2)
    stack.clear()
    assert stack.pop() is None


def test_stack_reuse_after_pop():
    stack = TreiberStack(2)
    stack.push(0)
    assert stack.pop() == 0
    stack.push(0)
    stack.push(1)
    assert _drain_stack(stack) == [1, 0]


def test_stack_concurrent_push_then_pop_all():
    n = 400
    stack = TreiberStack(n)

    def worker(start):
        for idx in range(start, n, 4):
            stack.push(idx)

    threads = [threading.Thread(target=worker, args=(s,)) for s in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    popped = _drain_stack(stack)
    assert sorted(popped) == list(range(n))


def test_stack_concurrent_pop_no_duplicates():
    n = 300
    stack = TreiberStack(n)
    stack.push_batch(range(n))
    results = [[] for _ in range(4)]

    def worker(out):
        while (item := stack.pop()) is not None:
            out.append(item)

    threads = [threading.Thread(target=worker, args=(r,)) for r in results]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    combined = [x for r in results for x in r]
    assert sorted(combined) == list(range(n))


@pytest.mark.parametrize("capacity", [0, 3, 6, -4])
def test_deque_requires_power_of_two(capacity):
    with pytest.raises(ValueError):
        ChaseLevDeque(capacity)


def test_deque_pop_bottom_is_lifo():
    deque = ChaseLevDeque(8)
    for x in (10, 20, 30):
        assert deque.push_bottom(x)
    assert [deque.pop_bottom() for _ in range(3)] == [30, 20, 10]
    assert deque.pop_bottom() is None


def test_deque_steal_is_fifo():
    deque = ChaseLevDeque(8)
    for x in (10, 20, 30):
        deque.push_bottom(x)
    assert [deque.steal() for _ in range(3)] == [10, 20, 30]
    assert deque.steal() is None


def test_deque_mixed_ends():
    deque = ChaseLevDeque(4)
    for x in (1, 2, 3):
        deque.push_bottom(x)
    assert deque.steal() == 1
    assert deque.pop_bottom() == 3
    assert deque.pop_bottom() == 2
    assert deque.steal() is None
    assert deque.pop_bottom() is None


def test_deque_full_rejects_push():
    deque = ChaseLevDeque(2)
    assert deque.push_bottom(0)
    assert deque.push_bottom(1)
    assert deque.push_bottom(2) is False
    assert deque.steal() == 0
    assert deque.push_bottom(2)
    assert [deque.steal(), deque.steal()] == [1, 2]


def test_deque_wraps_around_ring():
    deque = ChaseLevDeque(2)
    seen = []
    for x in range(7):
        assert deque.push_bottom(x)
        seen.append(deque.steal())
    assert seen == list(range(7))


def test_deque_rejects_sentinel():
    deque = ChaseLevDeque(2)
    with pytest.raises(ValueError):
        deque.push_bottom(NONE)


def test_deque_clear():
    deque = ChaseLevDeque(4)
    deque.push_bottom(1)
    deque.push_bottom(2)
    deque.clear()
    assert deque.steal() is None
    assert deque.pop_bottom() is None


def test_deque_concurrent_steal_and_pop():
    n = 500
    deque = ChaseLevDeque(512)
    for x in range(n):
        assert deque.push_bottom(x)

    stolen = [[] for _ in range(3)]

    def thief(out):
        while (item := deque.steal()) is not None:
            out.append(item)

    threads = [threading.Thread(target=thief, args=(s,)) for s in stolen]
    for t in threads:
        t.start()
    owned = []
    while (item := deque.pop_bottom()) is not None:
        owned.append(item)
    for t in threads:
        t.join()
    while (item := deque.steal()) is not None:
        owned.append(item)

    combined = owned + [x for s in stolen for x in s]
    assert sorted(combined) == list(range(n))