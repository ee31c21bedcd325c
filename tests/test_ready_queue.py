import pytest

from schedsim.models import Process
from schedsim.ready_queue import ReadyQueue


def test_dequeues_lowest_priority_value_first():
    q = ReadyQueue()
    q.enqueue(Process(1, 0, 3, priority=4))
    q.enqueue(Process(2, 0, 3, priority=0))
    q.enqueue(Process(3, 0, 3, priority=2))
    assert [q.dequeue().pid for _ in range(3)] == [2, 3, 1]
    assert q.is_empty()


def test_ties_leave_in_enqueue_order():
    q = ReadyQueue()
    for pid in (5, 3, 9, 1):
        q.enqueue(Process(pid, 0, 1, priority=1))
    assert [q.dequeue().pid for _ in range(4)] == [5, 3, 9, 1]


def test_interleaved_enqueue_and_dequeue():
    q = ReadyQueue()
    q.enqueue(Process(1, 0, 1, priority=3))
    q.enqueue(Process(2, 0, 1, priority=3))
    assert q.dequeue().pid == 1
    q.enqueue(Process(3, 0, 1, priority=3))
    q.enqueue(Process(4, 0, 1, priority=1))
    assert q.peek().pid == 4
    assert len(q) == 3
    assert [q.dequeue().pid for _ in range(3)] == [4, 2, 3]


def test_dequeue_empty_raises():
    q = ReadyQueue()
    assert q.is_empty()
    assert q.peek() is None
    with pytest.raises(IndexError):
        q.dequeue()
