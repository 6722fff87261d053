"""Tests for the bounded Round Robin ready queue."""

import pytest

from schedsim.errors import DuplicateEnqueueError, ReadyQueueOverflowError
from schedsim.ready_queue import ReadyQueue


class TestReadyQueue:
    def test_new_queue_is_empty(self) -> None:
        queue = ReadyQueue(3)
        assert queue.is_empty()
        assert not queue.is_full()
        assert len(queue) == 0

    def test_fifo_order(self) -> None:
        queue = ReadyQueue(3)
        for name in ("A", "B", "C"):
            queue.enqueue(name)
        assert [queue.dequeue() for _ in range(3)] == ["A", "B", "C"]

    def test_dequeue_empty_returns_none(self) -> None:
        assert ReadyQueue(2).dequeue() is None

    def test_wraps_around_the_buffer(self) -> None:
        """Slots freed at the front are reused without breaking order."""
        queue = ReadyQueue(3)
        queue.enqueue("A")
        queue.enqueue("B")
        queue.enqueue("C")
        queue.dequeue()
        queue.dequeue()
        queue.enqueue("A")
        queue.enqueue("B")
        assert list(queue) == ["C", "A", "B"]
        assert queue.is_full()

    def test_overflow_raises(self) -> None:
        queue = ReadyQueue(2)
        queue.enqueue("A")
        queue.enqueue("B")
        with pytest.raises(ReadyQueueOverflowError, match="capacity 2"):
            queue.enqueue("C")
        assert list(queue) == ["A", "B"]

    def test_duplicate_enqueue_raises(self) -> None:
        queue = ReadyQueue(3)
        queue.enqueue("A")
        with pytest.raises(DuplicateEnqueueError):
            queue.enqueue("A")

    def test_name_can_return_after_dequeue(self) -> None:
        queue = ReadyQueue(1)
        queue.enqueue("A")
        assert queue.dequeue() == "A"
        queue.enqueue("A")
        assert "A" in queue

    def test_zero_capacity_is_full(self) -> None:
        queue = ReadyQueue(0)
        assert queue.is_full()
        assert queue.dequeue() is None
        with pytest.raises(ReadyQueueOverflowError):
            queue.enqueue("A")
