"""
Bounded FIFO queue of process names, used by Round Robin.

The queue is a fixed-size circular buffer. Its capacity is the number of
processes in the run: a process is queued at most once at any instant, so
an overflow means the scheduler itself is broken and is raised, never
dropped.
"""

from typing import Iterator, List, Optional

from .errors import ConfigurationError, DuplicateEnqueueError, ReadyQueueOverflowError


class ReadyQueue:
    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ConfigurationError("Ready queue capacity must be >= 0.")
        self.capacity = capacity
        self._slots: List[Optional[str]] = [None] * capacity
        self._head = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[str]:
        """Queued names, front to back."""
        for offset in range(self._size):
            yield self._slots[(self._head + offset) % self.capacity]

    def __contains__(self, name: object) -> bool:
        return any(queued == name for queued in self)

    def __repr__(self) -> str:
        return f"ReadyQueue({list(self)!r}, capacity={self.capacity})"

    def is_empty(self) -> bool:
        return self._size == 0

    def is_full(self) -> bool:
        return self._size == self.capacity

    def enqueue(self, name: str) -> None:
        """Push ``name`` onto the back of the queue."""
        if self.is_full():
            raise ReadyQueueOverflowError(
                f"Ready queue is full (capacity {self.capacity}); cannot enqueue {name!r}."
            )
        if name in self:
            raise DuplicateEnqueueError(f"{name!r} is already in the ready queue.")
        tail = (self._head + self._size) % self.capacity
        self._slots[tail] = name
        self._size += 1

    def dequeue(self) -> Optional[str]:
        """Pop the front of the queue, or return None when it is empty."""
        if self.is_empty():
            return None
        name = self._slots[self._head]
        self._slots[self._head] = None
        self._head = (self._head + 1) % self.capacity
        self._size -= 1
        return name
