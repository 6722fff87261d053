"""
Events emitted by the scheduling engine.

Every event carries the tick it was emitted at. The engine appends events
to an :class:`EventLog` in the order they happen; the writer renders them
verbatim and the GUI replays them.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Union


@dataclass(frozen=True)
class Arrived:
    time: int
    name: str


@dataclass(frozen=True)
class Selected:
    time: int
    name: str
    burst: int


@dataclass(frozen=True)
class Finished:
    time: int
    name: str


@dataclass(frozen=True)
class Idle:
    time: int


@dataclass(frozen=True)
class RunFinished:
    time: int


@dataclass(frozen=True)
class Stats:
    """Final statistics for one process; ``wait`` is None if it did not finish."""

    time: int
    name: str
    wait: Optional[int] = None
    turnaround: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.wait is not None


Event = Union[Arrived, Selected, Finished, Idle, RunFinished, Stats]


class EventLog:
    """Ordered, append-only record of the events of one run."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def arrived(self, time: int, name: str) -> None:
        self._events.append(Arrived(time, name))

    def selected(self, time: int, name: str, burst: int) -> None:
        self._events.append(Selected(time, name, burst))

    def finished(self, time: int, name: str) -> None:
        self._events.append(Finished(time, name))

    def idle(self, time: int) -> None:
        self._events.append(Idle(time))

    def run_finished(self, time: int) -> None:
        self._events.append(RunFinished(time))

    def stats(self, time: int, name: str, wait: Optional[int] = None, turnaround: Optional[int] = None) -> None:
        self._events.append(Stats(time, name, wait, turnaround))

    def of_type(self, kind: type) -> List[Event]:
        """All events of the given class, in order."""
        return [e for e in self._events if isinstance(e, kind)]
