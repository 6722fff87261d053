"""
Data model for the scheduling simulator.

- :class:`Policy` is the scheduling policy selected for a run.
- :class:`Process` is one process record (declarative fields plus the
  mutable state the engine drives).
- :class:`Config` bundles the declarative input of a run.
- :class:`ProcessTable` owns the live process state for one run.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .errors import ConfigurationError, SchedulerError
from .events import EventLog

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


class Policy(Enum):
    """Scheduling policy; the value is the token used in input files."""

    FCFS = "fcfs"
    SJF = "sjf"
    RR = "rr"

    @property
    def display_name(self) -> str:
        """Human-readable name used in the report header."""
        return _POLICY_DISPLAY_NAMES[self]

    @classmethod
    def from_token(cls, token: str) -> "Policy":
        """Map an input token (``fcfs``, ``sjf``, ``rr``) to a policy."""
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown scheduling policy: {token!r}") from None


_POLICY_DISPLAY_NAMES: Dict[Policy, str] = {
    Policy.FCFS: "First-Come First-Served",
    Policy.SJF: "preemptive Shortest Job First",
    Policy.RR: "Round-Robin",
}


# ---------------------------------------------------------------------------
# Process
# ---------------------------------------------------------------------------


@dataclass
class Process:
    """
    A single process.

    Attributes:
        name:           Unique process name (e.g. "P1").
        arrival_time:   Tick at which the process becomes ready.
        burst_time:     Total CPU ticks required; never changes.
        remaining_time: CPU ticks still required.
        is_ready:       True between arrival and completion.
        wait_time:      Ticks spent ready but not running.
        start_time:     Tick of arrival, once arrived.
        end_time:       Tick at which the process was marked finished,
                        or None if it did not finish.
    """

    name: str
    arrival_time: int
    burst_time: int
    remaining_time: int = field(init=False)
    is_ready: bool = field(default=False, init=False)
    wait_time: int = field(default=0, init=False)
    start_time: Optional[int] = field(default=None, init=False)
    end_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def finished(self) -> bool:
        return self.end_time is not None

    @property
    def turnaround_time(self) -> Optional[int]:
        if self.end_time is None or self.start_time is None:
            return None
        return self.end_time - self.start_time

    def fresh(self) -> "Process":
        """Return an unstarted copy carrying only the declarative fields."""
        return Process(name=self.name, arrival_time=self.arrival_time, burst_time=self.burst_time)


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------


@dataclass
class Config:
    """
    Declarative description of one simulation run.

    ``process_count`` is the count announced by the input, or None when it
    was not given; when set it must match the number of process records.
    """

    policy: Policy
    runtime: int
    processes: List[Process] = field(default_factory=list)
    quantum: Optional[int] = None
    process_count: Optional[int] = None

    @property
    def declared_count(self) -> int:
        """Announced process count, or the live number of records if none was given."""
        if self.process_count is None:
            return len(self.processes)
        return self.process_count

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the run cannot start."""
        if not isinstance(self.policy, Policy):
            raise ConfigurationError(f"Unknown scheduling policy: {self.policy!r}")
        if self.runtime < 0:
            raise ConfigurationError("Runtime must be a non-negative number of ticks.")
        if self.policy is Policy.RR:
            if self.quantum is None:
                raise ConfigurationError("Time quantum is required for Round Robin.")
            if self.quantum < 1:
                raise ConfigurationError("Time quantum must be a positive integer.")
        if self.declared_count != len(self.processes):
            raise ConfigurationError(
                f"Process count is {self.declared_count} but "
                f"{len(self.processes)} processes were declared."
            )

        seen = set()
        for p in self.processes:
            if p.name in seen:
                raise ConfigurationError(f"Duplicate process name: {p.name!r}")
            seen.add(p.name)
            if p.arrival_time < 0:
                raise ConfigurationError(f"Process {p.name!r}: arrival time must be >= 0.")
            if p.burst_time < 1:
                raise ConfigurationError(f"Process {p.name!r}: burst time must be > 0.")


# ---------------------------------------------------------------------------
# Process table
# ---------------------------------------------------------------------------


class ProcessTable:
    """
    Live state of every process for one run.

    Processes are kept in declaration order, which is the tie-break order
    for every selection rule. Records are never removed; a finished process
    has ``is_ready == False`` and ``end_time`` set.
    """

    def __init__(self, processes: List[Process], events: EventLog) -> None:
        self._processes = [p.fresh() for p in processes]
        self._by_name = {p.name: p for p in self._processes}
        self.events = events

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self._processes)

    def __getitem__(self, name: str) -> Process:
        try:
            return self._by_name[name]
        except KeyError:
            raise ConfigurationError(f"Unknown process: {name!r}") from None

    def ready(self) -> Iterator[Process]:
        """Ready processes in declaration order."""
        return (p for p in self._processes if p.is_ready)

    def arrive_if_due(self, time: int) -> List[Process]:
        """Mark every process arriving at ``time`` ready and return them."""
        arrived = []
        for p in self._processes:
            if p.arrival_time == time and not p.is_ready and not p.finished:
                p.is_ready = True
                p.start_time = time
                self.events.arrived(time, p.name)
                arrived.append(p)
        return arrived

    def tick_wait(self, exclude: Optional[str]) -> None:
        for p in self._processes:
            if p.is_ready and p.name != exclude:
                p.wait_time += 1

    def run_one_tick(self, name: str) -> None:
        p = self[name]
        if p.remaining_time <= 0:
            raise SchedulerError(f"Process {name!r} has no burst left to run.")
        p.remaining_time -= 1

    def finish_if_done(self, name: str, time: int) -> bool:
        """Finish ``name`` at ``time`` if its burst is used up."""
        p = self[name]
        if p.remaining_time != 0 or p.finished:
            return False
        p.is_ready = False
        p.end_time = time
        self.events.finished(time, p.name)
        logger.debug("t=%d: %s finished (wait %d)", time, p.name, p.wait_time)
        return True
