"""
Tick-by-tick scheduling engine.

Three policies are implemented, all over the same discrete time model:

- First-Come, First-Served (FCFS)
- Shortest Job First, preemptive (SJF, a.k.a. shortest remaining time)
- Round Robin (RR) with a fixed time quantum

Time advances one tick at a time from 0 to ``runtime - 1``. A process whose
burst is used up during tick ``t`` is marked finished at the start of tick
``t + 1`` (or at the final boundary ``runtime``), so its turnaround is
always ``wait + burst``.

Each algorithm returns the per-tick timeline (name of the process that ran
at each tick, or None when the CPU was idle); events are appended to the
process table's event log as they happen.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .errors import ConfigurationError
from .events import EventLog
from .models import Config, Policy, Process, ProcessTable
from .ready_queue import ReadyQueue

logger = logging.getLogger(__name__)

# One entry per tick: the process that ran, or None for an idle tick.
Timeline = List[Optional[str]]


@dataclass
class SimulationResult:
    """Everything a finished run produced."""

    config: Config
    table: ProcessTable
    events: EventLog
    timeline: Timeline


# ---------------------------------------------------------------------------
# Selection-based policies (FCFS, SJF)
# ---------------------------------------------------------------------------


def _selection_scheduling(
    table: ProcessTable, runtime: int, key: Callable[[Process], int]
) -> Timeline:
    """
    Shared skeleton of FCFS and SJF.

    Every tick the ready process with the smallest ``key`` is chosen; ties
    go to the process declared first. A "selected" event is emitted only
    when the running process changes.
    """
    events = table.events
    timeline: Timeline = []
    current: Optional[str] = None

    for time in range(runtime):
        if current is not None and table.finish_if_done(current, time):
            current = None

        table.arrive_if_due(time)

        candidates = list(table.ready())
        if candidates:
            chosen = min(candidates, key=key).name
            if chosen != current:
                if current is not None:
                    logger.debug("t=%d: %s preempted by %s", time, current, chosen)
                events.selected(time, chosen, table[chosen].remaining_time)
                current = chosen
            table.run_one_tick(current)
        else:
            events.idle(time)

        table.tick_wait(current)
        timeline.append(current)

    # A process may use up its burst on the very last tick.
    if current is not None:
        table.finish_if_done(current, runtime)

    return timeline


def fcfs_scheduling(table: ProcessTable, runtime: int) -> Timeline:
    """
    First-Come, First-Served.

    The ready process with the earliest arrival runs. Because the running
    process arrived no later than anything that becomes ready after it, it
    keeps the CPU until it finishes, so the policy is non-preemptive in
    effect.
    """
    return _selection_scheduling(table, runtime, key=lambda p: p.arrival_time)


def sjf_scheduling(table: ProcessTable, runtime: int) -> Timeline:
    """
    Shortest Job First, preemptive.

    The ready process with the smallest *remaining* burst runs, recomputed
    every tick: a newly arrived shorter process takes the CPU at the tick it
    arrives.
    """
    return _selection_scheduling(table, runtime, key=lambda p: p.remaining_time)


# ---------------------------------------------------------------------------
# Round Robin
# ---------------------------------------------------------------------------


def round_robin_scheduling(table: ProcessTable, runtime: int, quantum: int) -> Timeline:
    """
    Round Robin with a fixed time quantum.

    Within a tick the order is: finish the running process if done, or send
    it to the back of the queue if its quantum is used up; enqueue new
    arrivals; dispatch from the front of the queue if the CPU is free; run.
    """
    if quantum < 1:
        raise ConfigurationError("Time quantum must be a positive integer.")

    events = table.events
    queue = ReadyQueue(capacity=len(table))
    timeline: Timeline = []
    current: Optional[str] = None
    slice_left = 0

    for time in range(runtime):
        if current is not None:
            if table.finish_if_done(current, time):
                current = None
            elif slice_left == 0:
                logger.debug("t=%d: quantum expired for %s, requeued", time, current)
                queue.enqueue(current)
                current = None

        for p in table.arrive_if_due(time):
            queue.enqueue(p.name)

        if current is None:
            current = queue.dequeue()
            if current is not None:
                slice_left = quantum
                events.selected(time, current, table[current].remaining_time)

        if current is not None:
            table.run_one_tick(current)
            slice_left -= 1
        else:
            events.idle(time)

        table.tick_wait(current)
        timeline.append(current)

    if current is not None:
        table.finish_if_done(current, runtime)

    return timeline


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _report(table: ProcessTable, runtime: int) -> None:
    """Emit the completion summary and per-process statistics."""
    events = table.events
    events.run_finished(runtime)
    for p in table:
        if p.finished:
            events.stats(runtime, p.name, p.wait_time, p.turnaround_time)
        else:
            events.stats(runtime, p.name)


def simulate(config: Config) -> SimulationResult:
    """
    Run one simulation and return its result.

    The configuration is validated before the first tick; an invalid
    configuration raises :class:`ConfigurationError` and nothing runs.
    """
    config.validate()

    events = EventLog()
    table = ProcessTable(config.processes, events)
    logger.debug(
        "Simulating %d processes with %s for %d ticks",
        len(table), config.policy.display_name, config.runtime,
    )

    if config.policy is Policy.FCFS:
        timeline = fcfs_scheduling(table, config.runtime)
    elif config.policy is Policy.SJF:
        timeline = sjf_scheduling(table, config.runtime)
    elif config.policy is Policy.RR:
        timeline = round_robin_scheduling(table, config.runtime, config.quantum)
    else:
        raise ConfigurationError(f"Unsupported policy: {config.policy!r}")

    _report(table, config.runtime)
    return SimulationResult(config=config, table=table, events=events, timeline=timeline)
