"""Tests for the scheduling engine.

Each policy is checked against hand-traced scenarios, plus properties that
hold for every policy:

- Conservation: wait + burst == turnaround for every finished process.
- Mutual exclusion: at most one process runs per tick.
- Determinism: identical input gives an identical event sequence.
"""

from typing import List, Optional, Tuple

import pytest

from schedsim.engine import simulate
from schedsim.errors import ConfigurationError
from schedsim.events import Arrived, Finished, Idle, RunFinished, Selected, Stats
from schedsim.models import Config, Policy, Process


def _config(policy: Policy, runtime: int, specs: List[Tuple[str, int, int]], quantum: Optional[int] = None) -> Config:
    processes = [Process(name=name, arrival_time=arrival, burst_time=burst) for name, arrival, burst in specs]
    return Config(policy=policy, runtime=runtime, processes=processes, quantum=quantum)


def _selections(result) -> List[Tuple[int, str]]:
    return [(e.time, e.name) for e in result.events.of_type(Selected)]


def _stats(result, name: str) -> Stats:
    return next(e for e in result.events.of_type(Stats) if e.name == name)


MIXED_WORKLOAD = [("P1", 0, 5), ("P2", 1, 3), ("P3", 2, 8), ("P4", 3, 2), ("P5", 10, 4)]


class TestFCFS:
    """First-Come, First-Served."""

    def test_two_process_trace(self) -> None:
        """A runs to completion, then B; B waits while A runs."""
        result = simulate(_config(Policy.FCFS, 6, [("A", 0, 3), ("B", 1, 2)]))
        assert list(result.events) == [
            Arrived(0, "A"),
            Selected(0, "A", 3),
            Arrived(1, "B"),
            Finished(3, "A"),
            Selected(3, "B", 2),
            Finished(5, "B"),
            Idle(5),
            RunFinished(6),
            Stats(6, "A", wait=0, turnaround=3),
            Stats(6, "B", wait=2, turnaround=4),
        ]

    def test_equal_arrivals_run_in_declaration_order(self) -> None:
        """Ties on arrival time go to the process declared first."""
        result = simulate(_config(Policy.FCFS, 5, [("A", 0, 2), ("B", 0, 1), ("C", 0, 1)]))
        assert _selections(result) == [(0, "A"), (2, "B"), (3, "C")]

    def test_running_process_is_not_preempted(self) -> None:
        """A short late arrival waits for the long running process."""
        result = simulate(_config(Policy.FCFS, 10, [("long", 0, 5), ("short", 1, 1)]))
        assert _selections(result) == [(0, "long"), (5, "short")]

    def test_idle_until_first_arrival(self) -> None:
        """Ticks with nothing ready are idle and change no burst."""
        result = simulate(_config(Policy.FCFS, 5, [("A", 3, 1)]))
        assert result.events.of_type(Idle) == [Idle(0), Idle(1), Idle(2), Idle(4)]
        assert result.timeline == [None, None, None, "A", None]
        assert _stats(result, "A") == Stats(5, "A", wait=0, turnaround=1)

    def test_process_finishing_on_last_tick(self) -> None:
        """A burst used up on the final tick finishes at the runtime boundary."""
        result = simulate(_config(Policy.FCFS, 2, [("A", 0, 2)]))
        assert list(result.events)[-3:] == [
            Finished(2, "A"),
            RunFinished(2),
            Stats(2, "A", wait=0, turnaround=2),
        ]

    def test_unfinished_process_is_reported(self) -> None:
        """Processes still running or never arrived are reported as unfinished."""
        result = simulate(_config(Policy.FCFS, 3, [("A", 0, 10), ("B", 7, 1)]))
        assert _stats(result, "A") == Stats(3, "A")
        assert not _stats(result, "A").finished
        assert not _stats(result, "B").finished
        assert Arrived(7, "B") not in list(result.events)


class TestSJF:
    """Preemptive Shortest Job First."""

    def test_shorter_arrival_preempts(self) -> None:
        """A process arriving with a shorter remaining burst takes the CPU at once."""
        result = simulate(_config(Policy.SJF, 10, [("A", 0, 5), ("B", 2, 1)]))
        assert _selections(result) == [(0, "A"), (2, "B"), (3, "A")]
        assert Selected(2, "B", 1) in list(result.events)
        assert Selected(3, "A", 3) in list(result.events)
        assert _stats(result, "A") == Stats(10, "A", wait=1, turnaround=6)
        assert _stats(result, "B") == Stats(10, "B", wait=0, turnaround=1)

    def test_longer_arrival_does_not_preempt(self) -> None:
        """A longer newcomer waits for the shorter running process."""
        result = simulate(_config(Policy.SJF, 10, [("A", 0, 2), ("B", 1, 5)]))
        assert _selections(result) == [(0, "A"), (2, "B")]

    def test_equal_remaining_burst_keeps_declaration_order(self) -> None:
        """On equal remaining burst the earlier-declared process wins."""
        result = simulate(_config(Policy.SJF, 5, [("A", 0, 2), ("B", 0, 2)]))
        assert _selections(result) == [(0, "A"), (2, "B")]

    def test_equal_remaining_burst_favours_first_declared_newcomer(self) -> None:
        """Ties are broken by declaration order even against the running process."""
        result = simulate(_config(Policy.SJF, 6, [("B", 1, 2), ("A", 0, 3)]))
        # At t=1 both have 2 ticks left; B is declared first.
        assert _selections(result)[:2] == [(0, "A"), (1, "B")]

    def test_reselection_after_finish_emits_event(self) -> None:
        """The preempted process is announced again when it regains the CPU."""
        result = simulate(_config(Policy.SJF, 8, [("A", 0, 4), ("B", 1, 1)]))
        assert _selections(result) == [(0, "A"), (1, "B"), (2, "A")]


class TestRoundRobin:
    """Round Robin."""

    def test_two_processes_quantum_one(self) -> None:
        """Processes alternate every tick."""
        result = simulate(_config(Policy.RR, 4, [("A", 0, 2), ("B", 0, 2)], quantum=1))
        assert list(result.events) == [
            Arrived(0, "A"),
            Arrived(0, "B"),
            Selected(0, "A", 2),
            Selected(1, "B", 2),
            Selected(2, "A", 1),
            Finished(3, "A"),
            Selected(3, "B", 1),
            Finished(4, "B"),
            RunFinished(4),
            Stats(4, "A", wait=1, turnaround=3),
            Stats(4, "B", wait=2, turnaround=4),
        ]

    def test_expired_process_is_requeued_before_new_arrivals(self) -> None:
        """A process whose quantum expires goes ahead of a same-tick arrival."""
        result = simulate(_config(Policy.RR, 4, [("A", 0, 2), ("B", 1, 1)], quantum=1))
        assert _selections(result) == [(0, "A"), (1, "A"), (2, "B")]

    def test_quantum_longer_than_burst(self) -> None:
        """A process finishing inside its quantum frees the CPU for the next one."""
        result = simulate(_config(Policy.RR, 6, [("A", 0, 3), ("B", 1, 1)], quantum=2))
        assert _selections(result) == [(0, "A"), (2, "B"), (3, "A")]
        assert _stats(result, "A") == Stats(6, "A", wait=1, turnaround=4)
        assert _stats(result, "B") == Stats(6, "B", wait=1, turnaround=2)
        assert result.timeline == ["A", "A", "B", "A", None, None]

    def test_single_process_is_reselected_each_quantum(self) -> None:
        """With nobody else waiting the same process is dispatched again."""
        result = simulate(_config(Policy.RR, 4, [("A", 0, 3)], quantum=1))
        assert _selections(result) == [(0, "A"), (1, "A"), (2, "A")]
        assert _stats(result, "A") == Stats(4, "A", wait=0, turnaround=3)

    def test_idle_when_queue_empty(self) -> None:
        result = simulate(_config(Policy.RR, 3, [("A", 2, 1)], quantum=2))
        assert result.events.of_type(Idle) == [Idle(0), Idle(1)]

    def test_wait_between_dispatches_is_bounded(self) -> None:
        """No ready process waits longer than the others' combined quanta."""
        quantum = 2
        specs = [("P1", 0, 7), ("P2", 0, 5), ("P3", 0, 6)]
        result = simulate(_config(Policy.RR, 30, specs, quantum=quantum))
        bound = (len(specs) - 1) * quantum
        for name, _, _ in specs:
            ticks = [t for t, pid in enumerate(result.timeline) if pid == name]
            gaps = [b - a - 1 for a, b in zip(ticks, ticks[1:])]
            assert max(gaps) <= bound


@pytest.mark.parametrize("policy", list(Policy))
class TestCommonProperties:
    """Properties shared by all policies."""

    def _run(self, policy: Policy):
        return simulate(_config(policy, 30, MIXED_WORKLOAD, quantum=3))

    def test_wait_plus_burst_equals_turnaround(self, policy: Policy) -> None:
        result = self._run(policy)
        for p in result.table:
            assert p.finished
            assert p.end_time > p.start_time
            assert p.wait_time + p.burst_time == p.turnaround_time

    def test_at_most_one_selection_per_tick(self, policy: Policy) -> None:
        times = [e.time for e in self._run(policy).events.of_type(Selected)]
        assert len(times) == len(set(times))

    def test_cpu_time_matches_bursts(self, policy: Policy) -> None:
        result = self._run(policy)
        assert len(result.timeline) == 30
        for p in result.table:
            assert result.timeline.count(p.name) == p.burst_time - p.remaining_time

    def test_runs_are_deterministic(self, policy: Policy) -> None:
        assert list(self._run(policy).events) == list(self._run(policy).events)

    def test_config_processes_are_not_mutated(self, policy: Policy) -> None:
        config = _config(policy, 30, MIXED_WORKLOAD, quantum=3)
        simulate(config)
        assert all(p.remaining_time == p.burst_time and not p.is_ready for p in config.processes)

    def test_zero_runtime(self, policy: Policy) -> None:
        result = simulate(_config(policy, 0, [("A", 0, 1)], quantum=1))
        assert list(result.events) == [RunFinished(0), Stats(0, "A")]


class TestValidation:
    """Invalid configurations are rejected before the first tick."""

    def test_round_robin_requires_quantum(self) -> None:
        with pytest.raises(ConfigurationError, match="quantum is required"):
            simulate(_config(Policy.RR, 5, [("A", 0, 1)]))

    def test_round_robin_rejects_zero_quantum(self) -> None:
        with pytest.raises(ConfigurationError, match="positive"):
            simulate(_config(Policy.RR, 5, [("A", 0, 1)], quantum=0))

    def test_unknown_policy(self) -> None:
        config = Config(policy="lottery", runtime=5, processes=[])
        with pytest.raises(ConfigurationError, match="Unknown scheduling policy"):
            simulate(config)

    def test_process_count_mismatch(self) -> None:
        config = _config(Policy.FCFS, 5, [("A", 0, 1)])
        config.process_count = 2
        with pytest.raises(ConfigurationError, match="Process count"):
            simulate(config)

    def test_duplicate_names(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate"):
            simulate(_config(Policy.FCFS, 5, [("A", 0, 1), ("A", 1, 1)]))

    def test_zero_burst(self) -> None:
        with pytest.raises(ConfigurationError, match="burst"):
            simulate(_config(Policy.SJF, 5, [("A", 0, 0)]))

    def test_negative_runtime(self) -> None:
        with pytest.raises(ConfigurationError, match="Runtime"):
            simulate(_config(Policy.FCFS, -1, [("A", 0, 1)]))

    def test_processes_added_after_construction(self) -> None:
        """Without an announced count, the live process list is what gets checked."""
        config = Config(policy=Policy.FCFS, runtime=3)
        config.processes.append(Process("A", 0, 1))
        result = simulate(config)
        assert _stats(result, "A") == Stats(3, "A", wait=0, turnaround=1)
