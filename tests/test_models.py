"""Tests for policies, process records and the process table."""

import pytest

from schedsim.errors import ConfigurationError, SchedulerError
from schedsim.events import Arrived, EventLog, Finished
from schedsim.models import Policy, Process, ProcessTable


def _table(*specs):
    events = EventLog()
    processes = [Process(name=n, arrival_time=a, burst_time=b) for n, a, b in specs]
    return ProcessTable(processes, events), events


class TestPolicy:
    @pytest.mark.parametrize("token, policy", [("fcfs", Policy.FCFS), ("SJF", Policy.SJF), (" rr ", Policy.RR)])
    def test_from_token(self, token: str, policy: Policy) -> None:
        assert Policy.from_token(token) is policy

    def test_unknown_token(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown scheduling policy"):
            Policy.from_token("priority")

    def test_display_names(self) -> None:
        assert Policy.FCFS.display_name == "First-Come First-Served"
        assert Policy.SJF.display_name == "preemptive Shortest Job First"
        assert Policy.RR.display_name == "Round-Robin"


class TestProcess:
    def test_new_process_state(self) -> None:
        p = Process(name="P1", arrival_time=2, burst_time=4)
        assert p.remaining_time == 4
        assert not p.is_ready
        assert not p.finished
        assert p.turnaround_time is None

    def test_fresh_copy_drops_run_state(self) -> None:
        p = Process(name="P1", arrival_time=2, burst_time=4)
        p.remaining_time = 1
        p.wait_time = 3
        copy = p.fresh()
        assert copy is not p
        assert (copy.remaining_time, copy.wait_time) == (4, 0)


class TestProcessTable:
    def test_arrival_marks_ready_and_emits(self) -> None:
        table, events = _table(("A", 0, 2), ("B", 1, 1))
        arrived = table.arrive_if_due(1)
        assert [p.name for p in arrived] == ["B"]
        assert table["B"].is_ready
        assert table["B"].start_time == 1
        assert not table["A"].is_ready
        assert list(events) == [Arrived(1, "B")]

    def test_ready_keeps_declaration_order(self) -> None:
        table, _ = _table(("B", 0, 1), ("A", 0, 1))
        table.arrive_if_due(0)
        assert [p.name for p in table.ready()] == ["B", "A"]

    def test_tick_wait_skips_excluded(self) -> None:
        table, _ = _table(("A", 0, 2), ("B", 0, 2), ("C", 5, 1))
        table.arrive_if_due(0)
        table.tick_wait(exclude="A")
        assert [p.wait_time for p in table] == [0, 1, 0]

    def test_finish_only_when_burst_used_up(self) -> None:
        table, events = _table(("A", 0, 1))
        table.arrive_if_due(0)
        assert not table.finish_if_done("A", 0)
        table.run_one_tick("A")
        assert table.finish_if_done("A", 1)
        assert not table["A"].is_ready
        assert table["A"].end_time == 1
        assert events[-1] == Finished(1, "A")
        assert not table.finish_if_done("A", 2)

    def test_run_past_zero_raises(self) -> None:
        table, _ = _table(("A", 0, 1))
        table.run_one_tick("A")
        with pytest.raises(SchedulerError, match="no burst left"):
            table.run_one_tick("A")

    def test_unknown_process_raises(self) -> None:
        table, _ = _table(("A", 0, 1))
        with pytest.raises(ConfigurationError, match="Unknown process"):
            table["Z"]


class TestEventLog:
    def test_indexing_and_filtering(self) -> None:
        events = EventLog()
        events.arrived(0, "A")
        events.finished(2, "A")
        assert events[0] == Arrived(0, "A")
        assert events.of_type(Finished) == [Finished(2, "A")]
