"""
Derived metrics for a finished run.

- :func:`build_schedule` turns the per-tick timeline into Gantt chart
  entries (one entry per contiguous CPU interval).
- :func:`compute_aggregates` summarises waiting/turnaround times, CPU
  utilisation and throughput.
- :func:`compare_policies` runs every policy over the same process set.
"""

from dataclasses import replace
from typing import Any, Dict, List, Tuple

from .engine import SimulationResult, Timeline, simulate
from .models import Config, Policy

# Each schedule entry represents one contiguous CPU execution interval.
ScheduleEntry = Dict[str, Any]  # keys: "pid", "start", "end"


def build_schedule(timeline: Timeline) -> List[ScheduleEntry]:
    """
    Merge consecutive ticks run by the same process into one entry.

    Idle ticks are merged the same way and carry ``pid = None``.
    """
    schedule: List[ScheduleEntry] = []
    for time, pid in enumerate(timeline):
        if schedule and schedule[-1]["pid"] == pid and schedule[-1]["end"] == time:
            schedule[-1]["end"] += 1
        else:
            schedule.append({"pid": pid, "start": time, "end": time + 1})
    return schedule


def compute_aggregates(result: SimulationResult) -> Dict[str, float]:
    """Compute aggregate metrics over the finished processes of a run."""
    finished = [p for p in result.table if p.finished]

    if finished:
        waits = [p.wait_time for p in finished]
        turnarounds = [p.turnaround_time for p in finished]
        avg_waiting = sum(waits) / len(finished)
        avg_turnaround = sum(turnarounds) / len(finished)
        min_waiting = min(waits)
        max_waiting = max(waits)
    else:
        avg_waiting = 0.0
        avg_turnaround = 0.0
        min_waiting = 0.0
        max_waiting = 0.0

    total_time = len(result.timeline)
    if total_time > 0:
        busy_time = sum(1 for pid in result.timeline if pid is not None)
        cpu_utilization = busy_time / total_time
        throughput = len(finished) / total_time
    else:
        cpu_utilization = 0.0
        throughput = 0.0

    return {
        "avg_waiting": avg_waiting,
        "avg_turnaround": avg_turnaround,
        "min_waiting": min_waiting,
        "max_waiting": max_waiting,
        "cpu_utilization": cpu_utilization,
        "throughput": throughput,
        "finished": len(finished),
        "unfinished": len(result.table) - len(finished),
    }


def compare_policies(config: Config) -> List[Tuple[Policy, Dict[str, float]]]:
    """
    Run every policy over the processes of ``config``.

    Round Robin uses the configured quantum and is skipped when none is set.
    """
    rows: List[Tuple[Policy, Dict[str, float]]] = []
    for policy in Policy:
        if policy is Policy.RR and config.quantum is None:
            continue
        result = simulate(replace(config, policy=policy))
        rows.append((policy, compute_aggregates(result)))
    return rows
