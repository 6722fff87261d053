"""
CPU Scheduling Simulator
========================

Discrete-tick simulation of three classic CPU scheduling policies:

- First-Come, First-Served (FCFS)
- Shortest Job First, preemptive (SJF)
- Round Robin (RR, with configurable time quantum)

Given a list of processes (arrival time, burst time) and a policy, the
engine produces a deterministic tick-by-tick event trace and per-process
wait and turnaround statistics.
"""

from .engine import SimulationResult, simulate
from .errors import (
    ConfigurationError,
    DuplicateEnqueueError,
    InputParseError,
    ReadyQueueOverflowError,
    SchedulerError,
)
from .models import Config, Policy, Process, ProcessTable
from .parser import parse_file, parse_text
from .ready_queue import ReadyQueue

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "DuplicateEnqueueError",
    "InputParseError",
    "Policy",
    "Process",
    "ProcessTable",
    "ReadyQueue",
    "ReadyQueueOverflowError",
    "SchedulerError",
    "SimulationResult",
    "parse_file",
    "parse_text",
    "simulate",
]
