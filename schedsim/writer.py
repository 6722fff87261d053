"""
Text rendering of a simulation run.

The report is a header (process count, policy, quantum for Round Robin),
one line per event, and the per-process statistics.
"""

from pathlib import Path
from typing import Iterable, List, Union

from .engine import SimulationResult
from .events import Arrived, Event, Finished, Idle, RunFinished, Selected, Stats
from .models import Config, Policy


def render_header(config: Config) -> List[str]:
    lines = [
        f"{config.declared_count} processes",
        f"Using {config.policy.display_name}",
    ]
    if config.policy is Policy.RR:
        lines.append(f"Quantum {config.quantum}")
    lines.append("")
    return lines


def render_event(event: Event) -> str:
    """Render a single event as one line of text."""
    if isinstance(event, Arrived):
        return f"Time {event.time}: {event.name} arrived"
    if isinstance(event, Selected):
        return f"Time {event.time}: {event.name} selected (burst {event.burst})"
    if isinstance(event, Finished):
        return f"Time {event.time}: {event.name} finished"
    if isinstance(event, Idle):
        return f"Time {event.time}: IDLE"
    if isinstance(event, RunFinished):
        return f"Finished at time {event.time}"
    if isinstance(event, Stats):
        if event.finished:
            return f"{event.name} wait {event.wait} turnaround {event.turnaround}"
        return f"{event.name} didn't finish"
    raise TypeError(f"Unknown event: {event!r}")


def render_events(events: Iterable[Event]) -> List[str]:
    lines: List[str] = []
    for event in events:
        lines.append(render_event(event))
        # Blank line between the trace and the statistics.
        if isinstance(event, RunFinished):
            lines.append("")
    return lines


def render_report(result: SimulationResult) -> str:
    lines = render_header(result.config) + render_events(result.events)
    return "\n".join(lines) + "\n"


def write_report(path: Union[str, Path], result: SimulationResult) -> Path:
    """Write the rendered report to ``path`` and return the path."""
    path = Path(path)
    path.write_text(render_report(result))
    return path
