"""
Exception types raised by the scheduling simulator.

Everything the simulator raises derives from :class:`SchedulerError`, so
front ends (CLI, GUI) can catch a single type, report the message and stop.
"""

from typing import Optional


class SchedulerError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(SchedulerError, ValueError):
    """The run configuration or the process table is invalid."""


class InputParseError(ConfigurationError):
    """The declarative input text could not be parsed."""

    def __init__(self, message: str, line: Optional[int] = None, token: Optional[str] = None) -> None:
        self.line = line
        self.token = token
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ReadyQueueOverflowError(SchedulerError):
    """An id was pushed onto a Ready Queue that is already at capacity."""


class DuplicateEnqueueError(SchedulerError):
    """An id was pushed onto the Ready Queue while it was still queued."""
