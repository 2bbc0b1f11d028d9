"""Errors that escape to the process boundary."""

__all__ = ["CoordinationError", "StopTriggerError"]


class CoordinationError(RuntimeError):
    """The stop signal's lock or condition can no longer be used.

    Fatal to the scheduler loop: it must stop rather than keep running
    without a way to be told to stop.
    """


class StopTriggerError(RuntimeError):
    """The external stop trigger (e.g. standard input) failed."""
