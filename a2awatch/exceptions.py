"""Custom exception hierarchy for a2awatch."""


class A2AWatchError(Exception):
    """Base for all a2awatch errors."""


class TransportError(A2AWatchError):
    """The remote endpoint could not be reached (connect, read, timeout)."""


class MonitorTimeoutError(A2AWatchError):
    """A monitoring session hit its deadline before the task finished."""


class MonitorCancelledError(A2AWatchError):
    """A background monitoring session was cancelled before it resolved."""


class TaskNotCompletedError(A2AWatchError):
    """The task has not reached a terminal status yet."""


class TimestampsNotSetError(A2AWatchError):
    """The task is missing its creation or modification timestamp."""


class RetriesExhaustedError(A2AWatchError):
    """An operation kept failing after every allowed retry."""
