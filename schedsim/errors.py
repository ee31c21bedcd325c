"""
Errors raised before any scheduling engine runs.

All of them subclass ValueError so callers that only care about "bad input"
can keep catching that.
"""


class SchedulerError(ValueError):
    """Base class for every fatal workload or invocation error."""


class InvalidArgs(SchedulerError):
    """No workload was given, or an option has an unusable value."""


class MalformedInput(SchedulerError):
    """A workload field is unparseable or breaks a process invariant."""


class EmptyWorkload(SchedulerError):
    """The workload holds zero processes, so no averages can be formed."""
