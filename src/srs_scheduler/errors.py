"""Exceptions raised by the scheduling engine."""


class SchedulerError(Exception):
    """Base class for scheduler failures."""


class ValidationError(SchedulerError):
    """A review signal or card record is outside its declared domain."""


class StateInconsistencyError(SchedulerError):
    """A stored review state breaks one of its invariants.

    Usually means the persistence layer wrote something the scheduler never
    produced.
    """
