"""Custom exception hierarchy for procwarden."""


class ProcwardenError(Exception):
    """Base for all procwarden errors."""


class InvalidCommandError(ProcwardenError):
    """Command string could not be split into an argument vector."""


class CapacityExceededError(ProcwardenError):
    """The process table has no free slot for another entry."""


class LaunchFailureError(ProcwardenError):
    """The OS refused to create a process for an entry."""


class ReapQueryError(ProcwardenError):
    """Querying exit status failed for a reason unrelated to any child."""


class KillSignalError(ProcwardenError):
    """A termination signal could not be delivered to an entry."""


class EntryStateError(ProcwardenError):
    """Invalid process entry state transition."""
