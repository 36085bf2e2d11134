"""Error taxonomy for the workload engine."""


class WorkloadError(Exception):
    """Base class for workload errors."""

    pass


class MalformedInputError(WorkloadError, ValueError):
    """Raised when a configuration date/time string cannot be parsed."""

    pass


class MissingConfigurationError(WorkloadError):
    """Raised when a required setting is absent."""

    pass


class InvariantViolation(WorkloadError):
    """Raised in strict mode when input breaks an engine invariant."""

    pass
