"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Only ConcurrencyConflictError is retryable; callers should re-read and
resubmit.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input was malformed or out of range. Raised before any mutation."""


class NotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidTransitionError(DomainException):
    """The requested status is not reachable from the current one."""


class InvalidStateError(DomainException):
    """The operation is not allowed while the order is in its current status."""


class LocationBlockedError(DomainException):
    """The location is blocked and accepts no new stock."""


class CapacityExceededError(DomainException):
    """Placing the quantity would push a location over its maximum."""

    def __init__(self, location_id: str, requested: int, remaining: int) -> None:
        self.location_id = location_id
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Location {location_id} cannot take {requested} "
            f"(only {remaining} free)"
        )


class InsufficientQuantityError(DomainException):
    """More quantity was requested than is available or bound."""

    def __init__(self, message: str, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(message)


class ConcurrencyConflictError(DomainException):
    """A racing write changed the record since it was read."""
