class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a worker would end up with a second open session."""


class InvalidStateError(DomainError):
    """Raised when a transition is attempted from a state that forbids it."""


class NotFoundError(InvalidStateError):
    """Raised when a session or schedule id does not exist."""
