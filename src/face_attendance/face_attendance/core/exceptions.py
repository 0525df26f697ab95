class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateKeyError(DomainError):
    """Raised when a student code is already taken by another student."""


class NotFoundError(DomainError):
    """Raised when an operation targets an unknown id."""


class CorruptStateError(DomainError):
    """Raised when persisted data cannot be trusted on load."""


class PersistenceError(DomainError):
    """Raised when a mutation could not be written to durable storage.

    The in-memory change has already been rolled back when this is raised.
    """
