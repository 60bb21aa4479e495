class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates an input contract."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or record does not exist."""


class ConflictError(DomainError):
    """Raised on an illegal state transition (double save, unlock, stale version)."""
