class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced event, category or participant does not exist."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule (e.g. duplicate email in a category)."""


class PersistenceError(DomainError):
    """Raised when the storage backend fails (connection, query or driver error)."""
