class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced slot, profile or session does not exist."""


class ConflictError(DomainError):
    """Raised when attendance was already marked for a slot on a date."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InternalError(DomainError):
    """Raised for storage or otherwise unexpected failures."""
