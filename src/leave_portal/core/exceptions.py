class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the referenced request, swap or user does not exist."""


class ConflictError(DomainError):
    """Raised when a row was already processed by someone else."""


class StoreError(Exception):
    """Raised when the persistence store is unreachable or a query fails."""
