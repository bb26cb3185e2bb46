class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an operation needs a row that does not exist for the user."""


class AuthenticationError(DomainError):
    """Raised when login credentials or the session are invalid."""


class BackendError(Exception):
    """Raised for any failure reported by the table backend (network, auth, constraint)."""
