from typing import Optional


class DomainError(Exception):
    """Base exception for console-level failures."""


class ValidationError(DomainError):
    """Raised when form input is invalid (advisory, the API re-validates)."""


class AuthenticationError(DomainError):
    """Raised when login fails or the stored token is rejected."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ApiError(DomainError):
    """Raised when the remote API call fails (transport or HTTP status)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    """Raised for 404 responses."""
