"""Custom exception classes for HRS."""

from fastapi import status


class HRSError(Exception):
    """Base exception for HRS, carrying the HTTP status it maps to."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(HRSError):
    """Raised when no valid identity is attached to the request."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(HRSError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(HRSError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(HRSError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(HRSError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(HRSError):
    """Raised when storage or another collaborator fails unexpectedly."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class Redirect(Exception):
    """Navigation redirect. Not an error, handled apart from HRSError."""

    def __init__(self, location: str, status_code: int = status.HTTP_302_FOUND):
        self.location = location
        self.status_code = status_code
        super().__init__(location)
