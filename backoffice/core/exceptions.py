"""Custom exception classes for the back office."""

from fastapi import status


class BackofficeError(Exception):
    """Base exception for the back office."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(BackofficeError):
    """Raised when there is no valid session or the credentials are wrong."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(BackofficeError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(BackofficeError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(BackofficeError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST
