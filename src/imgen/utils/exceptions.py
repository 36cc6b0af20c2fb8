"""
Custom exceptions for imgen.

This module defines all custom exceptions used throughout the application.
"""


class ImgenError(Exception):
    """Base exception for all imgen errors."""

    pass


class ValidationError(ImgenError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "") -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the field that failed validation (optional)
        """
        self.field = field
        super().__init__(message)


class InputReadError(ImgenError):
    """Raised when a prompt, image or mask cannot be read from a file or stdin."""

    def __init__(self, message: str, path: str = "") -> None:
        """
        Initialize input read error.

        Args:
            message: Error message
            path: Path that failed to read, or "<stdin>"
        """
        self.path = path
        super().__init__(message)


class APIError(ImgenError):
    """Raised when an API call fails."""

    def __init__(self, message: str, status_code: int = 0, response: str = "") -> None:
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response: Raw API response (if available)
        """
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class NetworkError(ImgenError):
    """Raised when a network operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize network error.

        Args:
            message: Error message
            original_error: The underlying exception that caused this error
        """
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(ImgenError):
    """Raised when the API request times out."""

    pass


class ConfigurationError(ImgenError):
    """Raised when there is a configuration problem."""

    pass
