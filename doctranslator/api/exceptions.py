class ApiError(Exception):
    """Base exception for all backend API errors."""


class BackendError(ApiError):
    """Raised when the backend answered with an HTTP error status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendUnreachableError(ApiError):
    """Raised when no HTTP response was received (connect error, timeout)."""


class ResponseFormatError(ApiError):
    """Raised when a successful response body does not have the expected shape."""
