"""
Custom Exceptions for Canvas Submission Sync

Provides specific exception types for each class of fatal error. Library code
raises these; only the CLI turns them into a diagnostic and an exit status.
"""


class CanvasSyncError(Exception):
    """Base exception for all Canvas submission sync errors."""
    pass


class ConfigurationError(CanvasSyncError):
    """Raised when configuration is missing or invalid."""
    pass


class ValidationError(CanvasSyncError):
    """Raised when input validation fails."""
    pass


class AuthenticationError(CanvasSyncError):
    """Raised when Canvas API authentication fails."""
    pass


class APIError(CanvasSyncError):
    """Raised when Canvas API returns an error."""

    def __init__(self, message: str, status_code: int = None, response: str = None):
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class PartialResultError(APIError):
    """Raised when a response signals that more pages are available.

    Listings are requested with a page size large enough to never paginate,
    so a continuation link means the data is incomplete.
    """

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Only got a partial result while downloading {url}. "
            "Bailing out so you do not proceed with missing data!"
        )


class ResponseFormatError(APIError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Unexpected response from {url}: {reason}")


class SizeMismatchError(CanvasSyncError):
    """Raised when a download does not have the size Canvas declared for it."""

    def __init__(self, path: str, expected: int, actual: int):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Download size of {actual} did not match expected size of {expected} for {path}"
        )


class FileOperationError(CanvasSyncError):
    """Raised when file operations fail."""

    def __init__(self, operation: str, path: str, cause: Exception = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        message = f"Failed to {operation}: {path}"
        if cause:
            message += f" ({cause})"
        super().__init__(message)
