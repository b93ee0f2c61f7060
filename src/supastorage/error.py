"""
Exception classes for the storage SDK
"""

from typing import Any, Optional


class StorageException(Exception):
    """
    Base exception for all storage SDK errors.
    """

    def __init__(self, message: str, status_code: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code

    @property
    def status(self) -> Optional[int]:
        """Numeric form of ``status_code``, ``None`` when absent or not a number."""
        if self.status_code is None:
            return None
        try:
            return int(self.status_code)
        except (TypeError, ValueError):
            return None


class StorageTransportException(StorageException):
    """Thrown when a request cannot be built or the network call fails."""

    def __init__(self, method: str, url: str, reason: str):
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url
        self.reason = reason


class StorageTimeoutException(StorageTransportException):
    """Thrown when a request exceeds its timeout."""


class StorageDecodeException(StorageException):
    """Thrown when a response body does not match the expected JSON shape."""

    def __init__(self, message: str, http_status: Optional[int] = None, body: Any = None):
        super().__init__(message, str(http_status) if http_status is not None else None)
        self.body = body


class StorageApiException(StorageException):
    """
    Thrown when the service answers with a failure status.

    ``status_code`` keeps the service's wire value, which is a string.
    """

    def __init__(self, status_code: str, error: str, message: str, http_status: Optional[int] = None):
        super().__init__(f"{error}: {message}", status_code=status_code, error_code=error)
        self.error = error
        self.message = message
        self.http_status = http_status

    def to_dict(self) -> dict:
        return {"statusCode": self.status_code, "error": self.error, "message": self.message}


class NotFoundException(StorageApiException):
    """Thrown when the service reports status 404."""


class BucketNotFoundException(NotFoundException):
    """Thrown when a bucket is not found."""


class ObjectNotFoundException(NotFoundException):
    """Thrown when an object is not found."""
