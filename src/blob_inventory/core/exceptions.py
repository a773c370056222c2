"""Exception hierarchy for blob-inventory."""

from typing import Optional


class BlobInventoryError(Exception):
    """Base exception for all blob-inventory errors."""

    code = "BlobInventoryError"


class ValidationError(BlobInventoryError):
    """Raised when target or option validation fails."""

    code = "ValidationError"


class AuthenticationError(BlobInventoryError):
    """Raised when a bearer token cannot be acquired."""

    code = "AuthenticationError"


class TransportError(BlobInventoryError):
    """Raised when an HTTP request could not be completed (connection, timeout)."""

    code = "TransportError"


class TransportRetriesExhausted(BlobInventoryError):
    """Raised when a target used up its transport retry budget."""

    code = "TransportRetriesExhausted"


class ServiceRetriesExhausted(BlobInventoryError):
    """Raised when a target used up its service-error retry budget."""

    code = "ServiceRetriesExhausted"

    def __init__(self, message: str, service_code: Optional[str] = None):
        super().__init__(message)
        self.service_code = service_code


class DecodeError(BlobInventoryError):
    """Raised when a listing response body is not a well-formed document."""

    code = "DecodeError"

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte offset {offset})"
        super().__init__(message)
        self.offset = offset


class SinkWriteError(BlobInventoryError):
    """Raised when a record cannot be written to its output sink."""

    code = "SinkWriteError"
