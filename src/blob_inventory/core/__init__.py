"""Core utilities and shared components for blob-inventory."""

from .config import settings
from .exceptions import BlobInventoryError, ValidationError
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "BlobInventoryError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
