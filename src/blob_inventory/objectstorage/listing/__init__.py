"""Paginated listing: decoding, retries and the per-target driver."""

from .decoder import decode_listing
from .fetcher import PageClient, RetryingFetcher
from .pagination import DriverState, PaginationDriver

__all__ = [
    "DriverState",
    "PageClient",
    "PaginationDriver",
    "RetryingFetcher",
    "decode_listing",
]
