"""Blob listing against Azure Blob Storage."""

from .clients import BearerToken, ListingClient, RawResponse, acquire_token
from .listing import (
    DriverState,
    PaginationDriver,
    RetryingFetcher,
    decode_listing,
)
from .sinks import CSV_COLUMNS, CsvResultSink, CsvSinkFactory, ResultSink

__all__ = [
    "BearerToken",
    "CSV_COLUMNS",
    "CsvResultSink",
    "CsvSinkFactory",
    "DriverState",
    "ListingClient",
    "PaginationDriver",
    "RawResponse",
    "ResultSink",
    "RetryingFetcher",
    "acquire_token",
    "decode_listing",
]
