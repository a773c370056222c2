"""Concurrent blob inventories of Azure Blob Storage containers.

This package enumerates every blob of one or more containers through the
paginated List Blobs REST endpoint, decoding each XML page incrementally and
writing one CSV file per container. Many containers are listed concurrently
under a bounded budget, with transport failures and service-reported errors
retried under separate per-container budgets.

Key Features:
    - Streaming decoding of listing pages
    - Bounded concurrency across containers
    - Independent transport and service-error retry budgets
    - Structured per-container results
    - CLI interface

Recommended Usage:
    >>> from blob_inventory import Target, run_inventory
    >>> summary = run_inventory(
    ...     [Target(account="myaccount", container="images")],
    ...     token="<bearer token>",
    ...     prefix="out/",
    ... )
    >>> summary.total_records
"""

__version__ = "0.1.0"

from .inventory import inventory_containers, run_inventory
from .listing_config import ListingConfig, RetryPolicy
from .objectstorage import (
    CsvSinkFactory,
    ListingClient,
    PaginationDriver,
    RetryingFetcher,
    acquire_token,
    decode_listing,
)
from .scheduler import ConcurrencyScheduler
from .schemas import (
    ListingPage,
    ObjectProperties,
    ObjectRecord,
    RunSummary,
    ServiceError,
    Target,
    TargetResult,
    TargetState,
)
from .targets import TargetStream

__all__ = [
    # Data model
    "ListingPage",
    "ObjectProperties",
    "ObjectRecord",
    "RunSummary",
    "ServiceError",
    "Target",
    "TargetResult",
    "TargetState",
    # Configuration
    "ListingConfig",
    "RetryPolicy",
    # Core components
    "ConcurrencyScheduler",
    "CsvSinkFactory",
    "ListingClient",
    "PaginationDriver",
    "RetryingFetcher",
    "TargetStream",
    "acquire_token",
    "decode_listing",
    # Runs
    "inventory_containers",
    "run_inventory",
]
