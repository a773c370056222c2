"""High-level inventory runs wiring client, drivers, sinks and scheduler."""

import asyncio
from typing import Callable, Iterable, Optional

import aiohttp

from blob_inventory.core import get_logger, settings
from blob_inventory.listing_config import ListingConfig
from blob_inventory.objectstorage import (
    CsvSinkFactory,
    ListingClient,
    PaginationDriver,
    ResultSink,
    RetryingFetcher,
)
from blob_inventory.scheduler import ConcurrencyScheduler
from blob_inventory.schemas import RunSummary, Target, TargetResult
from blob_inventory.targets import TargetStream

logger = get_logger(__name__)

SinkFactory = Callable[[Target], ResultSink]


async def inventory_containers(
    targets: Iterable[Target],
    token: str,
    prefix: str = "",
    max_in_flight: int = 1,
    config: Optional[ListingConfig] = None,
    sink_factory: Optional[SinkFactory] = None,
) -> list[TargetResult]:
    """
    List every blob of every target into one sink per target.

    Args:
        targets: Targets to enumerate; consumed lazily
        token: Bearer token for the listing endpoint
        prefix: Path prefix of the per-target CSV files
        max_in_flight: Maximum number of targets listed concurrently
        config: Listing configuration (defaults to the environment settings)
        sink_factory: Creates the sink of a target (defaults to CSV files)

    Returns:
        One TargetResult per target, in completion order
    """
    config = config or ListingConfig.from_settings(settings)
    sink_factory = sink_factory or CsvSinkFactory(prefix)
    logger.info(
        "Starting inventory",
        max_in_flight=max_in_flight,
        prefix=prefix,
        endpoint=config.endpoint_url or config.service_host,
    )

    async with aiohttp.ClientSession() as session:
        client = ListingClient(session, config)

        async def run_target(target: Target) -> TargetResult:
            fetcher = RetryingFetcher(client, token, config.retry)
            driver = PaginationDriver(target, fetcher, sink_factory(target))
            return await driver.run()

        scheduler = ConcurrencyScheduler(run_target, max_in_flight=max_in_flight)
        return await scheduler.run(targets)


def run_inventory(
    targets: Iterable[Target],
    token: str,
    prefix: str = "",
    max_in_flight: int = 1,
    config: Optional[ListingConfig] = None,
) -> RunSummary:
    """Synchronous entry point around inventory_containers."""
    results = asyncio.run(
        inventory_containers(
            targets,
            token,
            prefix=prefix,
            max_in_flight=max_in_flight,
            config=config,
        )
    )
    invalid_lines = targets.invalid_lines if isinstance(targets, TargetStream) else []
    return RunSummary(results=tuple(results), invalid_lines=tuple(invalid_lines))
