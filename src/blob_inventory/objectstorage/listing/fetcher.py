"""Bounded retry policy around single listing requests."""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import (
    ServiceRetriesExhausted,
    TransportError,
    TransportRetriesExhausted,
)
from blob_inventory.listing_config import RetryPolicy
from blob_inventory.objectstorage.clients.listing_client import RawResponse
from blob_inventory.schemas import ServiceError, Target

logger = get_logger(__name__)


class PageClient(Protocol):
    """Protocol for clients that fetch one raw listing page."""

    async def fetch(
        self, target: Target, token: str, marker: Optional[str] = None
    ) -> RawResponse:
        """Fetch one page, raising TransportError if it could not be completed."""
        ...


class RetryingFetcher:
    """Retries listing requests under two independent per-target budgets.

    Transport failures and service-reported errors are counted separately.
    Both counters accumulate across every page of one target's run, so a
    fetcher instance must not be shared between targets.
    """

    def __init__(
        self,
        client: PageClient,
        token: str,
        policy: RetryPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.token = token
        self.policy = policy
        self._sleep = sleep
        self.transport_failures = 0
        self.service_errors = 0

    async def fetch(self, target: Target, marker: Optional[str]) -> RawResponse:
        """Fetch a page, retrying transport failures with a fixed backoff.

        Raises:
            TransportRetriesExhausted: If the target's transport budget is used up
        """
        while True:
            try:
                return await self.client.fetch(target, self.token, marker)
            except TransportError as e:
                self.transport_failures += 1
                if self.transport_failures > self.policy.max_transport_retries:
                    raise TransportRetriesExhausted(
                        f"Gave up on {target} after "
                        f"{self.transport_failures} transport failures: {e}"
                    ) from e
                logger.warning(
                    "Transport failure, retrying",
                    account=target.account,
                    container=target.container,
                    attempt=self.transport_failures,
                    max_retries=self.policy.max_transport_retries,
                    error=str(e),
                )
                await self._sleep(self.policy.transport_backoff)

    async def service_error(self, target: Target, error: ServiceError) -> None:
        """Account for a service-reported error and wait before the page is retried.

        Raises:
            ServiceRetriesExhausted: If the target's service-error budget is used up
        """
        self.service_errors += 1
        if self.service_errors > self.policy.max_service_retries:
            raise ServiceRetriesExhausted(
                f"Gave up on {target} after {self.service_errors} service errors: "
                f"{error.code}: {error.message}",
                service_code=error.code,
            )
        logger.warning(
            "Service error, retrying page",
            account=target.account,
            container=target.container,
            attempt=self.service_errors,
            max_retries=self.policy.max_service_retries,
            code=error.code,
        )
        await self._sleep(self.policy.service_backoff)
