"""Listing configuration passed to the core, to reduce parameter explosion."""

from dataclasses import dataclass, field
from typing import Optional

from .core.config import Settings


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budgets and fixed backoff delays, counted per target run."""

    max_transport_retries: int = 5
    transport_backoff: float = 1.0
    max_service_retries: int = 10
    service_backoff: float = 2.0


@dataclass(frozen=True)
class ListingConfig:
    """Listing endpoint configuration."""

    service_host: str = "blob.core.windows.net"
    endpoint_url: Optional[str] = None
    api_version: str = "2020-04-08"
    timeout: float = 60.0
    max_results: Optional[int] = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListingConfig":
        return cls(
            service_host=settings.service_host,
            endpoint_url=settings.endpoint_url,
            api_version=settings.api_version,
            timeout=settings.request_timeout,
            max_results=settings.max_results,
            retry=RetryPolicy(
                max_transport_retries=settings.max_transport_retries,
                transport_backoff=settings.transport_backoff,
                max_service_retries=settings.max_service_retries,
                service_backoff=settings.service_backoff,
            ),
        )
