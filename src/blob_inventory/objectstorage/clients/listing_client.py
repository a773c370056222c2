"""HTTP client for the paginated List Blobs endpoint.

The ListingClient issues exactly one request per call and never retries; the
retry policy lives in ``RetryingFetcher``. Any HTTP response the transport
completed is returned to the caller (error bodies included, since the service
reports failures such as throttling inside the body). Connection failures and
timeouts surface as ``TransportError``.

Endpoint styles:
    1. Account host (default): https://<account>.<service_host>/<container>
    2. Custom endpoint (endpoint_url): <endpoint_url>/<account>/<container>,
       the path-style layout used by storage emulators such as Azurite
"""

import asyncio
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode

import aiohttp

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import TransportError
from blob_inventory.listing_config import ListingConfig
from blob_inventory.schemas import Target

logger = get_logger(__name__)

VERSION_HEADER = "x-ms-version"


@dataclass(frozen=True)
class RawResponse:
    """A completed HTTP response."""

    status: int
    body: bytes
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def build_listing_url(
    target: Target, marker: Optional[str], config: ListingConfig
) -> str:
    """Build the listing URL for one page of a target.

    Args:
        target: Account and container to list
        marker: Continuation marker from the previous page, or None for the first
        config: Listing endpoint configuration

    Returns:
        Fully encoded request URL
    """
    container = quote(target.container, safe="")
    if config.endpoint_url:
        base = (
            f"{config.endpoint_url.rstrip('/')}/{quote(target.account, safe='')}"
            f"/{container}"
        )
    else:
        base = f"https://{target.account}.{config.service_host}/{container}"

    params = [("restype", "container"), ("comp", "list")]
    if marker is not None:
        params.append(("marker", marker))
    if config.max_results is not None:
        params.append(("maxresults", str(config.max_results)))

    return f"{base}?{urlencode(params, quote_via=quote)}"


class ListingClient:
    """Issues single List Blobs requests over a shared aiohttp session."""

    def __init__(self, session: aiohttp.ClientSession, config: ListingConfig):
        """Initialize the listing client.

        Args:
            session: Shared HTTP session, owned by the caller
            config: Listing endpoint configuration
        """
        self.session = session
        self.config = config
        self._timeout = aiohttp.ClientTimeout(total=config.timeout)

    async def fetch(
        self, target: Target, token: str, marker: Optional[str] = None
    ) -> RawResponse:
        """Fetch one listing page.

        Raises:
            TransportError: If the request could not be completed
        """
        url = build_listing_url(target, marker, self.config)
        headers = {
            "Authorization": f"Bearer {token}",
            VERSION_HEADER: self.config.api_version,
        }

        try:
            async with self.session.get(
                url, headers=headers, timeout=self._timeout
            ) as response:
                body = await response.read()
                logger.debug(
                    "Listing page received",
                    account=target.account,
                    container=target.container,
                    status=response.status,
                    size=len(body),
                )
                return RawResponse(
                    status=response.status, body=body, reason=response.reason or ""
                )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Listing request timed out after {self.config.timeout}s for {target}"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Listing request failed for {target}: {e}") from e
