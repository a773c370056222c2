"""Tests for the List Blobs HTTP client."""

import asyncio

import aiohttp
import pytest

from blob_inventory.core.exceptions import TransportError
from blob_inventory.listing_config import ListingConfig
from blob_inventory.objectstorage.clients.listing_client import (
    ListingClient,
    build_listing_url,
)
from blob_inventory.schemas import Target


class FakeResponse:
    def __init__(self, status: int, body: bytes, reason: str = "OK"):
        self.status = status
        self.reason = reason
        self._body = body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class TestBuildListingUrl:
    """Test deterministic request URLs."""

    def test_first_page(self, target):
        """Test the URL without a continuation marker."""
        url = build_listing_url(target, None, ListingConfig())

        assert url == (
            "https://acct1.blob.core.windows.net/cont1?restype=container&comp=list"
        )

    def test_with_marker(self, target):
        """Test that the marker is appended and percent-encoded."""
        url = build_listing_url(target, "2!88!MDAw/x=", ListingConfig())

        assert url == (
            "https://acct1.blob.core.windows.net/cont1"
            "?restype=container&comp=list&marker=2%2188%21MDAw%2Fx%3D"
        )

    def test_with_max_results(self, target):
        """Test the optional page size."""
        url = build_listing_url(target, None, ListingConfig(max_results=500))

        assert url.endswith("restype=container&comp=list&maxresults=500")

    def test_custom_service_host(self, target):
        """Test a sovereign cloud host."""
        config = ListingConfig(service_host="blob.core.chinacloudapi.cn")

        url = build_listing_url(target, None, config)

        assert url.startswith("https://acct1.blob.core.chinacloudapi.cn/cont1?")

    def test_endpoint_url_is_path_style(self, target):
        """Test that a custom endpoint puts the account in the path."""
        config = ListingConfig(endpoint_url="http://127.0.0.1:10000/")

        url = build_listing_url(target, "m1", config)

        assert url == (
            "http://127.0.0.1:10000/acct1/cont1"
            "?restype=container&comp=list&marker=m1"
        )


@pytest.mark.asyncio
class TestListingClientFetch:
    """Test single listing requests."""

    async def test_fetch_sends_auth_and_version_headers(self, target):
        """Test request headers."""
        session = FakeSession(response=FakeResponse(200, b"<EnumerationResults />"))
        client = ListingClient(session, ListingConfig(api_version="2021-08-06"))

        response = await client.fetch(target, "secret-token", "m1")

        assert response.status == 200
        assert response.body == b"<EnumerationResults />"
        assert response.ok is True
        call = session.calls[0]
        assert call["url"].endswith("&marker=m1")
        assert call["headers"]["Authorization"] == "Bearer secret-token"
        assert call["headers"]["x-ms-version"] == "2021-08-06"
        assert call["timeout"].total == 60.0

    async def test_fetch_returns_error_statuses(self, target):
        """Test that HTTP error statuses are returned, not raised."""
        session = FakeSession(
            response=FakeResponse(503, b"<Error />", reason="Service Unavailable")
        )
        client = ListingClient(session, ListingConfig())

        response = await client.fetch(target, "token")

        assert response.status == 503
        assert response.ok is False
        assert response.reason == "Service Unavailable"

    async def test_connection_error_is_transport_error(self, target):
        """Test that connection failures surface as TransportError."""
        session = FakeSession(error=aiohttp.ClientConnectionError("connection reset"))
        client = ListingClient(session, ListingConfig())

        with pytest.raises(TransportError) as exc_info:
            await client.fetch(target, "token")

        assert "connection reset" in str(exc_info.value)

    async def test_timeout_is_transport_error(self, target):
        """Test that timeouts surface as TransportError."""
        session = FakeSession(error=asyncio.TimeoutError())
        client = ListingClient(session, ListingConfig(timeout=5))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch(target, "token")

        assert "timed out after 5" in str(exc_info.value)


def test_target_names_are_quoted():
    """Test that the container segment is encoded."""
    url = build_listing_url(
        Target(account="acct", container="my container"), None, ListingConfig()
    )

    assert "/my%20container?" in url
