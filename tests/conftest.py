"""Test configuration and fixtures for blob-inventory."""

from typing import Optional, Union

import pytest

from blob_inventory.core.exceptions import SinkWriteError
from blob_inventory.listing_config import RetryPolicy
from blob_inventory.objectstorage.clients.listing_client import RawResponse
from blob_inventory.schemas import ObjectRecord, Target


def blob_xml(name: str, access_tier: Optional[str] = "Hot", **extra: str) -> str:
    """Render one <Blob> element the way the service does."""
    props = {
        "Creation-Time": "Mon, 01 Jan 2024 00:00:00 GMT",
        "Last-Modified": "Tue, 02 Jan 2024 00:00:00 GMT",
        "Content-Length": "42",
        "Content-Type": "text/plain",
        "Content-MD5": "1B2M2Y8AsgTpgAmY7PhCfg==",
        "BlobType": "BlockBlob",
    }
    if access_tier is not None:
        props["AccessTier"] = access_tier
    props.update(extra)
    inner = "".join(f"<{tag}>{value}</{tag}>" for tag, value in props.items())
    return f"<Blob><Name>{name}</Name><Properties>{inner}</Properties></Blob>"


def listing_xml(names: list[str], next_marker: Optional[str] = None) -> bytes:
    """Render a complete EnumerationResults document."""
    blobs = "".join(blob_xml(name) for name in names)
    marker = "<NextMarker />"
    if next_marker:
        marker = f"<NextMarker>{next_marker}</NextMarker>"
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<EnumerationResults ServiceEndpoint="https://acct.blob.core.windows.net/" '
        'ContainerName="cont">'
        f"<Blobs>{blobs}</Blobs>{marker}"
        "</EnumerationResults>"
    ).encode("utf-8")


def error_xml(code: str = "ServerBusy", message: str = "Try again later.") -> bytes:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f"<Error><Code>{code}</Code><Message>{message}</Message></Error>"
    ).encode("utf-8")


class ScriptedClient:
    """Page client replaying a fixed script of responses and transport errors."""

    def __init__(self, script: list[Union[RawResponse, Exception]]):
        self.script = list(script)
        self.calls: list[tuple[Target, str, Optional[str]]] = []

    @property
    def markers(self) -> list[Optional[str]]:
        return [marker for _, _, marker in self.calls]

    async def fetch(
        self, target: Target, token: str, marker: Optional[str] = None
    ) -> RawResponse:
        self.calls.append((target, token, marker))
        if not self.script:
            raise AssertionError("Client called more times than scripted")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class MemorySink:
    """Sink keeping records in memory, optionally failing on the Nth write."""

    def __init__(self, fail_on_write: Optional[int] = None):
        self.records: list[ObjectRecord] = []
        self.opened = False
        self.closed = False
        self.fail_on_write = fail_on_write

    def open(self) -> None:
        self.opened = True

    def write(self, record: ObjectRecord) -> None:
        if self.fail_on_write and len(self.records) + 1 >= self.fail_on_write:
            raise SinkWriteError("disk full")
        self.records.append(record)

    def close(self) -> None:
        self.closed = True


def ok(body: bytes) -> RawResponse:
    return RawResponse(status=200, body=body, reason="OK")


@pytest.fixture
def target():
    return Target(account="acct1", container="cont1")


@pytest.fixture
def no_wait_policy():
    """Default retry budgets without backoff delays."""
    return RetryPolicy(transport_backoff=0, service_backoff=0)


@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def temp_dir(tmp_path):
    """Create a temporary directory for testing."""
    return tmp_path
