"""Data models for listing targets and enumerated blobs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Target(BaseModel):
    """One (account, container) enumeration job."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Account names become part of the endpoint host name
    account: str = Field(
        ...,
        pattern=r"^[a-z0-9]{3,24}$",
        description="Storage account name (3-24 lowercase letters and digits)",
    )
    container: str = Field(..., min_length=1, description="Container name")

    def __str__(self) -> str:
        return f"{self.account}/{self.container}"


class ObjectProperties(BaseModel):
    """Blob properties, echoed verbatim from the listing response."""

    model_config = ConfigDict(frozen=True)

    creation_time: str = ""
    last_modified: str = ""
    content_length: str = ""
    content_type: str = ""
    content_md5: str = ""
    blob_type: str = ""
    access_tier: str = "None"
    resource_type: str = ""


class ObjectRecord(BaseModel):
    """One enumerated blob."""

    model_config = ConfigDict(frozen=True)

    name: str
    properties: ObjectProperties = Field(default_factory=ObjectProperties)


class ServiceError(BaseModel):
    """Error reported by the storage service inside a response body."""

    model_config = ConfigDict(frozen=True)

    code: str = ""
    message: str = ""


@dataclass(frozen=True)
class ListingPage:
    """Decoded form of one listing response.

    A page is either a result set (``records`` plus an optional marker) or a
    service error; never both.
    """

    records: tuple[ObjectRecord, ...] = ()
    next_marker: Optional[str] = None
    error: Optional[ServiceError] = None

    @property
    def has_more(self) -> bool:
        """Whether the service announced another page after this one."""
        return self.error is None and self.next_marker is not None


class TargetState(str, Enum):
    """Terminal states of a pagination run."""

    DONE = "done"
    FATAL = "fatal"


@dataclass(frozen=True)
class TargetError:
    """Structured failure of a target run."""

    code: str
    message: str


@dataclass(frozen=True)
class TargetResult:
    """Final outcome of one target's pagination run."""

    target: Target
    state: TargetState
    record_count: int = 0
    pages: int = 0
    error: Optional[TargetError] = None

    @property
    def ok(self) -> bool:
        return self.state is TargetState.DONE


@dataclass(frozen=True)
class InvalidTargetLine:
    """A streamed input line that did not decode to a target."""

    line_number: int
    line: str
    reason: str


@dataclass(frozen=True)
class RunSummary:
    """Aggregated outcome of an inventory run."""

    results: tuple[TargetResult, ...] = ()
    invalid_lines: tuple[InvalidTargetLine, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> tuple[TargetResult, ...]:
        return tuple(r for r in self.results if r.ok)

    @property
    def failed(self) -> tuple[TargetResult, ...]:
        return tuple(r for r in self.results if not r.ok)

    @property
    def total_records(self) -> int:
        return sum(r.record_count for r in self.results)
