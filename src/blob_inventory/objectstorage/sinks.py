"""Output sinks for enumerated blob records."""

import csv
from typing import IO, Any, Optional, Protocol

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import SinkWriteError
from blob_inventory.schemas import ObjectRecord, Target

logger = get_logger(__name__)

CSV_COLUMNS = (
    "name",
    "creation_time",
    "last_modified",
    "content_length",
    "content_type",
    "content_md5",
    "blob_type",
    "access_tier",
    "resource_type",
)


class ResultSink(Protocol):
    """Protocol for sinks that durably record enumerated blobs."""

    def open(self) -> None:
        """Prepare the sink before the first record."""
        ...

    def write(self, record: ObjectRecord) -> None:
        """Append one record, raising SinkWriteError on failure."""
        ...

    def close(self) -> None:
        """Flush and release the sink."""
        ...


def csv_path(prefix: str, target: Target) -> str:
    """Output path of a target's CSV: ``<prefix><account>-<container>.csv``."""
    return f"{prefix}{target.account}-{target.container}.csv"


def record_row(record: ObjectRecord) -> list[str]:
    """Flatten a record into CSV_COLUMNS order."""
    props = record.properties
    return [
        record.name,
        props.creation_time,
        props.last_modified,
        props.content_length,
        props.content_type,
        props.content_md5,
        props.blob_type,
        props.access_tier,
        props.resource_type,
    ]


class CsvResultSink:
    """Writes one target's records to its own CSV file, header row first.

    Each target owns its file, so concurrent targets never contend for a sink.
    """

    def __init__(self, path: str):
        self.path = path
        self._file: Optional[IO[str]] = None
        self._writer: Any = None

    def open(self) -> None:
        try:
            self._file = open(self.path, "w", newline="", encoding="utf-8")
            self._writer = csv.writer(self._file)
            self._writer.writerow(CSV_COLUMNS)
        except OSError as e:
            raise SinkWriteError(f"Cannot open output file '{self.path}': {e}") from e
        logger.debug("CSV sink opened", path=self.path)

    def write(self, record: ObjectRecord) -> None:
        if self._writer is None:
            raise SinkWriteError(f"Output file '{self.path}' is not open")
        try:
            self._writer.writerow(record_row(record))
        except OSError as e:
            raise SinkWriteError(f"Cannot write to '{self.path}': {e}") from e

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            raise SinkWriteError(f"Cannot close output file '{self.path}': {e}") from e
        finally:
            self._file = None
            self._writer = None


class CsvSinkFactory:
    """Creates a CsvResultSink per target under a common path prefix."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def __call__(self, target: Target) -> CsvResultSink:
        return CsvResultSink(csv_path(self.prefix, target))
