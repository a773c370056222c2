"""Pagination state machine for one (account, container) target."""

from enum import Enum
from typing import Optional

from blob_inventory.core import get_logger, get_tracer
from blob_inventory.core.exceptions import BlobInventoryError, DecodeError
from blob_inventory.objectstorage.clients.listing_client import RawResponse
from blob_inventory.objectstorage.listing.decoder import decode_listing
from blob_inventory.objectstorage.listing.fetcher import RetryingFetcher
from blob_inventory.objectstorage.sinks import ResultSink
from blob_inventory.schemas import (
    ListingPage,
    ServiceError,
    Target,
    TargetError,
    TargetResult,
    TargetState,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class DriverState(str, Enum):
    START = "start"
    FETCHING_PAGE = "fetching_page"
    DECODING = "decoding"
    EMITTING_RECORDS = "emitting_records"
    ERROR_RETRY = "error_retry"
    DONE = "done"
    FATAL = "fatal"


class PaginationDriver:
    """Drives the fetch/decode/emit loop for one target until it terminates.

    The driver follows continuation markers until a page announces no further
    pages. Service errors retry the same page (same marker); every other
    failure ends the run as fatal. ``run`` never raises and reports exactly one
    TargetResult.
    """

    def __init__(self, target: Target, fetcher: RetryingFetcher, sink: ResultSink):
        self.target = target
        self.fetcher = fetcher
        self.sink = sink
        self.state = DriverState.START
        self.record_count = 0
        self.pages = 0
        self._result: Optional[TargetResult] = None

    async def run(self) -> TargetResult:
        """Enumerate the target and report its result."""
        if self._result is not None:
            return self._result

        with tracer.start_as_current_span(
            "list_container",
            attributes={
                "account": self.target.account,
                "container": self.target.container,
            },
        ) as span:
            try:
                await self._paginate()
                self.state = DriverState.DONE
                self._result = self._build_result(TargetState.DONE)
                logger.info(
                    "Container listed",
                    account=self.target.account,
                    container=self.target.container,
                    record_count=self.record_count,
                    pages=self.pages,
                )
            except BlobInventoryError as e:
                self._result = self._fail(e.code, str(e))
            except Exception as e:
                logger.exception(
                    "Unexpected failure while listing container",
                    account=self.target.account,
                    container=self.target.container,
                )
                self._result = self._fail(type(e).__name__, str(e))

            span.set_attribute("state", self._result.state.value)
            span.set_attribute("record_count", self.record_count)
            return self._result

    async def _paginate(self) -> None:
        self.sink.open()
        try:
            marker: Optional[str] = None
            while True:
                self.state = DriverState.FETCHING_PAGE
                response = await self.fetcher.fetch(self.target, marker)

                self.state = DriverState.DECODING
                page = self._decode(response)

                if page.error is not None:
                    self.state = DriverState.ERROR_RETRY
                    await self.fetcher.service_error(self.target, page.error)
                    continue

                self.state = DriverState.EMITTING_RECORDS
                for record in page.records:
                    self.sink.write(record)
                    self.record_count += 1
                self.pages += 1

                logger.debug(
                    "Page emitted",
                    account=self.target.account,
                    container=self.target.container,
                    page=self.pages,
                    page_records=len(page.records),
                    record_count=self.record_count,
                )

                if not page.has_more:
                    return
                marker = page.next_marker
        finally:
            self.sink.close()

    def _decode(self, response: RawResponse) -> ListingPage:
        try:
            return decode_listing(response.body)
        except DecodeError:
            # Non-2xx responses without a parseable error document are service errors
            if not response.ok:
                return ListingPage(
                    error=ServiceError(
                        code=f"HTTP{response.status}",
                        message=response.reason or "Unexpected HTTP status",
                    )
                )
            raise

    def _fail(self, code: str, message: str) -> TargetResult:
        self.state = DriverState.FATAL
        logger.error(
            "Container listing failed",
            account=self.target.account,
            container=self.target.container,
            code=code,
            error=message,
            record_count=self.record_count,
        )
        return self._build_result(
            TargetState.FATAL, TargetError(code=code, message=message)
        )

    def _build_result(
        self, state: TargetState, error: Optional[TargetError] = None
    ) -> TargetResult:
        return TargetResult(
            target=self.target,
            state=state,
            record_count=self.record_count,
            pages=self.pages,
            error=error,
        )
