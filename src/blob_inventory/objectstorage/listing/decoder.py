"""Streaming decoder for List Blobs response bodies.

The body is an ``EnumerationResults`` document::

    <EnumerationResults ContainerName="...">
      <Blobs>
        <Blob>
          <Name>path/to/blob</Name>
          <Properties>
            <Creation-Time>...</Creation-Time>
            <Last-Modified>...</Last-Modified>
            <Content-Length>...</Content-Length>
            ...
          </Properties>
        </Blob>
      </Blobs>
      <NextMarker>...</NextMarker>
    </EnumerationResults>

or an ``Error`` document carrying ``Code`` and ``Message``. The decoder feeds
the body to an incremental pull parser in chunks and converts each ``Blob``
element as soon as it closes, clearing it afterwards so large pages never hold
two copies of the object graph.
"""

from typing import Optional, Union
from xml.etree import ElementTree

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import DecodeError
from blob_inventory.schemas import (
    ListingPage,
    ObjectProperties,
    ObjectRecord,
    ServiceError,
)

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024

RESULTS_TAG = "EnumerationResults"
ERROR_TAG = "Error"
BLOB_TAG = "Blob"
NEXT_MARKER_TAG = "NextMarker"

# Response property element -> ObjectProperties field
PROPERTY_FIELDS = {
    "Creation-Time": "creation_time",
    "Last-Modified": "last_modified",
    "Content-Length": "content_length",
    "Content-Type": "content_type",
    "Content-MD5": "content_md5",
    "BlobType": "blob_type",
    "AccessTier": "access_tier",
    "ResourceType": "resource_type",
}


def decode_listing(body: Union[bytes, str]) -> ListingPage:
    """Decode one listing response body into a ListingPage.

    Args:
        body: Complete response body

    Returns:
        ListingPage holding either the page's records and continuation marker,
        or the service error the body reported

    Raises:
        DecodeError: If the body is not a well-formed listing or error document
    """
    data = body.encode("utf-8") if isinstance(body, str) else body
    parser = ElementTree.XMLPullParser(events=("start", "end"))

    records: list[ObjectRecord] = []
    next_marker: Optional[str] = None
    root_seen = False

    try:
        for start in range(0, len(data), CHUNK_SIZE):
            parser.feed(data[start : start + CHUNK_SIZE])
            for event, elem in parser.read_events():
                if event == "start":
                    if not root_seen:
                        root_seen = True
                        if elem.tag not in (RESULTS_TAG, ERROR_TAG):
                            raise DecodeError(
                                f"Unexpected root element <{elem.tag}>"
                            )
                    continue

                if elem.tag == ERROR_TAG:
                    error = _decode_error(elem)
                    logger.debug("Service error decoded", code=error.code)
                    return ListingPage(error=error)
                if elem.tag == BLOB_TAG:
                    records.append(_decode_blob(elem))
                    elem.clear()
                elif elem.tag == NEXT_MARKER_TAG:
                    next_marker = (elem.text or "").strip() or None
        parser.close()
    except ElementTree.ParseError as e:
        offset = _byte_offset(data, e.position)
        raise DecodeError(f"Malformed listing response: {e}", offset=offset) from e

    return ListingPage(records=tuple(records), next_marker=next_marker)


def _decode_blob(elem: ElementTree.Element) -> ObjectRecord:
    name = elem.findtext("Name")
    if not name:
        raise DecodeError("Blob element without a Name")

    values = {}
    props = elem.find("Properties")
    if props is not None:
        for child in props:
            field_name = PROPERTY_FIELDS.get(child.tag)
            # Unknown properties are ignored; empty ones keep their default
            if field_name and child.text:
                values[field_name] = child.text

    return ObjectRecord(name=name, properties=ObjectProperties(**values))


def _decode_error(elem: ElementTree.Element) -> ServiceError:
    return ServiceError(
        code=(elem.findtext("Code") or "").strip(),
        message=(elem.findtext("Message") or "").strip(),
    )


def _byte_offset(data: bytes, position: tuple[int, int]) -> int:
    """Translate an expat (line, column) position into a byte offset.

    Expat counts columns in characters, so the prefix of the failing line is
    decoded to find how many bytes those characters occupy.
    """
    line, column = position
    offset = 0
    for current, text in enumerate(data.split(b"\n"), start=1):
        if current == line:
            prefix = text.decode("utf-8", errors="replace")[:column]
            offset += len(prefix.encode("utf-8"))
            break
        offset += len(text) + 1
    return min(offset, len(data))
