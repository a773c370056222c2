"""Target sources: direct options or newline-delimited JSON records."""

from typing import Iterable, Iterator

import pydantic

from blob_inventory.core import get_logger
from blob_inventory.schemas import InvalidTargetLine, Target

logger = get_logger(__name__)


class TargetStream:
    """Lazily decodes JSON lines such as ``{"account": "acct", "container": "c"}``.

    Blank lines are ignored. Lines that do not decode to a target are logged,
    collected in ``invalid_lines`` and skipped; the stream carries on.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = lines
        self.invalid_lines: list[InvalidTargetLine] = []

    def __iter__(self) -> Iterator[Target]:
        for line_number, line in enumerate(self._lines, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                yield Target.model_validate_json(text)
            except pydantic.ValidationError as e:
                reason = "; ".join(err["msg"] for err in e.errors())
                logger.warning(
                    "Skipping invalid target line",
                    line_number=line_number,
                    reason=reason,
                )
                self.invalid_lines.append(
                    InvalidTargetLine(line_number=line_number, line=text, reason=reason)
                )
