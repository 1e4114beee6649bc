"""Byte ranges for object reads."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ErrorCode, S3Error, error_message

RANGE_NO_END = -1

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ObjectRange:
    """A resolved range within an object of known size."""

    start: int
    length: int

    def headers(self, size: int) -> dict[str, str]:
        """Response headers describing this range of an object of ``size`` bytes."""
        end = self.start + self.length - 1
        return {
            "Content-Range": f"bytes {self.start}-{end}/{size}",
            "Content-Length": str(self.length),
        }


def range_headers(rng: ObjectRange | None, size: int) -> dict[str, str]:
    """Response headers for an optional range of an object of ``size`` bytes."""
    if rng is None:
        return {"Content-Length": str(size)}
    return rng.headers(size)


@dataclass(frozen=True)
class ObjectRangeRequest:
    """A requested range, not yet resolved against an object size."""

    start: int = 0
    end: int = 0
    from_end: bool = False

    def range(self, size: int) -> ObjectRange:
        """Resolve against ``size``; raises InvalidRange when unsatisfiable."""
        if not self.from_end:
            start = self.start
            if self.end == RANGE_NO_END:
                length = size - start
            else:
                length = self.end - start + 1
        else:
            start = size - self.end
            length = size - start

        if start < 0 or length < 0 or start >= size:
            raise S3Error(ErrorCode.INVALID_RANGE)

        if start + length > size:
            return ObjectRange(start, size - start)
        return ObjectRange(start, length)


def _parse_int64(value: str) -> int:
    if not _INT_PATTERN.fullmatch(value):
        raise ValueError(value)
    number = int(value)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(value)
    return number


def parse_range_header(value: str) -> ObjectRangeRequest | None:
    """Parse a single byte range from a Range header; None when empty."""
    if value == "":
        return None

    prefix = "bytes="
    if not value.startswith(prefix):
        raise S3Error(ErrorCode.INVALID_RANGE)

    ranges = value[len(prefix):].split(",")
    if len(ranges) > 1:
        raise error_message(ErrorCode.NOT_IMPLEMENTED, "multiple ranges not supported")

    spec = ranges[0].strip()
    if not spec or "-" not in spec:
        raise S3Error(ErrorCode.INVALID_RANGE)

    start_text, _, end_text = spec.partition("-")
    start_text, end_text = start_text.strip(), end_text.strip()

    try:
        if start_text == "":
            return ObjectRangeRequest(end=_parse_int64(end_text), from_end=True)

        start = _parse_int64(start_text)
        if start < 0:
            raise ValueError(start_text)
        if end_text == "":
            return ObjectRangeRequest(start=start, end=RANGE_NO_END)
        end = _parse_int64(end_text)
        if start > end:
            raise ValueError(spec)
        return ObjectRangeRequest(start=start, end=end)
    except ValueError:
        raise S3Error(ErrorCode.INVALID_RANGE) from None