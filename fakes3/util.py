"""Small parsing and reading helpers."""

from __future__ import annotations

import re
from typing import BinaryIO

from .errors import ErrorCode, S3Error

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_clamped_int(value: str, default: int, minimum: int, maximum: int) -> int:
    """Parse ``value`` (or use ``default`` when empty) and clamp it to the bounds."""
    if value == "":
        number = default
    else:
        if not _INT_PATTERN.fullmatch(value):
            raise S3Error(ErrorCode.INVALID_ARGUMENT)
        number = int(value)
        if not _INT64_MIN <= number <= _INT64_MAX:
            raise S3Error(ErrorCode.INVALID_ARGUMENT)

    if number < minimum:
        return minimum
    if number > maximum:
        return maximum
    return number


def read_all(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``stream`` and require it to end there.

    Raises IncompleteBody when the stream is shorter or longer than ``size``,
    and EOFError when a non-empty read finds the stream already exhausted.
    """
    if size < 0:
        raise ValueError("size must not be negative")

    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)

    data = b"".join(chunks)
    if len(data) != size:
        if not data:
            raise EOFError("stream ended before any data was read")
        raise S3Error(ErrorCode.INCOMPLETE_BODY)

    if stream.read():
        raise S3Error(ErrorCode.INCOMPLETE_BODY)
    return data