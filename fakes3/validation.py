"""Validation of bucket names and ETags."""

from __future__ import annotations

import ipaddress
import re

from .errors import ErrorCode, error_message

# Matches both whole bucket names and their individual period-separated labels.
_BUCKET_NAME_PATTERN = re.compile(r"[a-z0-9]([a-z0-9.-]+)[a-z0-9]")
_ETAG_PATTERN = re.compile(r'"[a-z0-9]+"')


def _is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def validate_bucket_name(name: str) -> str:
    """Return ``name`` if it follows the S3 bucket naming rules, else raise InvalidBucketName."""
    if not 3 <= len(name.encode("utf-8")) <= 63:
        raise error_message(
            ErrorCode.INVALID_BUCKET_NAME,
            "bucket name must be >= 3 characters and <= 63",
        )
    if not _BUCKET_NAME_PATTERN.fullmatch(name):
        raise error_message(
            ErrorCode.INVALID_BUCKET_NAME,
            "bucket must start and end with 'a-z, 0-9', and contain only 'a-z, 0-9, -' in between",
        )
    if _is_ip_address(name):
        raise error_message(
            ErrorCode.INVALID_BUCKET_NAME,
            "bucket names must not be formatted as an IP address",
        )
    if not all(_BUCKET_NAME_PATTERN.fullmatch(label) for label in name.split(".")):
        raise error_message(
            ErrorCode.INVALID_BUCKET_NAME,
            "label must start and end with 'a-z, 0-9', and contain only 'a-z, 0-9, -' in between",
        )
    return name


def valid_etag(value: str) -> bool:
    """Report whether ``value`` is a quoted lower-case alphanumeric ETag."""
    return _ETAG_PATTERN.fullmatch(value) is not None