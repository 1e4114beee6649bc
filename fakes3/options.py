"""Server configuration options."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable

from .log import DiscardLog, Logger, global_log
from .timesource import DefaultTimeSource, TimeSource

DEFAULT_SKEW_LIMIT = timedelta(minutes=15)
DEFAULT_METADATA_SIZE_LIMIT = 2000


@dataclass
class Options:
    """Settings for the fake S3 server.

    A zero ``time_skew`` or ``metadata_size_limit`` disables that check.
    """

    time_source: TimeSource = field(default_factory=DefaultTimeSource)
    time_skew: timedelta = DEFAULT_SKEW_LIMIT
    metadata_size_limit: int = DEFAULT_METADATA_SIZE_LIMIT
    integrity_check: bool = True
    log: Logger = field(default_factory=DiscardLog)
    request_id: int = 0
    host_bucket: bool = False
    host_bucket_bases: tuple[str, ...] = ()
    versioning: bool = True
    fail_on_unimplemented_page: bool = False
    auto_bucket: bool = False


Option = Callable[[Options], None]


def build_options(*options: Option) -> Options:
    """Start from the defaults and apply ``options`` in order."""
    result = Options()
    for option in options:
        option(result)
    return result


def with_time_source(time_source: TimeSource) -> Option:
    """Substitute the source of the current time, e.g. to make output deterministic."""

    def apply(opts: Options) -> None:
        opts.time_source = time_source

    return apply


def with_time_skew_limit(skew: timedelta) -> Option:
    """Set the allowed skew between client and server clocks; zero disables the check."""

    def apply(opts: Options) -> None:
        opts.time_skew = skew

    return apply


def with_metadata_size_limit(size: int) -> Option:
    """Set the maximum metadata size; zero disables the check."""

    def apply(opts: Options) -> None:
        opts.metadata_size_limit = size

    return apply


def with_integrity_check(check: bool) -> Option:
    """Enable or disable Content-MD5 validation when putting an object."""

    def apply(opts: Options) -> None:
        opts.integrity_check = check

    return apply


def with_logger(logger: Logger | None) -> Option:
    """Use ``logger`` for debugging and tracing; None discards all messages."""

    def apply(opts: Options) -> None:
        opts.log = logger if logger is not None else DiscardLog()

    return apply


def with_global_log() -> Option:
    """Log through the standard ``logging`` module."""
    return with_logger(global_log())


def with_request_id(request_id: int) -> Option:
    """Set the starting ID used for the x-amz-request-id header."""
    if request_id < 0:
        raise ValueError("request id must not be negative")

    def apply(opts: Options) -> None:
        opts.request_id = request_id

    return apply


def with_host_bucket(enabled: bool) -> Option:
    """Route 'mybucket.host/object' as if the path were '/mybucket/object', for any host."""

    def apply(opts: Options) -> None:
        opts.host_bucket = enabled

    return apply


def with_host_bucket_base(*hosts: str) -> Option:
    """Rewrite host buckets only for subdomains of ``hosts``, tested in order."""

    def apply(opts: Options) -> None:
        opts.host_bucket_bases = tuple(hosts)

    return apply


def without_versioning() -> Option:
    """Disable versioning even if the backend supports it."""

    def apply(opts: Options) -> None:
        opts.versioning = False

    return apply


def with_unimplemented_page_error() -> Option:
    """Fail, instead of retrying without a page, when the backend cannot page."""

    def apply(opts: Options) -> None:
        opts.fail_on_unimplemented_page = True

    return apply


def with_auto_bucket(enabled: bool) -> Option:
    """Create missing buckets on first use instead of reporting NoSuchBucket."""

    def apply(opts: Options) -> None:
        opts.auto_bucket = enabled

    return apply