import logging
from datetime import datetime, timedelta, timezone

import pytest

from fakes3.log import DiscardLog, LogLevel, StdLog
from fakes3.options import (
    build_options,
    with_auto_bucket,
    with_global_log,
    with_host_bucket,
    with_host_bucket_base,
    with_integrity_check,
    with_logger,
    with_metadata_size_limit,
    with_request_id,
    with_time_skew_limit,
    with_time_source,
    with_unimplemented_page_error,
    without_versioning,
)
from fakes3.timesource import FixedTimeSource


def test_defaults_leave_features_off():
    opts = build_options()
    assert opts.host_bucket is False
    assert opts.host_bucket_bases == ()
    assert opts.auto_bucket is False
    assert opts.fail_on_unimplemented_page is False
    assert opts.versioning is True
    assert opts.request_id == 0


def test_time_source_is_used():
    at = datetime(2018, 1, 1, 12, 0, tzinfo=timezone.utc)
    opts = build_options(with_time_source(FixedTimeSource(at)))
    assert opts.time_source.now() == at


def test_skew_and_metadata_limits_can_be_disabled():
    opts = build_options(with_time_skew_limit(timedelta(0)), with_metadata_size_limit(0))
    assert opts.time_skew == timedelta(0)
    assert opts.metadata_size_limit == 0


def test_later_options_override_earlier_ones():
    opts = build_options(with_integrity_check(False), with_integrity_check(True))
    assert opts.integrity_check is True
    opts = build_options(with_auto_bucket(True), with_auto_bucket(False))
    assert opts.auto_bucket is False


def test_host_bucket_settings():
    opts = build_options(with_host_bucket(True), with_host_bucket_base("localhost", "example.com"))
    assert opts.host_bucket is True
    assert opts.host_bucket_bases == ("localhost", "example.com")


def test_flags():
    opts = build_options(without_versioning(), with_unimplemented_page_error())
    assert opts.versioning is False
    assert opts.fail_on_unimplemented_page is True


def test_request_id():
    assert build_options(with_request_id(42)).request_id == 42
    with pytest.raises(ValueError):
        with_request_id(-1)


def test_logger_is_installed():
    lines = []
    opts = build_options(with_logger(StdLog(lines.append)))
    opts.log.print(LogLevel.ERR, "yep1", 1)
    assert lines == ["ERR yep1 1"]


def test_none_logger_discards():
    opts = build_options(with_logger(None))
    assert isinstance(opts.log, DiscardLog)
    assert opts.log.print(LogLevel.ERR, "x") is None


def test_global_log_uses_logging(caplog):
    opts = build_options(with_global_log())
    with caplog.at_level(logging.DEBUG, logger="fakes3"):
        opts.log.print(LogLevel.WARN, "hello")
    assert "WARN hello" in caplog.messages