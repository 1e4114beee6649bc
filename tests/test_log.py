import io
import logging

import pytest

from fakes3.log import DiscardLog, LogLevel, MultiLog, StdLog, global_log


def test_std_log():
    buf = io.StringIO()
    log = StdLog(buf)
    log.print(LogLevel.ERR, "yep1", 1)
    log.print(LogLevel.ERR, "yep2", 2)
    assert buf.getvalue() == "ERR yep1 1\nERR yep2 2\n"


def test_std_log_levels():
    buf = io.StringIO()
    log = StdLog(buf, LogLevel.ERR)
    log.print(LogLevel.ERR, "yep1", 1)
    log.print(LogLevel.WARN, "yep2", 2)
    log.print(LogLevel.INFO, "yep3", 3)
    assert buf.getvalue() == "ERR yep1 1\n"


def test_std_log_callable_output():
    lines = []
    log = StdLog(lines.append)
    log.print(LogLevel.WARN, "a", "b")
    assert lines == ["WARN a b"]


def test_std_log_rejects_bad_output():
    with pytest.raises(TypeError):
        StdLog(42)


def test_discard_log_in_multi_log():
    buf = io.StringIO()
    multi = MultiLog(DiscardLog(), StdLog(buf))
    multi.print(LogLevel.ERR, "yep1", 1)
    multi.print(LogLevel.WARN, "yep2", 2)
    multi.print(LogLevel.INFO, "yep3", 3)
    assert buf.getvalue() == "ERR yep1 1\nWARN yep2 2\nINFO yep3 3\n"


def test_multi_log_fans_out():
    first, second = io.StringIO(), io.StringIO()
    MultiLog(StdLog(first), StdLog(second, LogLevel.INFO)).print(LogLevel.ERR, "x")
    assert first.getvalue() == "ERR x\n"
    assert second.getvalue() == ""


def test_global_log_filters(caplog):
    caplog.set_level(logging.DEBUG, logger="fakes3")
    log = global_log(LogLevel.WARN)
    log.print(LogLevel.INFO, "hidden")
    log.print(LogLevel.WARN, "shown", 1)
    messages = [r.getMessage() for r in caplog.records if r.name == "fakes3"]
    assert messages == ["WARN shown 1"]