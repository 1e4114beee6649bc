import io

import pytest

from fakes3.errors import ErrorCode, S3Error
from fakes3.util import parse_clamped_int, read_all


@pytest.mark.parametrize(
    "value,dflt,lo,hi,out",
    [
        ("", 1, 0, 1, 1),
        ("", 2, 0, 1, 1),
        ("1", 2, 0, 100, 1),
        ("1", 0, 2, 100, 2),
        ("1000", 0, 2, 100, 100),
    ],
)
def test_parse_clamped_int_valid(value, dflt, lo, hi, out):
    assert parse_clamped_int(value, dflt, lo, hi) == out


@pytest.mark.parametrize("value", ["abc", "1.5", " 1", "1_0"])
def test_parse_clamped_int_invalid(value):
    with pytest.raises(S3Error) as info:
        parse_clamped_int(value, 1, 0, 10)
    assert info.value.code is ErrorCode.INVALID_ARGUMENT


def test_read_all_simple():
    assert read_all(io.BytesIO(b"test"), 4) == b"test"


def test_read_all_empty():
    assert read_all(io.BytesIO(b""), 0) == b""


def test_read_all_size_too_large():
    with pytest.raises(S3Error) as info:
        read_all(io.BytesIO(b"test"), 5)
    assert info.value.code is ErrorCode.INCOMPLETE_BODY


def test_read_all_size_too_small():
    with pytest.raises(S3Error) as info:
        read_all(io.BytesIO(b"test"), 3)
    assert info.value.code is ErrorCode.INCOMPLETE_BODY


def test_read_all_nothing_available():
    with pytest.raises(EOFError):
        read_all(io.BytesIO(b""), 3)