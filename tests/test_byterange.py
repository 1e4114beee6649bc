import pytest

from fakes3.byterange import (
    RANGE_NO_END,
    ObjectRange,
    ObjectRangeRequest,
    parse_range_header,
    range_headers,
)
from fakes3.errors import ErrorCode, S3Error


@pytest.mark.parametrize(
    "inst,inend,rev,sz,outst,outln",
    [
        (0, RANGE_NO_END, False, 5, 0, 5),
        (0, 5, False, 10, 0, 6),
        (0, 0, False, 4, 0, 1),
        (1, 5, False, 10, 1, 5),
        (1, 5, False, 3, 1, 2),
        (5, 7, False, 6, 5, 1),
        (0, 10, True, 10, 0, 10),
        (0, 5, True, 10, 5, 5),
    ],
)
def test_range_request(inst, inend, rev, sz, outst, outln):
    rng = ObjectRangeRequest(start=inst, end=inend, from_end=rev).range(sz)
    assert rng == ObjectRange(outst, outln)


@pytest.mark.parametrize(
    "inst,inend,rev,sz",
    [
        (0, 0, False, 0),
        (1, 1, False, 1),
        (10, 15, False, 10),
        (40, 50, False, 11),
        (0, 20, True, 10),
        (0, 11, True, 10),
        (0, 0, True, 10),
    ],
)
def test_range_request_fails(inst, inend, rev, sz):
    with pytest.raises(S3Error) as info:
        ObjectRangeRequest(start=inst, end=inend, from_end=rev).range(sz)
    assert info.value.code is ErrorCode.INVALID_RANGE


def test_parse_empty_header():
    assert parse_range_header("") is None


@pytest.mark.parametrize(
    "header,expected",
    [
        ("bytes=0-5", ObjectRangeRequest(start=0, end=5)),
        ("bytes=5-", ObjectRangeRequest(start=5, end=RANGE_NO_END)),
        ("bytes=-5", ObjectRangeRequest(end=5, from_end=True)),
        ("bytes= 2 - 3 ", ObjectRangeRequest(start=2, end=3)),
    ],
)
def test_parse_range_header(header, expected):
    assert parse_range_header(header) == expected


@pytest.mark.parametrize(
    "header",
    ["items=0-1", "bytes=", "bytes=5", "bytes=5-1", "bytes=abc-", "bytes=1-x", "bytes=-x"],
)
def test_parse_range_header_invalid(header):
    with pytest.raises(S3Error) as info:
        parse_range_header(header)
    assert info.value.code is ErrorCode.INVALID_RANGE


def test_parse_multiple_ranges_not_implemented():
    with pytest.raises(S3Error) as info:
        parse_range_header("bytes=0-1,2-3")
    assert info.value.code is ErrorCode.NOT_IMPLEMENTED


def test_headers():
    assert ObjectRange(1, 5).headers(10) == {
        "Content-Range": "bytes 1-5/10",
        "Content-Length": "5",
    }
    assert range_headers(None, 10) == {"Content-Length": "10"}
    assert range_headers(ObjectRange(0, 1), 4)["Content-Range"] == "bytes 0-0/4"