import pytest

from fakes3.errors import ErrorCode, S3Error, error_message, has_error_code


def test_has_error_code_none_matches_none_code():
    assert has_error_code(None, ErrorCode.NONE) is True
    assert has_error_code(None, ErrorCode.NO_SUCH_KEY) is False


def test_has_error_code_matches_s3_error():
    err = S3Error(ErrorCode.NO_SUCH_BUCKET)
    assert has_error_code(err, ErrorCode.NO_SUCH_BUCKET) is True
    assert has_error_code(err, ErrorCode.NO_SUCH_KEY) is False


def test_has_error_code_foreign_exception():
    assert has_error_code(ValueError("x"), ErrorCode.INTERNAL) is False


def test_error_message_carries_message():
    err = error_message(ErrorCode.NOT_IMPLEMENTED, "multiple ranges not supported")
    assert err.code is ErrorCode.NOT_IMPLEMENTED
    assert err.message == "multiple ranges not supported"
    assert "multiple ranges not supported" in str(err)
    assert err.resource == ""
    assert err.request_id == ""


def test_code_accepts_string_value():
    err = S3Error(ErrorCode.BAD_DIGEST.value)
    assert err.code is ErrorCode.BAD_DIGEST
    assert str(err) == ErrorCode.BAD_DIGEST.value


def test_unknown_code_rejected():
    with pytest.raises(ValueError):
        S3Error("NotARealCode")


def test_s3_error_can_be_raised_and_caught():
    with pytest.raises(S3Error) as info:
        raise S3Error(ErrorCode.INVALID_RANGE, resource="/b/k", request_id="1")
    assert info.value.resource == "/b/k"
    assert info.value.request_id == "1"
    assert has_error_code(info.value, ErrorCode.INVALID_RANGE)