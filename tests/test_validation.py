import pytest

from fakes3.errors import ErrorCode, S3Error
from fakes3.validation import valid_etag, validate_bucket_name

BASE_CASES = [
    ("", ErrorCode.INVALID_BUCKET_NAME),
    ("1" * 63, ErrorCode.NONE),
    ("192.168.1.1", ErrorCode.INVALID_BUCKET_NAME),
    ("192.168.111.111", ErrorCode.INVALID_BUCKET_NAME),
]

NAME_CASES = [
    ("yep", ErrorCode.NONE),
    ("0yep", ErrorCode.NONE),
    ("yep0", ErrorCode.NONE),
    ("y-p", ErrorCode.NONE),
    ("y--p", ErrorCode.NONE),
    ("NUP", ErrorCode.INVALID_BUCKET_NAME),
    ("n\U0001f921p", ErrorCode.INVALID_BUCKET_NAME),
    ("-nup", ErrorCode.INVALID_BUCKET_NAME),
    ("nup-", ErrorCode.INVALID_BUCKET_NAME),
    ("-nup-", ErrorCode.INVALID_BUCKET_NAME),
    ("1", ErrorCode.INVALID_BUCKET_NAME),
    ("12", ErrorCode.INVALID_BUCKET_NAME),
    ("123", ErrorCode.NONE),
    ("1" * 64, ErrorCode.INVALID_BUCKET_NAME),
]

LABEL_CASES = [
    (template.format(name), code)
    for name, code in NAME_CASES
    for template in ("{}.label", "label.{}", "label.{}.label")
]

CASES = BASE_CASES + NAME_CASES + LABEL_CASES


@pytest.mark.parametrize("name,code", CASES)
def test_validate_bucket_name(name, code):
    if code is ErrorCode.NONE:
        assert validate_bucket_name(name) == name
    else:
        with pytest.raises(S3Error) as info:
            validate_bucket_name(name)
        assert info.value.code is code


@pytest.mark.parametrize(
    "value,ok",
    [
        ('"abc123"', True),
        ("abc123", False),
        ('"ABC"', False),
        ('""', False),
        ('"abc"\n', False),
    ],
)
def test_valid_etag(value, ok):
    assert valid_etag(value) is ok