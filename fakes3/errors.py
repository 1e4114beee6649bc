"""S3 error codes and the exception that carries them."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes reported in S3 error responses."""

    NONE = ""
    INTERNAL = "InternalError"
    BAD_DIGEST = "BadDigest"
    NO_SUCH_KEY = "NoSuchKey"
    NO_SUCH_BUCKET = "NoSuchBucket"
    NO_SUCH_UPLOAD = "NoSuchUpload"
    INVALID_RANGE = "InvalidRange"
    NOT_IMPLEMENTED = "NotImplemented"
    INVALID_BUCKET_NAME = "InvalidBucketName"
    INCOMPLETE_BODY = "IncompleteBody"
    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_PART = "InvalidPart"
    INVALID_PART_ORDER = "InvalidPartOrder"
    ILLEGAL_VERSIONING_CONFIGURATION = "IllegalVersioningConfigurationException"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"

    def __str__(self) -> str:
        return self.value


class S3Error(Exception):
    """An error carrying an S3 error code and optional details."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str = "",
        resource: str = "",
        request_id: str = "",
    ) -> None:
        self.code = ErrorCode(code)
        self.message = message
        self.resource = resource
        self.request_id = request_id
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.message:
            return f"{self.code.value}: {self.message}"
        return self.code.value

    def __repr__(self) -> str:
        return f"S3Error({self.code.value!r}, {self.message!r})"


def error_message(code: ErrorCode | str, message: str) -> S3Error:
    """Build an S3Error for ``code`` with a human-readable message."""
    return S3Error(code, message)


def has_error_code(err: BaseException | None, code: ErrorCode | str) -> bool:
    """Report whether ``err`` carries ``code``; no error matches ErrorCode.NONE."""
    code = ErrorCode(code)
    if err is None:
        return code is ErrorCode.NONE
    if isinstance(err, S3Error):
        return err.code is code
    return False