"""S3 request and response messages and their XML forms."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Iterator, Union

from .errors import ErrorCode, S3Error, error_message
from .prefix import CommonPrefix, Prefix

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"

_ESCAPES = str.maketrans(
    {
        '"': "&#34;",
        "'": "&#39;",
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        "\t": "&#x9;",
        "\n": "&#xA;",
        "\r": "&#xD;",
    }
)


def format_content_time(t: datetime) -> str:
    """Format ``t`` in UTC the way S3 clients expect, with at most millisecond precision."""
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    frac = f"{t.microsecond // 1000:03d}".rstrip("0")
    suffix = f".{frac}" if frac else ""
    return (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d}"
        f"T{t.hour:02d}:{t.minute:02d}:{t.second:02d}{suffix}Z"
    )


# --- XML writing helpers -------------------------------------------------


def _str(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _escape(value: str) -> str:
    return value.translate(_ESCAPES)


def _el(tag: str, content: str = "") -> str:
    return f"<{tag}>{content}</{tag}>"


def _text(tag: str, value: Any, omit_empty: bool = False) -> str:
    if omit_empty and not _str(value) or (omit_empty and value == 0):
        return ""
    return _el(tag, _escape(_str(value)))


def _bool(tag: str, value: bool, omit_empty: bool = False) -> str:
    if omit_empty and not value:
        return ""
    return _el(tag, "true" if value else "false")


def _time(tag: str, t: datetime | None) -> str:
    if t is None:
        return ""
    return _el(tag, format_content_time(t))


def _storage(tag: str, value: Any, omit_empty: bool) -> str:
    text = _str(value) if value else ""
    if omit_empty and not text:
        return ""
    return _el(tag, _escape(text or StorageClass.STANDARD.value))


def _user(tag: str, user: UserInfo | None) -> str:
    if user is None:
        return ""
    return _el(tag, _text("ID", user.id) + _text("DisplayName", user.display_name))


def _common_prefixes(items: Iterable[CommonPrefix]) -> str:
    return "".join(_el("CommonPrefixes", _text("Prefix", cp.prefix)) for cp in items)


def _document(tag: str, body: str, xmlns: str = "") -> bytes:
    attrs = f' xmlns="{_escape(xmlns)}"' if xmlns else ""
    return f"<{tag}{attrs}>{body}</{tag}>".encode("utf-8")


# --- XML reading helpers -------------------------------------------------


def _parse(data: bytes | str) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"malformed XML: {exc}") from exc


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    return (child for child in elem if _local(child.tag) == name)


def _child_text(elem: ET.Element, name: str) -> str | None:
    for child in _children(elem, name):
        return "".join(child.itertext())
    return None


def _parse_int(value: str | None) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"invalid integer {value!r}") from None


_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(value: str | None) -> bool:
    if value is None or value == "":
        return False
    value = value.strip()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean {value!r}")


# --- Messages ------------------------------------------------------------


class StorageClass(str, Enum):
    STANDARD = "STANDARD"

    def __str__(self) -> str:
        return self.value


@dataclass
class UserInfo:
    id: str = ""
    display_name: str = ""


@dataclass
class BucketInfo:
    """A single bucket in a ListBuckets response."""

    name: str
    creation_date: datetime | None = None


@dataclass
class Storage:
    """The ListBuckets response."""

    buckets: list[BucketInfo] = field(default_factory=list)
    owner: UserInfo | None = None
    xmlns: str = S3_NAMESPACE

    def names(self) -> list[str]:
        """Sorted bucket names."""
        return sorted(b.name for b in self.buckets)

    def to_xml(self) -> bytes:
        buckets = "".join(
            _el("Bucket", _text("Name", b.name) + _time("CreationDate", b.creation_date))
            for b in self.buckets
        )
        body = _user("Owner", self.owner) + _el("Buckets", buckets)
        return _document("ListAllMyBucketsResult", body, self.xmlns)


@dataclass
class CompletedPart:
    part_number: int
    etag: str = ""


@dataclass
class CompleteMultipartUploadRequest:
    parts: list[CompletedPart] = field(default_factory=list)

    @classmethod
    def from_xml(cls, data: bytes | str) -> "CompleteMultipartUploadRequest":
        root = _parse(data)
        return cls(
            parts=[
                CompletedPart(
                    part_number=_parse_int(_child_text(part, "PartNumber")),
                    etag=_child_text(part, "ETag") or "",
                )
                for part in _children(root, "Part")
            ]
        )

    def part_ids(self) -> list[int]:
        """The part numbers of the request, sorted."""
        return sorted(p.part_number for p in self.parts)

    def parts_are_sorted(self) -> bool:
        """Report whether the parts were given in ascending part-number order."""
        numbers = [p.part_number for p in self.parts]
        return numbers == sorted(numbers)


@dataclass
class CompleteMultipartUploadResult:
    location: str = ""
    bucket: str = ""
    key: str = ""
    etag: str = ""

    def to_xml(self) -> bytes:
        body = (
            _text("Location", self.location)
            + _text("Bucket", self.bucket)
            + _text("Key", self.key)
            + _text("ETag", self.etag)
        )
        return _document("CompleteMultipartUploadResult", body)


@dataclass
class Content:
    """An object in a bucket listing."""

    key: str
    last_modified: datetime | None = None
    etag: str = ""
    size: int = 0
    storage_class: Union[StorageClass, str] = ""
    owner: UserInfo | None = None

    def _xml(self) -> str:
        return _el(
            "Contents",
            _text("Key", self.key)
            + _time("LastModified", self.last_modified)
            + _text("ETag", self.etag)
            + _text("Size", self.size)
            + _storage("StorageClass", self.storage_class, omit_empty=True)
            + _user("Owner", self.owner),
        )


@dataclass
class ObjectID:
    key: str
    version_id: str = ""

    def _xml(self, tag: str) -> str:
        return _el(tag, _text("Key", self.key) + _text("VersionId", self.version_id, True))


@dataclass
class DeleteRequest:
    """A multi-object delete request; quiet mode reports only failures."""

    objects: list[ObjectID] = field(default_factory=list)
    quiet: bool = False

    @classmethod
    def from_xml(cls, data: bytes | str) -> "DeleteRequest":
        root = _parse(data)
        objects = [
            ObjectID(
                key=_child_text(obj, "Key") or "",
                version_id=_child_text(obj, "VersionId") or "",
            )
            for obj in _children(root, "Object")
        ]
        return cls(objects=objects, quiet=_parse_bool(_child_text(root, "Quiet")))


@dataclass
class ErrorResult:
    code: Union[ErrorCode, str] = ErrorCode.NONE
    message: str = ""
    key: str = ""
    resource: str = ""
    request_id: str = ""

    def __str__(self) -> str:
        return f"{self.key}: [{_str(self.code)}] {self.message}"

    def _xml(self) -> str:
        return _el(
            "Error",
            _text("Key", self.key, True)
            + _text("Code", self.code, True)
            + _text("Message", self.message, True)
            + _text("Resource", self.resource, True)
            + _text("RequestId", self.request_id, True),
        )


def error_result_from_error(err: BaseException) -> ErrorResult:
    """Describe ``err`` as an ErrorResult; errors without a code become InternalError."""
    if isinstance(err, S3Error):
        return ErrorResult(
            code=err.code,
            message=err.message,
            resource=err.resource,
            request_id=err.request_id,
        )
    return ErrorResult(code=ErrorCode.INTERNAL)


class MultiDeleteError(Exception):
    """Raised-form of the failures in a multi-object delete."""

    def __init__(self, errors: list[ErrorResult]) -> None:
        self.errors = list(errors)
        lines = "\n".join(str(e) for e in self.errors)
        super().__init__(f"fakes3: multi delete failed:\n{lines}")


@dataclass
class MultiDeleteResult:
    deleted: list[ObjectID] = field(default_factory=list)
    errors: list[ErrorResult] = field(default_factory=list)

    def as_error(self) -> MultiDeleteError | None:
        """An exception describing the failures, or None when there were none."""
        if not self.errors:
            return None
        return MultiDeleteError(self.errors)

    def to_xml(self) -> bytes:
        body = "".join(d._xml("Deleted") for d in self.deleted)
        body += "".join(e._xml() for e in self.errors)
        return _document("DeleteResult", body)


@dataclass
class InitiateMultipartUploadResult:
    bucket: str = ""
    key: str = ""
    upload_id: str = ""

    def to_xml(self) -> bytes:
        body = _text("Bucket", self.bucket) + _text("Key", self.key) + _text("UploadId", self.upload_id)
        return _document("InitiateMultipartUploadResult", body)


@dataclass(kw_only=True)
class _ListBucketResultBase:
    name: str = ""
    is_truncated: bool = False
    delimiter: str = ""
    prefix: str = ""
    max_keys: int = 0
    common_prefixes: list[CommonPrefix] = field(default_factory=list)
    contents: list[Content] = field(default_factory=list)
    xmlns: str = S3_NAMESPACE

    def _base_xml(self) -> str:
        return (
            _text("Name", self.name)
            + _bool("IsTruncated", self.is_truncated)
            + _text("Delimiter", self.delimiter, True)
            + _text("Prefix", self.prefix)
            + _text("MaxKeys", self.max_keys, True)
            + _common_prefixes(self.common_prefixes)
            + "".join(c._xml() for c in self.contents)
        )


@dataclass(kw_only=True)
class ListBucketResult(_ListBucketResultBase):
    """The version 1 ListObjects response."""

    marker: str = ""
    next_marker: str = ""

    def to_xml(self) -> bytes:
        body = self._base_xml() + _text("Marker", self.marker) + _text("NextMarker", self.next_marker, True)
        return _document("ListBucketResult", body, self.xmlns)


@dataclass(kw_only=True)
class ListBucketResultV2(_ListBucketResultBase):
    """The version 2 ListObjects response."""

    continuation_token: str = ""
    key_count: int = 0
    next_continuation_token: str = ""
    start_after: str = ""

    def to_xml(self) -> bytes:
        body = (
            self._base_xml()
            + _text("ContinuationToken", self.continuation_token, True)
            + _text("KeyCount", self.key_count, True)
            + _text("NextContinuationToken", self.next_continuation_token, True)
            + _text("StartAfter", self.start_after, True)
        )
        return _document("ListBucketResult", body, self.xmlns)


@dataclass
class GetBucketLocation:
    location_constraint: str = ""
    xmlns: str = S3_NAMESPACE

    def to_xml(self) -> bytes:
        return _document("LocationConstraint", _escape(self.location_constraint), self.xmlns)


@dataclass
class DeleteMarker:
    key: str
    version_id: str = ""
    is_latest: bool = False
    last_modified: datetime | None = None
    owner: UserInfo | None = None

    def _xml(self) -> str:
        return _el(
            "DeleteMarker",
            _text("Key", self.key)
            + _text("VersionId", self.version_id)
            + _bool("IsLatest", self.is_latest)
            + _time("LastModified", self.last_modified)
            + _user("Owner", self.owner),
        )


@dataclass
class Version:
    key: str
    version_id: str = ""
    is_latest: bool = False
    last_modified: datetime | None = None
    size: int = 0
    storage_class: Union[StorageClass, str] = StorageClass.STANDARD
    etag: str = ""
    owner: UserInfo | None = None

    def _xml(self) -> str:
        return _el(
            "Version",
            _text("Key", self.key)
            + _text("VersionId", self.version_id)
            + _bool("IsLatest", self.is_latest)
            + _time("LastModified", self.last_modified)
            + _text("Size", self.size)
            + _storage("StorageClass", self.storage_class, omit_empty=False)
            + _text("ETag", self.etag)
            + _user("Owner", self.owner),
        )


@dataclass
class ListBucketVersionsResult:
    """The ListObjectVersions response; versions keep their given order."""

    name: str = ""
    delimiter: str = ""
    prefix: str = ""
    common_prefixes: list[CommonPrefix] = field(default_factory=list)
    is_truncated: bool = False
    max_keys: int = 0
    key_marker: str = ""
    next_key_marker: str = ""
    version_id_marker: str = ""
    next_version_id_marker: str = ""
    versions: list[Union[Version, DeleteMarker]] = field(default_factory=list)
    xmlns: str = S3_NAMESPACE
    _seen_prefixes: set[str] = field(default_factory=set, repr=False, compare=False)

    def add_prefix(self, prefix: str) -> None:
        """Add a common prefix unless it has already been added."""
        if prefix in self._seen_prefixes:
            return
        self._seen_prefixes.add(prefix)
        self.common_prefixes.append(CommonPrefix(prefix))

    def to_xml(self) -> bytes:
        body = (
            _text("Name", self.name)
            + _text("Delimiter", self.delimiter, True)
            + _text("Prefix", self.prefix, True)
            + _common_prefixes(self.common_prefixes)
            + _bool("IsTruncated", self.is_truncated)
            + _text("MaxKeys", self.max_keys)
            + _text("KeyMarker", self.key_marker, True)
            + _text("NextKeyMarker", self.next_key_marker, True)
            + _text("VersionIdMarker", self.version_id_marker, True)
            + _text("NextVersionIdMarker", self.next_version_id_marker, True)
            + "".join(v._xml() for v in self.versions)
        )
        return _document("ListBucketVersionsResult", body, self.xmlns)


def new_list_bucket_versions_result(
    bucket_name: str, prefix: Prefix | None, page: Any | None
) -> ListBucketVersionsResult:
    """Start a versions listing, echoing the prefix and the page request."""
    result = ListBucketVersionsResult(name=bucket_name)
    if prefix is not None:
        result.prefix = prefix.prefix
        result.delimiter = prefix.delimiter
    if page is not None:
        result.max_keys = page.max_keys
        result.key_marker = page.key_marker
        result.version_id_marker = page.version_id_marker
    return result


@dataclass
class ListMultipartUploadItem:
    key: str
    upload_id: str
    initiator: UserInfo | None = None
    owner: UserInfo | None = None
    storage_class: Union[StorageClass, str] = ""
    initiated: datetime | None = None

    def _xml(self) -> str:
        return _el(
            "Upload",
            _text("Key", self.key)
            + _text("UploadId", self.upload_id)
            + _user("Initiator", self.initiator)
            + _user("Owner", self.owner)
            + _storage("StorageClass", self.storage_class, omit_empty=True)
            + _time("Initiated", self.initiated),
        )


@dataclass
class ListMultipartUploadsResult:
    bucket: str = ""
    key_marker: str = ""
    upload_id_marker: str = ""
    next_key_marker: str = ""
    next_upload_id_marker: str = ""
    max_uploads: int = 0
    delimiter: str = ""
    prefix: str = ""
    common_prefixes: list[CommonPrefix] = field(default_factory=list)
    is_truncated: bool = False
    uploads: list[ListMultipartUploadItem] = field(default_factory=list)

    def to_xml(self) -> bytes:
        body = (
            _text("Bucket", self.bucket)
            + _text("KeyMarker", self.key_marker, True)
            + _text("UploadIdMarker", self.upload_id_marker, True)
            + _text("NextKeyMarker", self.next_key_marker, True)
            + _text("NextUploadIdMarker", self.next_upload_id_marker, True)
            + _text("MaxUploads", self.max_uploads, True)
            + _text("Delimiter", self.delimiter, True)
            + _text("Prefix", self.prefix, True)
            + _common_prefixes(self.common_prefixes)
            + _bool("IsTruncated", self.is_truncated, True)
            + "".join(u._xml() for u in self.uploads)
        )
        return _document("ListMultipartUploadsResult", body)


@dataclass
class ListMultipartUploadPartItem:
    part_number: int
    last_modified: datetime | None = None
    etag: str = ""
    size: int = 0

    def _xml(self) -> str:
        return _el(
            "Part",
            _text("PartNumber", self.part_number)
            + _time("LastModified", self.last_modified)
            + _text("ETag", self.etag, True)
            + _text("Size", self.size),
        )


@dataclass
class ListMultipartUploadPartsResult:
    bucket: str = ""
    key: str = ""
    upload_id: str = ""
    storage_class: Union[StorageClass, str] = ""
    initiator: UserInfo | None = None
    owner: UserInfo | None = None
    part_number_marker: int = 0
    next_part_number_marker: int = 0
    max_parts: int = 0
    is_truncated: bool = False
    parts: list[ListMultipartUploadPartItem] = field(default_factory=list)

    def to_xml(self) -> bytes:
        body = (
            _text("Bucket", self.bucket)
            + _text("Key", self.key)
            + _text("UploadId", self.upload_id)
            + _storage("StorageClass", self.storage_class, omit_empty=True)
            + _user("Initiator", self.initiator)
            + _user("Owner", self.owner)
            + _text("PartNumberMarker", self.part_number_marker)
            + _text("NextPartNumberMarker", self.next_part_number_marker)
            + _text("MaxParts", self.max_parts)
            + _bool("IsTruncated", self.is_truncated, True)
            + "".join(p._xml() for p in self.parts)
        )
        return _document("ListPartsResult", body)


@dataclass
class CopyObjectResult:
    etag: str = ""
    last_modified: datetime | None = None

    def to_xml(self) -> bytes:
        body = _text("ETag", self.etag, True) + _time("LastModified", self.last_modified)
        return _document("CopyObjectResult", body)


class MFADeleteStatus(str, Enum):
    NONE = ""
    ENABLED = "Enabled"
    DISABLED = "Disabled"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "MFADeleteStatus":
        """Parse a case-insensitive 'Enabled' or 'Disabled'."""
        text = value.strip().lower()
        if text == "enabled":
            return cls.ENABLED
        if text == "disabled":
            return cls.DISABLED
        raise error_message(
            ErrorCode.ILLEGAL_VERSIONING_CONFIGURATION,
            f'unexpected value "{text}" for MFADeleteStatus, expected \'Enabled\' or \'Disabled\'',
        )

    def enabled(self) -> bool:
        return self is MFADeleteStatus.ENABLED


class VersioningStatus(str, Enum):
    NONE = ""
    ENABLED = "Enabled"
    SUSPENDED = "Suspended"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "VersioningStatus":
        """Parse a case-insensitive 'Enabled' or 'Suspended'."""
        text = value.strip().lower()
        if text == "enabled":
            return cls.ENABLED
        if text == "suspended":
            return cls.SUSPENDED
        raise error_message(
            ErrorCode.ILLEGAL_VERSIONING_CONFIGURATION,
            f'unexpected value "{text}" for Status, expected \'Enabled\' or \'Suspended\'',
        )


@dataclass
class VersioningConfiguration:
    status: VersioningStatus = VersioningStatus.NONE
    mfa_delete: MFADeleteStatus = MFADeleteStatus.NONE

    def enabled(self) -> bool:
        return self.status is VersioningStatus.ENABLED

    def set_enabled(self, enabled: bool) -> None:
        self.status = VersioningStatus.ENABLED if enabled else VersioningStatus.SUSPENDED

    @classmethod
    def from_xml(cls, data: bytes | str) -> "VersioningConfiguration":
        root = _parse(data)
        status = _child_text(root, "Status")
        mfa = _child_text(root, "MfaDelete")
        return cls(
            status=VersioningStatus.NONE if status is None else VersioningStatus.parse(status),
            mfa_delete=MFADeleteStatus.NONE if mfa is None else MFADeleteStatus.parse(mfa),
        )

    def to_xml(self) -> bytes:
        body = _text("Status", self.status) + _text("MfaDelete", self.mfa_delete)
        return _document("VersioningConfiguration", body)