"""Dispatch of requests to S3 operations."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from .errors import ErrorCode, S3Error


class Operation(Enum):
    LIST_BUCKETS = "ListBuckets"
    NOT_FOUND = "NotFound"
    GET_OBJECT = "GetObject"
    HEAD_OBJECT = "HeadObject"
    CREATE_OBJECT = "CreateObject"
    DELETE_OBJECT = "DeleteObject"
    DELETE_OBJECT_VERSION = "DeleteObjectVersion"
    GET_BUCKET_LOCATION = "GetBucketLocation"
    LIST_BUCKET = "ListBucket"
    CREATE_BUCKET = "CreateBucket"
    DELETE_BUCKET = "DeleteBucket"
    HEAD_BUCKET = "HeadBucket"
    DELETE_MULTI = "DeleteMulti"
    CREATE_OBJECT_BROWSER_UPLOAD = "CreateObjectBrowserUpload"
    LIST_MULTIPART_UPLOADS = "ListMultipartUploads"
    INITIATE_MULTIPART_UPLOAD = "InitiateMultipartUpload"
    GET_BUCKET_VERSIONING = "GetBucketVersioning"
    PUT_BUCKET_VERSIONING = "PutBucketVersioning"
    LIST_BUCKET_VERSIONS = "ListBucketVersions"
    LIST_MULTIPART_UPLOAD_PARTS = "ListMultipartUploadParts"
    PUT_MULTIPART_UPLOAD_PART = "PutMultipartUploadPart"
    ABORT_MULTIPART_UPLOAD = "AbortMultipartUpload"
    COMPLETE_MULTIPART_UPLOAD = "CompleteMultipartUpload"


@dataclass(frozen=True)
class Route:
    """The operation a request maps to, with the parts of the URL it needs."""

    operation: Operation
    bucket: str = ""
    object: str = ""
    upload_id: str = ""
    version_id: str = ""


Query = Mapping[str, Sequence[str]]

_MULTIPART = {
    "GET": Operation.LIST_MULTIPART_UPLOAD_PARTS,
    "PUT": Operation.PUT_MULTIPART_UPLOAD_PART,
    "DELETE": Operation.ABORT_MULTIPART_UPLOAD,
    "POST": Operation.COMPLETE_MULTIPART_UPLOAD,
}
_MULTIPART_BASE = {
    "GET": Operation.LIST_MULTIPART_UPLOADS,
    "POST": Operation.INITIATE_MULTIPART_UPLOAD,
}
_VERSIONING = {
    "GET": Operation.GET_BUCKET_VERSIONING,
    "PUT": Operation.PUT_BUCKET_VERSIONING,
}
_VERSIONS = {"GET": Operation.LIST_BUCKET_VERSIONS}
_VERSION = {
    "GET": Operation.GET_OBJECT,
    "HEAD": Operation.HEAD_OBJECT,
    "DELETE": Operation.DELETE_OBJECT_VERSION,
}
_OBJECT = {
    "GET": Operation.GET_OBJECT,
    "HEAD": Operation.HEAD_OBJECT,
    "PUT": Operation.CREATE_OBJECT,
    "DELETE": Operation.DELETE_OBJECT,
}


def _first(query: Query, name: str) -> str:
    values = query.get(name)
    if not values:
        return ""
    if isinstance(values, str):
        return values
    return values[0]


def _pick(table: Mapping[str, Operation], method: str) -> Operation:
    try:
        return table[method]
    except KeyError:
        raise S3Error(ErrorCode.METHOD_NOT_ALLOWED) from None


def version_from_query(values: Sequence[str] | None) -> str:
    """The versionId value, with the 'null' version treated as absent."""
    if values and values[0] not in ("", "null"):
        return values[0]
    return ""


def _bucket_operation(method: str, query: Query) -> Operation:
    if method == "GET":
        return Operation.GET_BUCKET_LOCATION if "location" in query else Operation.LIST_BUCKET
    if method == "POST":
        return Operation.DELETE_MULTI if "delete" in query else Operation.CREATE_OBJECT_BROWSER_UPLOAD
    table = {
        "PUT": Operation.CREATE_BUCKET,
        "DELETE": Operation.DELETE_BUCKET,
        "HEAD": Operation.HEAD_BUCKET,
    }
    return _pick(table, method)


def resolve_route(method: str, path: str, query: Query) -> Route:
    """Map a request to its operation; URLs break down as '/<bucket>/<object>'.

    Raises MethodNotAllowed when the URL is known but the method is not.
    """
    method = method.upper()
    bucket, _, obj = path.strip("/").partition("/")

    upload_id = _first(query, "uploadId")
    if upload_id:
        return Route(_pick(_MULTIPART, method), bucket, obj, upload_id=upload_id)
    if "uploads" in query:
        return Route(_pick(_MULTIPART_BASE, method), bucket, obj)
    if "versioning" in query:
        return Route(_pick(_VERSIONING, method), bucket)
    if "versions" in query:
        return Route(_pick(_VERSIONS, method), bucket)
    version_values = query.get("versionId")
    if isinstance(version_values, str):
        version_values = [version_values]
    version_id = version_from_query(version_values)
    if version_id:
        return Route(_pick(_VERSION, method), bucket, obj, version_id=version_id)
    if bucket and obj:
        return Route(_pick(_OBJECT, method), bucket, obj)
    if bucket:
        return Route(_bucket_operation(method, query), bucket)
    if method == "GET":
        return Route(Operation.LIST_BUCKETS)
    return Route(Operation.NOT_FOUND)


def request_headers(request_id: int) -> dict[str, str]:
    """The identifying headers sent with every response."""
    rid = f"{request_id:016X}"
    return {
        "x-amz-id-2": base64.b64encode((rid * 4).encode("ascii")).decode("ascii"),
        "x-amz-request-id": rid,
        "Server": "AmazonS3",
    }