"""In-memory multipart upload handling."""

from __future__ import annotations

import hashlib
import io
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, BinaryIO, Iterator, Mapping, Sequence, Union

from sortedcontainers import SortedDict

from .errors import ErrorCode, S3Error, error_message
from .messages import (
    CompleteMultipartUploadRequest,
    ListMultipartUploadItem,
    ListMultipartUploadPartItem,
    ListMultipartUploadPartsResult,
    ListMultipartUploadsResult,
    StorageClass,
)
from .prefix import Prefix
from .timesource import DefaultTimeSource, TimeSource

MAX_UPLOAD_PART_NUMBER = 10000

Body = Union[bytes, bytearray, memoryview, BinaryIO]


@dataclass(frozen=True)
class UploadListMarker:
    """Where a ListMultipartUploads page starts.

    Only keys at or after ``object`` are listed. When ``upload_id`` is set,
    listing starts at that upload of ``object``.
    """

    object: str
    upload_id: str = ""


def _first(query: Mapping[str, Any], name: str) -> str:
    values = query.get(name)
    if not values:
        return ""
    if isinstance(values, str):
        return values
    return values[0]


def upload_list_marker_from_query(query: Mapping[str, Sequence[str]]) -> UploadListMarker | None:
    """Collect the key-marker and upload-id-marker query values; None without a key-marker."""
    obj = _first(query, "key-marker")
    if obj == "":
        return None
    return UploadListMarker(object=obj, upload_id=_first(query, "upload-id-marker"))


@dataclass
class _Part:
    part_number: int
    etag: str
    body: bytes
    last_modified: datetime


@dataclass
class _MultipartUpload:
    id: str
    bucket: str
    object: str
    meta: dict[str, str]
    initiated: datetime
    # Indexed by part number; gaps are None. Part numbers start at 1.
    parts: list[_Part | None] = field(default_factory=list)


class _BucketUploads:
    """Uploads of one bucket, indexed by ID and ordered by object key."""

    def __init__(self) -> None:
        self.uploads: dict[str, _MultipartUpload] = {}
        # object key -> uploads for that key, in initiation order
        self.object_index: SortedDict = SortedDict()

    def add(self, upload: _MultipartUpload) -> None:
        self.uploads[upload.id] = upload
        self.object_index.setdefault(upload.object, []).append(upload)

    def remove(self, upload_id: str) -> None:
        upload = self.uploads.pop(upload_id)
        uploads = self.object_index.get(upload.object)
        if not uploads:
            return
        remaining = [u for u in uploads if u.id != upload_id]
        if remaining:
            self.object_index[upload.object] = remaining
        else:
            del self.object_index[upload.object]


def _read_body(body: Body) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    return body.read()


class Uploader:
    """Keeps multipart uploads in memory until they are completed or aborted.

    Uploads do not persist and their parts are held in memory in full.
    """

    def __init__(self, backend: Any, time_source: TimeSource | None = None) -> None:
        self._backend = backend
        self._time_source = time_source if time_source is not None else DefaultTimeSource()
        self._upload_id = 0
        self._buckets: dict[str, _BucketUploads] = {}
        self._lock = threading.Lock()

    def create_multipart_upload(
        self, bucket: str, obj: str, meta: Mapping[str, str] | None = None
    ) -> str:
        """Start an upload and return its ID."""
        with self._lock:
            self._upload_id += 1
            upload = _MultipartUpload(
                id=str(self._upload_id),
                bucket=bucket,
                object=obj,
                meta=dict(meta or {}),
                initiated=self._time_source.now(),
            )
            self._buckets.setdefault(bucket, _BucketUploads()).add(upload)
            return upload.id

    def list_parts(
        self, bucket: str, obj: str, upload_id: str, marker: int, limit: int
    ) -> ListMultipartUploadPartsResult:
        """List the uploaded parts, starting at part number ``marker``."""
        if marker < 0:
            raise error_message(ErrorCode.INVALID_ARGUMENT, "part number marker must not be negative")
        with self._lock:
            upload = self._get(bucket, obj, upload_id)
            result = ListMultipartUploadPartsResult(
                bucket=bucket,
                key=obj,
                upload_id=upload_id,
                max_parts=limit,
                part_number_marker=marker,
                storage_class=StorageClass.STANDARD,
            )
            count = 0
            for part in upload.parts[marker:]:
                if part is None:
                    continue
                if count >= limit:
                    result.is_truncated = True
                    result.next_part_number_marker = part.part_number
                    break
                result.parts.append(
                    ListMultipartUploadPartItem(
                        part_number=part.part_number,
                        last_modified=part.last_modified,
                        etag=part.etag,
                        size=len(part.body),
                    )
                )
                count += 1
            return result

    def list_multipart_uploads(
        self,
        bucket: str,
        marker: UploadListMarker | None,
        prefix: Prefix | None,
        limit: int,
    ) -> ListMultipartUploadsResult:
        """List in-progress uploads, sorted by object key then by initiation."""
        prefix = prefix if prefix is not None else Prefix()
        with self._lock:
            bucket_uploads = self._buckets.get(bucket)
            if bucket_uploads is None:
                raise S3Error(ErrorCode.NO_SUCH_UPLOAD)

            result = ListMultipartUploadsResult(
                bucket=bucket,
                delimiter=prefix.delimiter,
                prefix=prefix.prefix,
                max_uploads=limit,
            )

            index = bucket_uploads.object_index
            start = None
            first_found = True
            if marker is not None:
                start = marker.object
                first_found = marker.upload_id == ""
                result.upload_id_marker = marker.upload_id
                result.key_marker = marker.object

            entries: Iterator[tuple[str, list[_MultipartUpload]]] = (
                (key, index[key]) for key in index.irange(minimum=start)
            )

            truncated = False
            count = 0
            seen_prefixes: set[str] = set()

            for obj, uploads in entries:
                match = prefix.match(obj)
                if match is None:
                    continue

                if not first_found:
                    ids = [u.id for u in uploads]
                    if marker is None or marker.upload_id not in ids:
                        continue
                    first_found = True
                    uploads = uploads[ids.index(marker.upload_id):]

                if match.common_prefix:
                    if match.matched_part not in seen_prefixes:
                        result.common_prefixes.append(match.as_common_prefix())
                        seen_prefixes.add(match.matched_part)
                    continue

                done = False
                for idx, upload in enumerate(uploads):
                    result.uploads.append(
                        ListMultipartUploadItem(
                            key=obj,
                            upload_id=upload.id,
                            storage_class=StorageClass.STANDARD,
                            initiated=upload.initiated,
                        )
                    )
                    count += 1
                    if count >= limit:
                        if idx != len(uploads) - 1:
                            truncated = True
                            result.next_upload_id_marker = uploads[idx + 1].id
                            result.next_key_marker = obj
                        done = True
                        break
                if done:
                    break

            # Not truncated inside an object's uploads: check for later objects.
            if not truncated:
                for obj, uploads in entries:
                    match = prefix.match(obj)
                    if match is not None and not match.common_prefix:
                        truncated = True
                        result.next_upload_id_marker = uploads[0].id
                        result.next_key_marker = obj
                        break

            result.is_truncated = truncated
            return result

    def abort_multipart_upload(self, bucket: str, obj: str, upload_id: str) -> None:
        """Discard an upload and its parts."""
        with self._lock:
            self._get(bucket, obj, upload_id)
            self._buckets[bucket].remove(upload_id)

    def upload_part(
        self,
        bucket: str,
        obj: str,
        upload_id: str,
        part_number: int,
        content_length: int,
        body: Body,
    ) -> str:
        """Store a part and return its quoted ETag."""
        if part_number > MAX_UPLOAD_PART_NUMBER or part_number < 0:
            raise S3Error(ErrorCode.INVALID_PART)
        data = _read_body(body)
        if len(data) != content_length:
            raise S3Error(ErrorCode.INCOMPLETE_BODY)

        with self._lock:
            upload = self._get(bucket, obj, upload_id)
            etag = f'"{hashlib.md5(data).hexdigest()}"'
            part = _Part(
                part_number=part_number,
                etag=etag,
                body=data,
                last_modified=self._time_source.now(),
            )
            if part_number >= len(upload.parts):
                upload.parts.extend([None] * (part_number - len(upload.parts) + 1))
            upload.parts[part_number] = part
            return etag

    def complete_multipart_upload(
        self,
        bucket: str,
        obj: str,
        upload_id: str,
        request: CompleteMultipartUploadRequest,
    ) -> tuple[str, str]:
        """Assemble the listed parts into the object; return (version ID, ETag)."""
        with self._lock:
            upload = self._get(bucket, obj, upload_id)

            if len(request.parts) > len(upload.parts):
                raise S3Error(ErrorCode.INVALID_PART)
            if not request.parts_are_sorted():
                raise S3Error(ErrorCode.INVALID_PART_ORDER)

            selected: list[_Part] = []
            for in_part in request.parts:
                number = in_part.part_number
                stored = upload.parts[number] if 0 <= number < len(upload.parts) else None
                if stored is None:
                    raise error_message(
                        ErrorCode.INVALID_PART,
                        f"unexpected part number {number} in complete request",
                    )
                if in_part.etag.strip('"') != stored.etag.strip('"'):
                    raise error_message(
                        ErrorCode.INVALID_PART,
                        f"unexpected part etag for number {number} in complete request",
                    )
                selected.append(stored)

            digest = hashlib.md5()
            for stored in selected:
                try:
                    digest.update(bytes.fromhex(stored.etag.strip('"')))
                except ValueError as exc:
                    raise error_message(
                        ErrorCode.INTERNAL,
                        f"invalid etag for number {stored.part_number} is stored: {exc}",
                    ) from exc
            etag = f'"{digest.hexdigest()}-{len(request.parts)}"'

            body = b"".join(stored.body for stored in selected)
            result = self._backend.put_object(bucket, obj, upload.meta, io.BytesIO(body), len(body))

            self._buckets[bucket].remove(upload_id)
            return result.version_id, etag

    def _get(self, bucket: str, obj: str, upload_id: str) -> _MultipartUpload:
        bucket_uploads = self._buckets.get(bucket)
        if bucket_uploads is None:
            raise S3Error(ErrorCode.NO_SUCH_UPLOAD)
        upload = bucket_uploads.uploads.get(upload_id)
        if upload is None or upload.bucket != bucket or upload.object != obj:
            raise S3Error(ErrorCode.NO_SUCH_UPLOAD)
        return upload