# fakes3

Pure-Python building blocks for a fake S3 service, for tests that need
something S3-shaped without talking to AWS.

## Modules

- `fakes3.routing`: `resolve_route(method, path, query)` maps an HTTP method,
  a `/<bucket>/<object>` path and a query mapping to a `Route` naming an
  `Operation` (such as `Operation.GET_OBJECT` or
  `Operation.LIST_MULTIPART_UPLOADS`). It raises `S3Error` with
  `ErrorCode.METHOD_NOT_ALLOWED` when the URL is known but the method is not.
  `request_headers(request_id)` builds the `x-amz-id-2`, `x-amz-request-id`
  and `Server` response headers. `version_from_query` treats a `null`
  version as absent.
- `fakes3.messages`: dataclasses for the S3 XML documents. Responses such as
  `Storage`, `ListBucketResult`, `ListBucketResultV2`,
  `ListBucketVersionsResult`, `ListMultipartUploadsResult`,
  `ListMultipartUploadPartsResult`, `CopyObjectResult` and
  `MultiDeleteResult` have `to_xml()`; requests such as
  `CompleteMultipartUploadRequest`, `DeleteRequest` and
  `VersioningConfiguration` have `from_xml()`. Also `format_content_time`,
  `error_result_from_error`, `MFADeleteStatus` and `VersioningStatus`.
- `fakes3.prefix`: `Prefix`, `new_prefix`, `new_folder_prefix`.
  `Prefix.match(key)` returns a `PrefixMatch` (or `None`) whose
  `common_prefix` says whether the key belongs in `Contents` or
  `CommonPrefixes`.
- `fakes3.byterange`: `parse_range_header`, `ObjectRangeRequest.range` and
  `range_headers` for single-range `Range` requests.
- `fakes3.uploader`: `Uploader`, an in-memory multipart upload manager that
  lists uploads in key order and parts in part-number order, and assembles the
  finished object; `UploadListMarker` and `upload_list_marker_from_query` for
  paging.
- `fakes3.validation`: `validate_bucket_name` and `valid_etag`.
- `fakes3.errors`: `S3Error`, `ErrorCode`, `error_message`, `has_error_code`.
- `fakes3.log`: `StdLog`, `DiscardLog`, `MultiLog` and `global_log`, with
  optional level whitelists.
- `fakes3.timesource`: `DefaultTimeSource` (wall clock in GMT) and
  `FixedTimeSource`, which stands still until `advance()` is called.
- `fakes3.options`: the `Options` dataclass and `build_options` with the
  `with_*` / `without_versioning` option functions.
- `fakes3.util`: `parse_clamped_int` and `read_all`.

## Installing

```
pip install .
```

## Examples

Routing a request:

```python
from fakes3.routing import Operation, resolve_route

route = resolve_route("GET", "/mybucket/obj", {})
assert route.operation is Operation.GET_OBJECT
print(route.bucket, route.object)   # mybucket obj
```

Matching keys against a prefix and delimiter:

```python
from fakes3.prefix import new_folder_prefix

match = new_folder_prefix("foo").match("foo/bar")
print(match.matched_part, match.common_prefix)   # foo/ True
```

Resolving a byte range:

```python
from fakes3.byterange import parse_range_header

rng = parse_range_header("bytes=0-5").range(10)
print(rng.start, rng.length)   # 0 6
```

Validating a bucket name:

```python
from fakes3.errors import S3Error
from fakes3.validation import validate_bucket_name

try:
    validate_bucket_name("NUP")
except S3Error as err:
    print(err.code)   # InvalidBucketName
```

A multipart upload. `Uploader` needs a backend with a
`put_object(bucket, key, meta, body, size)` method returning an object with a
`version_id` attribute:

```python
from datetime import datetime, timezone
from types import SimpleNamespace

from fakes3.messages import CompletedPart, CompleteMultipartUploadRequest
from fakes3.timesource import FixedTimeSource
from fakes3.uploader import Uploader


class MemoryBackend:
    def __init__(self):
        self.objects = {}

    def put_object(self, bucket, key, meta, body, size):
        self.objects[(bucket, key)] = body.read()
        return SimpleNamespace(version_id="")


backend = MemoryBackend()
clock = FixedTimeSource(datetime(2019, 1, 1, 12, tzinfo=timezone.utc))
uploader = Uploader(backend, clock)

upload_id = uploader.create_multipart_upload("mybucket", "obj")
etag1 = uploader.upload_part("mybucket", "obj", upload_id, 1, 3, b"abc")
etag2 = uploader.upload_part("mybucket", "obj", upload_id, 2, 3, b"def")
request = CompleteMultipartUploadRequest([CompletedPart(1, etag1), CompletedPart(2, etag2)])
version_id, etag = uploader.complete_multipart_upload("mybucket", "obj", upload_id, request)
print(backend.objects[("mybucket", "obj")])   # b'abcdef'
```

## What this package does not do

It contains no HTTP server, no request handlers and no object storage:
`resolve_route` only names the operation a request maps to, `Options` only
holds settings, and `Uploader` hands finished objects to a backend you
supply. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```