"""Tests for the HTTP object store and streams opened over it."""

import re

import pytest
from pytest_httpserver import HTTPServer
from werkzeug import Request, Response

from segmentfs.storage.client import HTTPObjectStore
from segmentfs.storage.config import StorageClientConfig
from segmentfs.storage.exceptions import (
    StorageError,
    ResourceNotFoundError,
    RangeNotSupportedError
)
from segmentfs.stream.virtual import open_virtual_stream


NO_RETRY = StorageClientConfig(retries=0)


class TestHTTPObjectStore:
    """Test the S3-compatible HTTP store against a local server."""

    def setup_method(self):
        """Set up test HTTP server."""
        self.objects = {
            "a": bytes(range(10)),
            "b": bytes(range(100, 105)),
            "dir/part 1": b"0123456789" * 100,
        }
        self.server = HTTPServer(host="127.0.0.1", port=0)
        self.server.expect_request(re.compile(r"^/bucket/.*$")).respond_with_handler(self._handle_request)
        self.server.expect_request(re.compile(r"^/plain/.*$")).respond_with_handler(self._handle_no_ranges)
        self.server.expect_request(re.compile(r"^/broken/.*$")).respond_with_data("boom", status=500)
        self.server.start()
        self.base_url = f"http://127.0.0.1:{self.server.port}"

    def teardown_method(self):
        """Clean up test HTTP server."""
        self.server.clear()
        self.server.stop()

    def _handle_request(self, request: Request) -> Response:
        """Serve objects with range support."""
        key = request.path.split("/", 2)[2]
        data = self.objects.get(key)
        if data is None:
            return Response(status=404)

        if request.method == "HEAD":
            return Response(
                status=200,
                headers={
                    "Content-Length": str(len(data)),
                    "Accept-Ranges": "bytes"
                }
            )

        range_header = request.headers.get("Range")
        if range_header:
            # bytes=start-end, both inclusive
            range_spec = range_header.replace("bytes=", "")
            start, end = map(int, range_spec.split("-"))
            body = data[start:end + 1]

            return Response(
                body,
                status=206,
                headers={
                    "Content-Range": f"bytes {start}-{end}/{len(data)}",
                    "Content-Length": str(len(body))
                }
            )

        return Response(data, status=200)

    def _handle_no_ranges(self, request: Request) -> Response:
        """Ignore Range headers and always send the whole object."""
        data = b"0123456789"
        if request.method == "HEAD":
            return Response(status=200, headers={"Content-Length": str(len(data))})
        return Response(data, status=200)

    def test_object_url(self):
        """Keys keep their slashes, other characters are quoted."""
        store = HTTPObjectStore(self.base_url + "/")
        assert store.object_url("bucket", "dir/part 1") == f"{self.base_url}/bucket/dir/part%201"

    def test_get_object_size(self):
        with HTTPObjectStore(self.base_url) as store:
            assert store.get_object_size("bucket", "a") == 10
            assert store.get_object_size("bucket", "dir/part 1") == 1000

    def test_read_range(self):
        """Inclusive ranges and request accounting."""
        with HTTPObjectStore(self.base_url) as store:
            assert store.read_range("bucket", "dir/part 1", 2, 5) == b"2345"
            assert store.read_range("bucket", "a", 9, 9) == b"\x09"

            assert store.total_requests == 2
            assert store.total_bytes_downloaded == 5

    def test_invalid_range_arguments(self):
        with HTTPObjectStore(self.base_url) as store:
            with pytest.raises(ValueError):
                store.read_range("bucket", "a", -1, 3)
            with pytest.raises(ValueError):
                store.read_range("bucket", "a", 4, 3)
            assert store.total_requests == 0

    def test_not_found(self):
        with HTTPObjectStore(self.base_url, NO_RETRY) as store:
            with pytest.raises(ResourceNotFoundError):
                store.get_object_size("bucket", "missing")
            with pytest.raises(ResourceNotFoundError):
                store.read_range("bucket", "missing", 0, 3)

    def test_range_not_supported(self):
        """A 200 answer to a range request is an error."""
        with HTTPObjectStore(self.base_url, NO_RETRY) as store:
            assert store.get_object_size("plain", "x") == 10
            with pytest.raises(RangeNotSupportedError):
                store.read_range("plain", "x", 0, 3)

    def test_server_error(self):
        """Server failures surface as StorageError."""
        with HTTPObjectStore(self.base_url, NO_RETRY) as store:
            with pytest.raises(StorageError):
                store.read_range("broken", "x", 0, 3)

    def test_configured_headers_sent(self):
        """Headers from the config go out on every request."""
        seen = []

        def handler(request: Request) -> Response:
            seen.append(request.headers.get("Authorization"))
            return Response(status=200, headers={"Content-Length": "3"})

        self.server.expect_request("/secure/obj").respond_with_handler(handler)
        config = StorageClientConfig(headers={"Authorization": "Bearer token"})

        with HTTPObjectStore(self.base_url, config) as store:
            assert store.get_object_size("secure", "obj") == 3

        assert seen == ["Bearer token"]

    def test_empty_endpoint_rejected(self):
        with pytest.raises(ValueError):
            HTTPObjectStore("")
        with pytest.raises(TypeError):
            HTTPObjectStore(42)


class TestOpenVirtualStream:
    """End-to-end reads through HTTP."""

    def setup_method(self):
        self.objects = {"a": bytes(range(10)), "b": bytes(range(100, 105))}
        self.ranges = []
        self.server = HTTPServer(host="127.0.0.1", port=0)
        self.server.expect_request(re.compile(r"^/bucket/.*$")).respond_with_handler(self._handle_request)
        self.server.start()
        self.base_url = f"http://127.0.0.1:{self.server.port}"

    def teardown_method(self):
        self.server.clear()
        self.server.stop()

    def _handle_request(self, request: Request) -> Response:
        key = request.path.split("/", 2)[2]
        data = self.objects.get(key)
        if data is None:
            return Response(status=404)
        if request.method == "HEAD":
            return Response(status=200, headers={"Content-Length": str(len(data))})

        self.ranges.append((key, request.headers["Range"]))
        start, end = map(int, request.headers["Range"].replace("bytes=", "").split("-"))
        return Response(data[start:end + 1], status=206)

    def test_boundary_read(self):
        """A read across the boundary sends one range request per object."""
        with open_virtual_stream(self.base_url, "bucket", ["a", "b"]) as stream:
            stream.seek(7)
            assert stream.read(8) == bytes([7, 8, 9, 100, 101, 102, 103, 104])
            assert stream.read(1) == b""

        assert self.ranges == [("a", "bytes=7-9"), ("b", "bytes=0-4")]

    def test_missing_key(self):
        with pytest.raises(ResourceNotFoundError):
            open_virtual_stream(self.base_url, "bucket", ["a", "nope"], config=NO_RETRY)

    def test_stream_closes_its_store(self):
        stream = open_virtual_stream(self.base_url, "bucket", ["a"])
        assert stream.close_store
        stream.close()
        assert stream.closed
