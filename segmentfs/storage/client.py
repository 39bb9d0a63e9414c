import logging
import threading
from typing import Optional, Dict
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import StorageClientConfig
from .exceptions import (
    StorageError,
    ResourceNotFoundError,
    RangeNotSupportedError,
    ObjectSizeError
)

logger = logging.getLogger(__name__)

class HTTPObjectStore:
    """An object store client for S3-compatible HTTP endpoints.

    Objects are addressed path-style as ``{endpoint_url}/{bucket}/{key}``.
    Sizes come from HEAD requests and byte ranges from GET requests carrying
    an inclusive ``Range: bytes=start-end`` header (RFC 7233).

    Key features:
    - Safe to share between threads: one pooled session, counters under a lock
    - Transport-level retry with exponential backoff (urllib3 Retry)
    - Range request validation (detects servers that ignore Range)
    - Telemetry tracking (requests, bytes downloaded)
    """

    def __init__(self, endpoint_url: str, config: Optional[StorageClientConfig] = None):
        if not endpoint_url:
            raise ValueError("endpoint_url cannot be empty")
        if not isinstance(endpoint_url, str):
            raise TypeError(f"endpoint_url must be a string, got {type(endpoint_url).__name__}")

        self.endpoint_url = endpoint_url.rstrip("/")
        self.config = config or StorageClientConfig()
        self._session = self._create_session()
        self._lock = threading.Lock()

        # Telemetry
        self.total_bytes_downloaded = 0
        self.total_requests = 0

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=self.config.retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=list(self.config.retry_statuses),
            allowed_methods=list(self.config.retry_methods)
        )
        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_maxsize=self.config.pool_maxsize
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update(self.config.headers)
        return session

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self.endpoint_url}/{quote(bucket, safe='')}/{quote(key, safe='/')}"

    def _request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        with self._lock:
            self.total_requests += 1
        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                timeout=self.config.timeout,
                allow_redirects=True
            )

            if response.status_code == 404:
                raise ResourceNotFoundError(f"Object not found: {url}")

            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} request failed for {url}: {str(e)}")
            raise StorageError(f"Network error: {str(e)}") from e

    def get_object_size(self, bucket: str, key: str) -> int:
        """Get the size in bytes of an object.

        Returns:
            Object size in bytes

        Raises:
            ObjectSizeError: If the size cannot be determined
            ResourceNotFoundError: If the object is not found (404)
            StorageError: For other HTTP errors
        """
        url = self.object_url(bucket, key)
        response = self._request("HEAD", url)

        if 'Content-Length' not in response.headers:
            raise ObjectSizeError(f"Could not determine object size for {url}")

        try:
            size = int(response.headers['Content-Length'])
        except ValueError as e:
            raise ObjectSizeError(f"Invalid Content-Length for {url}: {response.headers['Content-Length']}") from e

        logger.debug(f"HEAD {url}: {size} bytes")
        return size

    def read_range(self, bucket: str, key: str, start: int, end: int) -> bytes:
        """Fetch the inclusive byte range [start, end] of an object."""
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        if end < start:
            raise ValueError(f"end ({end}) must be >= start ({start})")

        url = self.object_url(bucket, key)
        headers = {"Range": f"bytes={start}-{end}"}
        response = self._request("GET", url, headers=headers)

        if response.status_code != 206:
            if response.status_code == 200:
                logger.error(f"Server does not support HTTP Range requests (returned 200 instead of 206).")
                raise RangeNotSupportedError(f"Server returned status 200 - range requests not supported for {url}")

            raise RangeNotSupportedError(f"Server returned status {response.status_code} for range request.")

        content = response.content
        with self._lock:
            self.total_bytes_downloaded += len(content)
        return content

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
