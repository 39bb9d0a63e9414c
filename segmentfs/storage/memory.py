"""Dict-backed object store."""

import threading
from typing import Dict, List, Optional, Tuple

from .exceptions import ResourceNotFoundError


class InMemoryObjectStore:
    """Object store holding objects in memory.

    Every call is appended to ``calls`` so callers can check exactly which
    requests were issued. ``read_range`` returns whatever data exists in the
    requested range, so an object replaced after a stream was opened yields
    short reads.
    """

    def __init__(self, objects: Optional[Dict[Tuple[str, str], bytes]] = None):
        self._objects: Dict[Tuple[str, str], bytes] = dict(objects or {})
        self._lock = threading.Lock()
        self.calls: List[tuple] = []

    def put(self, bucket: str, key: str, data: bytes):
        with self._lock:
            self._objects[(bucket, key)] = bytes(data)

    def _get(self, bucket: str, key: str) -> bytes:
        try:
            return self._objects[(bucket, key)]
        except KeyError:
            raise ResourceNotFoundError(f"Object not found: {bucket}/{key}") from None

    def get_object_size(self, bucket: str, key: str) -> int:
        with self._lock:
            self.calls.append(("size", bucket, key))
            return len(self._get(bucket, key))

    def read_range(self, bucket: str, key: str, start: int, end: int) -> bytes:
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        if end < start:
            raise ValueError(f"end ({end}) must be >= start ({start})")
        with self._lock:
            self.calls.append(("range", bucket, key, start, end))
            return self._get(bucket, key)[start:end + 1]

    @property
    def range_calls(self) -> List[tuple]:
        """Recorded range requests as (key, start, end)."""
        return [(c[2], c[3], c[4]) for c in self.calls if c[0] == "range"]

    def close(self):
        pass
