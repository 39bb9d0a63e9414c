import operator
import threading
from io import RawIOBase, SEEK_SET, SEEK_CUR, SEEK_END
from typing import Iterable, Optional, Tuple

from ..storage.base import ObjectStore
from ..storage.client import HTTPObjectStore
from ..storage.config import StorageClientConfig
from ..storage.exceptions import ObjectSizeError

from .exceptions import InvalidWhenceError, InvalidOffsetError
from .logger import FlowChartLogger, logger
from .plan import plan_reads
from .segment import Segment

class VirtualStream(RawIOBase):
    """
    A read-only, seekable file object over several stored objects
    concatenated in the given key order.

    Sizes are looked up once, one request per key, when the stream is created.
    Reads are resolved to range requests against the objects they touch.
    read(), readinto(), seek() and tell() share one lock, held for the whole
    call, so the cursor moves atomically. read_at() and readinto_at() do not
    use the cursor and run without the lock.
    """

    def __init__(self, store: ObjectStore, bucket: str, keys: Iterable[str], *, close_store: bool = False, debug: bool = False):
        super().__init__()
        self._store = store
        self.bucket = bucket
        self.debug = debug
        self.tracer = FlowChartLogger(bucket) if debug else None
        self.close_store = False
        self._segments: Tuple[Segment, ...] = ()
        self._lock = threading.Lock()
        self._pos = 0

        segments = []
        for key in keys:
            try:
                size = store.get_object_size(bucket, key)
            except Exception as e:
                if self.tracer:
                    self.tracer.failed("Size Lookup Failed", {"Key": key, "Error": str(e)})
                raise
            if size < 0:
                raise ObjectSizeError(f"Negative size {size} reported for {bucket}/{key}")
            segments.append(Segment(store, bucket, key, size))

        self._segments = tuple(segments)
        self._sizes = tuple(s.size for s in self._segments)
        self._size = sum(self._sizes)
        self.close_store = close_store

        logger.debug(f"Opened {bucket} with {len(self._segments)} segments, {self._size} bytes")
        if self.tracer:
            self.tracer.opened(bucket, len(self._segments), self._size)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def size(self) -> int:
        """Total logical size: the sum of all segment sizes."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def readable(self) -> bool: return True
    def seekable(self) -> bool: return True

    def _check_open(self):
        if self.closed:
            raise ValueError("I/O operation on closed stream.")

    def readinto_at(self, b, offset: int) -> int:
        """Fill `b` with bytes starting at logical `offset`, without moving the cursor.

        Returns the number of bytes written to the front of `b`; 0 means end of
        stream. Fewer than len(b) bytes are returned only when the read reaches
        the end of the last segment.

        If a fetch fails, the store's exception is re-raised as is, with
        `bytes_read` set to the number of bytes already written into `b`.
        """
        self._check_open()
        offset = operator.index(offset)
        if offset < 0:
            raise InvalidOffsetError(f"Invalid offset: {offset}")

        with memoryview(b) as raw, raw.cast("B") as view:
            plans = plan_reads(self._sizes, offset, len(view))
            if self.tracer and plans:
                self.tracer.read_plan(offset, len(view), [(self._segments[p.segment_index].key, p.local_offset, p.end) for p in plans])

            n = 0
            for plan in plans:
                segment = self._segments[plan.segment_index]
                try:
                    n += segment.fetch_into(view[plan.buffer_offset:plan.buffer_offset + plan.length], plan.local_offset)
                except Exception as e:
                    logger.error(f"Fetch of {segment.key} bytes={plan.local_offset}-{plan.end} failed after {n} bytes: {e}")
                    if self.tracer:
                        self.tracer.failed("Fetch Failed", {"Key": segment.key, "Bytes Read": n, "Error": str(e)})
                    e.bytes_read = n
                    raise
        return n

    def read_at(self, offset: int, size: int = -1) -> bytes:
        """Return up to `size` bytes at logical `offset` (to the end if size < 0)."""
        offset = operator.index(offset)
        if offset < 0:
            raise InvalidOffsetError(f"Invalid offset: {offset}")
        available = max(self._size - offset, 0)
        if size is not None:
            size = operator.index(size)
        if size is None or size < 0 or size > available:
            size = available
        buf = bytearray(size)
        n = self.readinto_at(buf, offset)
        return bytes(buf[:n])

    def readinto(self, b) -> int:
        with self._lock:
            n = self.readinto_at(b, self._pos)
            self._pos += n
            return n

    def read(self, size: int = -1) -> bytes:
        with self._lock:
            available = max(self._size - self._pos, 0)
            if size is not None:
                size = operator.index(size)
            if size is None or size < 0 or size > available:
                size = available
            buf = bytearray(size)
            n = self.readinto_at(buf, self._pos)
            self._pos += n
        return bytes(buf[:n])

    def readall(self) -> bytes:
        return self.read(-1)

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        self._check_open()
        offset = operator.index(offset)
        with self._lock:
            if whence == SEEK_SET:
                new_pos = offset
            elif whence == SEEK_CUR:
                new_pos = self._pos + offset
            elif whence == SEEK_END:
                new_pos = self._size + offset
            else:
                raise InvalidWhenceError(f"Invalid whence value: {whence}. Must be SEEK_SET, SEEK_CUR, or SEEK_END.")

            if new_pos < 0:
                raise InvalidOffsetError(f"Invalid offset: {new_pos}")

            # no upper bound: reads past the end return b""
            self._pos = new_pos
            return self._pos

    def tell(self) -> int:
        self._check_open()
        with self._lock:
            return self._pos

    def close(self):
        if not self.closed and self.close_store:
            self._store.close()
        super().close()


def open_virtual_stream(endpoint_url: str, bucket: str, keys: Iterable[str], config: Optional[StorageClientConfig] = None, debug: bool = False) -> VirtualStream:
    """Open a stream over objects served by an S3-compatible HTTP endpoint.

    The stream owns the HTTP store it creates and closes it on close().
    """
    store = HTTPObjectStore(endpoint_url, config)
    try:
        return VirtualStream(store, bucket, keys, close_store=True, debug=debug)
    except Exception:
        store.close()
        raise
