from ..storage.base import ObjectStore
from ..storage.exceptions import ShortReadError


class Segment:
    """One stored object taking part in a virtual stream.

    The size is captured once when the segment is created and never changes.
    The store handle is shared with the owning stream and the other segments.
    """

    def __init__(self, store: ObjectStore, bucket: str, key: str, size: int):
        self._store = store
        self.bucket = bucket
        self.key = key
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def fetch_into(self, buffer: memoryview, local_offset: int) -> int:
        """Fill `buffer` with the bytes starting at `local_offset` in this object.

        The caller guarantees ``local_offset + len(buffer) <= size``.
        Issues a single range request for [local_offset, local_offset + len(buffer) - 1].

        Raises:
            ShortReadError: If the store returned fewer bytes than requested
            StorageError: Propagated from the store unmodified
        """
        length = len(buffer)
        data = self._store.read_range(self.bucket, self.key, local_offset, local_offset + length - 1)
        if len(data) < length:
            raise ShortReadError(self.key, length, len(data))
        buffer[:] = data[:length]
        return length

    def __repr__(self) -> str:
        return f"Segment(bucket={self.bucket!r}, key={self.key!r}, size={self._size})"
