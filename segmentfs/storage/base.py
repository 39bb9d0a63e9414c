"""Protocol for the object storage service a stream reads from."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStore(Protocol):
    """Two-operation view of an object storage service."""

    def get_object_size(self, bucket: str, key: str) -> int:
        """Return the size in bytes of object `key` in `bucket`."""
        ...

    def read_range(self, bucket: str, key: str, start: int, end: int) -> bytes:
        """Return the bytes of `key` in the inclusive range [start, end].

        Implementations raise StorageError subclasses on failure.
        """
        ...
