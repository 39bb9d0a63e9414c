"""SegmentFS - read many stored objects as one seekable byte stream."""

from .stream import VirtualStream, open_virtual_stream, InvalidWhenceError, InvalidOffsetError
from .storage import (
    ObjectStore,
    HTTPObjectStore,
    InMemoryObjectStore,
    StorageClientConfig,
    StorageError,
    ResourceNotFoundError,
    RangeNotSupportedError,
    ObjectSizeError,
    ShortReadError
)

__all__ = [
    "VirtualStream",
    "open_virtual_stream",
    "InvalidWhenceError",
    "InvalidOffsetError",
    "ObjectStore",
    "HTTPObjectStore",
    "InMemoryObjectStore",
    "StorageClientConfig",
    "StorageError",
    "ResourceNotFoundError",
    "RangeNotSupportedError",
    "ObjectSizeError",
    "ShortReadError",
]
