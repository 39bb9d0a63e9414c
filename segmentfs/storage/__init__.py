from .base import ObjectStore
from .client import HTTPObjectStore
from .config import StorageClientConfig
from .memory import InMemoryObjectStore
from .exceptions import (
    StorageError,
    ResourceNotFoundError,
    RangeNotSupportedError,
    ObjectSizeError,
    ShortReadError
)

__all__ = [
    "ObjectStore",
    "HTTPObjectStore",
    "StorageClientConfig",
    "InMemoryObjectStore",
    "StorageError",
    "ResourceNotFoundError",
    "RangeNotSupportedError",
    "ObjectSizeError",
    "ShortReadError",
]
