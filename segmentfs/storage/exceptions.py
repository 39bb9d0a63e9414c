"""
Custom exceptions for object storage access.
"""

class StorageError(Exception):
    """Base exception for all object storage errors.

    ``bytes_read`` is set by a stream read that had already written some
    bytes into the caller's buffer before the failure.
    """
    bytes_read = 0

class ResourceNotFoundError(StorageError):
    """Raised when the remote object cannot be found (404)."""
    pass

class RangeNotSupportedError(StorageError):
    """Raised when the server does not support byte range requests."""
    pass

class ObjectSizeError(StorageError):
    """Raised when object size cannot be determined."""
    pass

class ShortReadError(StorageError):
    """Raised when a range fetch returns fewer bytes than requested.

    This means the recorded size of the object no longer matches what is stored.
    """

    def __init__(self, key: str, expected: int, actual: int):
        super().__init__(f"Short read from {key}: expected {expected} bytes, got {actual}")
        self.key = key
        self.expected = expected
        self.actual = actual
