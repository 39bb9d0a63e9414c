"""Shared fixtures for stream tests."""

import pytest

from segmentfs.storage.memory import InMemoryObjectStore
from segmentfs.stream.virtual import VirtualStream


BUCKET = "chunks"


@pytest.fixture
def store():
    """Store holding the two-object layout: a (10 bytes) + b (5 bytes)."""
    s = InMemoryObjectStore()
    s.put(BUCKET, "a", bytes(range(10)))
    s.put(BUCKET, "b", bytes(range(100, 105)))
    return s


@pytest.fixture
def flat():
    return bytes(range(10)) + bytes(range(100, 105))


@pytest.fixture
def stream(store):
    s = VirtualStream(store, BUCKET, ["a", "b"])
    store.calls.clear()  # drop the size lookups
    yield s
    s.close()


@pytest.fixture
def make_stream():
    """Build a stream from an ordered list of (key, data) pairs."""
    def _make(parts, **kwargs):
        s = InMemoryObjectStore()
        for key, data in parts:
            s.put(BUCKET, key, data)
        vs = VirtualStream(s, BUCKET, [key for key, _ in parts], **kwargs)
        s.calls.clear()
        return vs, s
    return _make
