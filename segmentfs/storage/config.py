from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(frozen=True)
class StorageClientConfig:
    """
    Settings for talking to an S3-compatible object store over HTTP.

    Retries happen in the transport (urllib3) and only for the statuses and
    methods listed here; the stream layer itself never retries.

    Attributes:
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait between bytes of a response
        retries: Transport retries per request, 0 disables them
        backoff_factor: Exponential backoff factor between retries
        retry_statuses: HTTP statuses that trigger a retry
        retry_methods: HTTP methods that may be retried (size lookups and range reads)
        pool_maxsize: Connections kept per host; concurrent range reads beyond this block
        headers: Headers sent on every request, e.g. Authorization for a gateway
    """
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    retries: int = 3
    backoff_factor: float = 0.5
    retry_statuses: Tuple[int, ...] = (500, 502, 503, 504)
    retry_methods: Tuple[str, ...] = ("HEAD", "GET")
    pool_maxsize: int = 10
    headers: Dict[str, str] = field(default_factory=lambda: {
        'User-Agent': 'SegmentFS-ObjectStore/1.0',
        # byte ranges must address the stored bytes, not a compressed encoding
        'Accept-Encoding': 'identity',
    })

    def __post_init__(self):
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValueError(f"timeouts must be positive, got connect={self.connect_timeout} read={self.read_timeout}")
        if self.retries < 0:
            raise ValueError(f"retries must be non-negative, got {self.retries}")
        if self.pool_maxsize <= 0:
            raise ValueError(f"pool_maxsize must be positive, got {self.pool_maxsize}")

    @property
    def timeout(self) -> Tuple[float, float]:
        """(connect, read) pair in the form requests expects."""
        return (self.connect_timeout, self.read_timeout)
