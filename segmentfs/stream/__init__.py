from .segment import Segment
from .plan import FetchPlan, plan_reads
from .virtual import VirtualStream, open_virtual_stream
from .exceptions import InvalidWhenceError, InvalidOffsetError

__all__ = [
    "Segment",
    "FetchPlan",
    "plan_reads",
    "VirtualStream",
    "open_virtual_stream",
    "InvalidWhenceError",
    "InvalidOffsetError",
]
