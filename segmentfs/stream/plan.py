from dataclasses import dataclass
from typing import List, Sequence

@dataclass(frozen=True)
class FetchPlan:
    """One range fetch needed to serve a read on a virtual stream.

    A read that crosses segment boundaries resolves to several plans, one per
    segment touched, in segment order. Each plan fills the slice
    ``buffer[buffer_offset:buffer_offset + length]`` of the destination.

    Attributes:
        segment_index: Position of the segment in the stream
        local_offset: Offset of the first byte within the segment
        length: Number of bytes to fetch (always > 0)
        buffer_offset: Where the fetched bytes go in the destination buffer
    """
    segment_index: int
    local_offset: int
    length: int
    buffer_offset: int

    @property
    def end(self) -> int:
        """Inclusive end offset within the segment."""
        return self.local_offset + self.length - 1


def plan_reads(sizes: Sequence[int], offset: int, length: int) -> List[FetchPlan]:
    """Resolve a logical [offset, offset + length) read into per-segment fetches.

    Segments are walked in order. Segments lying wholly before the offset are
    skipped (zero-sized ones always are). The first touched segment is read
    from the remaining local offset, later ones from 0, until `length` bytes
    are covered or the segments run out. Reads reaching past the end are
    clamped to the total size; an offset at or past the end gives no plans.

    Args:
        sizes: Segment sizes in stream order
        offset: Logical start offset (>= 0)
        length: Number of bytes wanted

    Returns:
        Fetch plans in segment order, possibly empty
    """
    plans: List[FetchPlan] = []
    if length <= 0:
        return plans

    off = offset
    filled = 0
    for index, size in enumerate(sizes):
        if off >= size:
            off -= size
            continue

        remaining = length - filled
        if off + remaining > size:
            # read the tail of this segment, the rest comes from the next ones
            count = size - off
            plans.append(FetchPlan(index, off, count, filled))
            filled += count
            off = 0
            continue

        plans.append(FetchPlan(index, off, remaining, filled))
        break

    return plans
