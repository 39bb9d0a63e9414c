import logging
import threading
import time
from typing import Iterable, Optional, Tuple

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

trace_theme = Theme({
    "open": "bold cyan",
    "read": "cyan",
    "failed": "bold red",
    "key": "bold blue",
})

logger = logging.getLogger("SegmentFS")


class FlowChartLogger:
    """
    Debug trace of one stream, drawn as a chain of rich panels.

    Each stream opened with debug=True gets its own tracer, so timers and the
    chain of arrows are never shared between streams. A panel and the arrow
    leading into it go out in a single print under the tracer's lock.
    """
    def __init__(self, label: str, console: Optional[Console] = None):
        self.label = label
        self.console = console or Console(theme=trace_theme, stderr=True)
        self._lock = threading.Lock()
        self._started = time.monotonic()
        self._steps = 0

    def elapsed(self) -> str:
        return f"{time.monotonic() - self._started:.4f}s"

    def _emit(self, title: str, style: str, details: dict, fetches: Optional[Iterable[Tuple[str, int, int]]] = None):
        body = [Text(title, style="bold")]

        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="key", justify="right")
        grid.add_column(justify="left")
        for k, v in details.items():
            grid.add_row(f"{k}:", str(v))
        body.append(grid)

        if fetches:
            table = Table(show_edge=False, header_style="key")
            table.add_column("Object")
            table.add_column("Range", justify="right")
            for key, start, end in fetches:
                table.add_row(str(key), f"bytes={start}-{end}")
            body.append(table)

        with self._lock:
            parts = []
            if self._steps:
                parts.append(Text("   │\n   ▼", style="dim"))
            self._steps += 1
            parts.append(Panel(Group(*body), style=style, subtitle=f"{self.label} #{self._steps}", expand=False, padding=(0, 2)))
            self.console.print(Group(*parts))

    def opened(self, bucket: str, segments: int, size: int):
        self._emit("Stream Opened", "open", {
            "Bucket": bucket,
            "Segments": segments,
            "Total Size": size,
            "Duration": self.elapsed(),
        })

    def read_plan(self, offset: int, length: int, fetches):
        """One panel per planned read; `fetches` holds (key, start, end) rows."""
        fetches = list(fetches)
        self._emit("Read Plan", "read", {
            "Offset": offset,
            "Length": length,
            "Fetches": len(fetches),
        }, fetches=fetches)

    def failed(self, title: str, details: dict):
        self._emit(title, "failed", details)
