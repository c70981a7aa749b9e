"""Precise histograms fed directly or through a thread-safe sender."""

from __future__ import annotations

import queue
from typing import Any, Generic, Iterable, TypeVar

T = TypeVar("T")


class HistogramSender(Generic[T]):
    """Cloneable handle that feeds observations to a histogram from any thread."""

    def __init__(self, channel: queue.SimpleQueue) -> None:
        self._channel = channel

    def observe(self, value: T) -> None:
        """Queue a value; it is recorded on the histogram's next receive_all()."""
        self._channel.put(value)


class PreciseHistogram(Generic[T]):
    """Keeps every observed point so that exact percentiles can be computed.

    Works with any ordered values that support ``+`` and ``// int``,
    such as ``int`` or ``datetime.timedelta``.
    """

    def __init__(self, channel: queue.SimpleQueue | None = None) -> None:
        self._points: list[T] = []
        self._sum: Any = None
        self._count = 0
        self._channel = channel if channel is not None else queue.SimpleQueue()

    def observe(self, point: T) -> None:
        """Record one point."""
        self._points.append(point)
        self._sum = point if self._sum is None else self._sum + point
        self._count += 1

    def avg(self) -> T | None:
        """Running sum divided by the number of points currently held."""
        if not self._points:
            return None
        return self._sum // len(self._points)

    def total_sum(self) -> Any:
        """Running sum; not reset by clear()."""
        return 0 if self._sum is None else self._sum

    def total_count(self) -> int:
        """Running count; not reset by clear()."""
        return self._count

    def pcts(self, pcts: Iterable[int]) -> list[T] | None:
        """Return the points at the given per-mille ranks, or None when empty."""
        if not self._points:
            return None
        # Sorting in place keeps later calls fast on already sorted data.
        self._points.sort()
        return [self._points[self._pct1000_index(pct)] for pct in pcts]

    def pct(self, pct1000: int) -> T | None:
        """Return the point at one per-mille rank, or None when empty."""
        result = self.pcts([pct1000])
        return None if result is None else result[0]

    def receive_all(self) -> None:
        """Record every value queued by senders so far."""
        while True:
            try:
                value = self._channel.get_nowait()
            except queue.Empty:
                return
            self.observe(value)

    def clear_receive_all(self) -> None:
        """Drop held points, then record everything queued by senders."""
        self.clear()
        self.receive_all()

    def clear(self) -> None:
        """Drop held points; running sum and count are kept."""
        self._points.clear()

    def _pct1000_index(self, pct1000: int) -> int:
        if not 0 <= pct1000 < 1000:
            raise ValueError(f"percentile must be in [0, 1000), got {pct1000}")
        return len(self._points) * pct1000 // 1000


def histogram() -> tuple[PreciseHistogram, HistogramSender]:
    """Create a histogram together with a sender feeding it."""
    channel: queue.SimpleQueue = queue.SimpleQueue()
    return PreciseHistogram(channel), HistogramSender(channel)