"""Bounded history of live pitch points."""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

from ..core.constants import HISTORY_SECONDS


@dataclass(frozen=True)
class PitchPoint:
    """One timestamped live pitch reading."""

    t_sec: float  # Source time in seconds
    freq: Optional[float]  # Smoothed frequency in Hz, None when unvoiced
    probability: float  # Estimator confidence (0-1)

    @property
    def voiced(self) -> bool:
        return self.freq is not None


class PitchHistory:
    """Keeps the points from the last retain_seconds of source time."""

    def __init__(self, retain_seconds: float = HISTORY_SECONDS):
        self.retain_seconds = retain_seconds
        self._points: Deque[PitchPoint] = deque()

    def append(self, point: PitchPoint) -> None:
        """Add a point and forget everything older than the window."""
        self._points.append(point)
        while self._points and point.t_sec - self._points[0].t_sec > self.retain_seconds:
            self._points.popleft()

    def window(self, start: float, end: float) -> List[PitchPoint]:
        """Points with start <= t_sec <= end."""
        return [p for p in self._points if start <= p.t_sec <= end]

    def clear(self) -> None:
        self._points.clear()

    @property
    def latest(self) -> Optional[PitchPoint]:
        return self._points[-1] if self._points else None

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PitchPoint]:
        return iter(self._points)
