"""Pull-based frame sources for live tracking.

The tracker never talks to a capture device.  Capture code (a sound card
callback, a network receiver, a file player) pushes samples into a source
and the tracker pulls the newest frame once per tick.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from ..core.constants import FRAME_SIZE
from ..core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class FrameSource(ABC):
    """Provides the most recent analysis frame on demand."""

    def __init__(self, sample_rate: int, frame_size: int = FRAME_SIZE):
        if sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {sample_rate}")
        if frame_size <= 0:
            raise ConfigurationError(f"frame_size must be positive, got {frame_size}")
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.closed = False

    @abstractmethod
    def read_frame(self) -> np.ndarray:
        """Return the newest frame_size samples (non-blocking)."""
        pass

    def close(self) -> None:
        """Release the source; idempotent."""
        self.closed = True


class RingBufferSource(FrameSource):
    """Keeps the latest samples written by a producer.

    Behaves like an analyser node: read_frame() always returns the newest
    frame_size samples, zero-padded at the front until enough samples have
    arrived.
    """

    def __init__(
        self,
        sample_rate: int,
        frame_size: int = FRAME_SIZE,
        capacity: Optional[int] = None,
    ):
        """
        Initialize RingBufferSource.

        Args:
            sample_rate: Sample rate of the written samples
            frame_size: Samples returned per read
            capacity: Ring size in samples (default: 4 frames)
        """
        super().__init__(sample_rate, frame_size)
        self.capacity = max(capacity or 4 * frame_size, frame_size)
        self._ring = np.zeros(self.capacity, dtype=np.float32)
        self._write_pos = 0
        self.samples_written = 0

    def write(self, samples: np.ndarray) -> None:
        """Append samples, overwriting the oldest ones when full."""
        if self.closed:
            raise RuntimeError("Cannot write to a closed frame source")

        data = np.asarray(samples, dtype=np.float32).ravel()
        if data.size >= self.capacity:
            data = data[-self.capacity :]

        end = self._write_pos + data.size
        if end <= self.capacity:
            self._ring[self._write_pos : end] = data
        else:
            split = self.capacity - self._write_pos
            self._ring[self._write_pos :] = data[:split]
            self._ring[: data.size - split] = data[split:]

        self._write_pos = end % self.capacity
        self.samples_written += int(np.asarray(samples).size)

    def read_frame(self) -> np.ndarray:
        # Unroll the ring so the newest sample is last
        ordered = np.roll(self._ring, -self._write_pos)
        frame = ordered[-self.frame_size :].copy()
        available = min(self.samples_written, self.frame_size)
        if available < self.frame_size:
            frame[: self.frame_size - available] = 0.0
        return frame


@dataclass
class TrackerContext:
    """Everything a tracker needs from the outside world.

    Attributes:
        source: Where frames come from
        clock: Monotonic clock in seconds (e.g. the audio device clock)
    """

    source: FrameSource
    clock: Callable[[], float] = field(default=time.monotonic)

    @property
    def sample_rate(self) -> int:
        return self.source.sample_rate

    def close(self) -> None:
        """Tear down the context and its source."""
        if not self.source.closed:
            logger.debug("Closing tracker context")
        self.source.close()

    def __enter__(self) -> "TrackerContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
