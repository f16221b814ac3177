"""Live pitch tracking driven by a periodic trigger.

Each tick pulls the newest frame from the context's source, runs YIN,
smooths voiced frequencies with an EMA and stamps the result with source
time.  Points go to an optional synchronous callback and to a bounded
asyncio queue.

Everything runs on one event loop.  The only suspension point is the
await on the trigger between ticks, so tracker state is never touched
concurrently and needs no locks.  An exception raised inside a tick or by
the trigger ends the loop: it is logged and the tracker goes idle.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

from ..analysis import PitchEstimate, YinConfig, estimate_f0
from ..core.constants import EMA_ALPHA, POINT_QUEUE_SIZE, TICK_INTERVAL
from ..core.errors import ConfigurationError
from ..processing import ema
from .history import PitchPoint
from .source import TrackerContext

logger = logging.getLogger(__name__)

PointCallback = Callable[[PitchPoint], None]


class IntervalTrigger:
    """Fixed-rate timer: one tick every interval seconds."""

    def __init__(self, interval: float = TICK_INTERVAL):
        if interval < 0:
            raise ConfigurationError(f"interval must not be negative, got {interval}")
        self.interval = interval

    async def wait(self) -> None:
        await asyncio.sleep(self.interval)


@dataclass
class TrackerConfig:
    """Configuration for live tracking.

    Attributes:
        alpha: EMA weight of each new voiced frequency (default: 0.25)
        interval: Seconds between ticks for the default trigger
        queue_size: Capacity of the point channel; the oldest point is
            dropped when a slow consumer lets it fill up
    """

    alpha: float = EMA_ALPHA
    interval: float = TICK_INTERVAL
    queue_size: int = POINT_QUEUE_SIZE

    def __post_init__(self):
        if not 0.0 < self.alpha <= 1.0:
            raise ConfigurationError(f"alpha must be in (0, 1], got {self.alpha}")
        if self.queue_size < 1:
            raise ConfigurationError(
                f"queue_size must be positive, got {self.queue_size}"
            )


@dataclass
class TrackerState:
    """Mutable state owned by one tracker."""

    reference_clock: float = 0.0
    last_ema: Optional[float] = None
    generation: int = 0
    ticks: int = 0


class StreamingTracker:
    """Turns a live frame source into a smoothed pitch point stream."""

    def __init__(
        self,
        context: TrackerContext,
        yin_config: Optional[YinConfig] = None,
        on_point: Optional[PointCallback] = None,
        config: Optional[TrackerConfig] = None,
        trigger=None,
    ):
        """
        Initialize StreamingTracker.

        Args:
            context: Frame source and clock
            yin_config: YIN settings; the sample rate comes from the source
            on_point: Called synchronously with every point; must not block
            config: Smoothing, tick rate and channel size
            trigger: Object with an async wait() that paces ticks
                (default: IntervalTrigger(config.interval))
        """
        self.context = context
        self.config = config or TrackerConfig()
        self.yin_config = (yin_config or YinConfig()).with_sample_rate(
            context.sample_rate
        )
        self.on_point = on_point
        self.trigger = trigger or IntervalTrigger(self.config.interval)
        self.state = TrackerState()
        self.dropped_points = 0
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=self.config.queue_size)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self, start_offset: float = 0.0) -> None:
        """
        Start ticking on the running event loop.

        Timestamps are reported in source time: the first tick reads
        roughly start_offset seconds.  A tracker that is already running is
        stopped first, so at most one tick loop exists.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        loop = asyncio.get_running_loop()
        self.stop()

        self.state.reference_clock = self.context.clock() - start_offset
        self.state.generation += 1
        self._task = loop.create_task(self._run(self.state.generation))
        logger.debug(
            "Tracker started (generation %d, offset %.3fs)",
            self.state.generation,
            start_offset,
        )

    def stop(self) -> None:
        """Stop ticking; idempotent and safe in any state."""
        task = self._task
        if task is None:
            return

        self._task = None
        # Invalidate the loop before cancelling so a resumed wait never ticks
        self.state.generation += 1
        task.cancel()
        logger.debug("Tracker stopped after %d ticks", self.state.ticks)

    async def _run(self, generation: int) -> None:
        try:
            while generation == self.state.generation:
                await self.trigger.wait()
                if generation != self.state.generation:
                    break
                self.tick()
        except Exception:
            logger.exception("Tracker loop failed after %d ticks", self.state.ticks)
            # A newer loop may already own the tracker
            if generation == self.state.generation:
                self._task = None
                self.state.generation += 1

    def tick(self) -> PitchPoint:
        """Analyze the newest frame and emit one point."""
        frame = self.context.source.read_frame()
        estimate = estimate_f0(frame, self.yin_config)
        point = self._to_point(estimate)
        self.state.ticks += 1
        self._emit(point)
        return point

    def _to_point(self, estimate: PitchEstimate) -> PitchPoint:
        freq = None
        if estimate.freq_hz is not None:
            freq = ema(self.state.last_ema, estimate.freq_hz, self.config.alpha)
            self.state.last_ema = freq

        return PitchPoint(
            t_sec=self.context.clock() - self.state.reference_clock,
            freq=freq,
            probability=estimate.probability,
        )

    def _emit(self, point: PitchPoint) -> None:
        if self.on_point is not None:
            self.on_point(point)

        if self._queue.full():
            self._queue.get_nowait()
            self.dropped_points += 1
            if self.dropped_points == 1 or self.dropped_points % 100 == 0:
                logger.debug(
                    "Point channel full, dropped %d oldest points so far",
                    self.dropped_points,
                )
        self._queue.put_nowait(point)

    async def get_point(self) -> PitchPoint:
        """Wait for the next point on the channel."""
        return await self._queue.get()

    async def points(self) -> AsyncIterator[PitchPoint]:
        """Iterate over points as they are produced."""
        while True:
            yield await self._queue.get()

    def close(self) -> None:
        """Stop and tear down the context."""
        self.stop()
        self.context.close()
