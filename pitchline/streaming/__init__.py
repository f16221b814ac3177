"""Streaming layer - Live pitch tracking.

This layer turns a live sample stream into smoothed pitch points:
- Pull-based frame sources and the tracker context (source + clock)
- Tick-driven tracker with EMA smoothing and a bounded point channel
- Bounded point history for display
"""

from .source import FrameSource, RingBufferSource, TrackerContext
from .history import PitchPoint, PitchHistory
from .tracker import (
    StreamingTracker,
    TrackerConfig,
    TrackerState,
    IntervalTrigger,
)

__all__ = [
    "FrameSource",
    "RingBufferSource",
    "TrackerContext",
    "PitchPoint",
    "PitchHistory",
    "StreamingTracker",
    "TrackerConfig",
    "TrackerState",
    "IntervalTrigger",
]
