"""Analysis layer - Low-level pitch estimation.

This layer extracts pitch from raw samples:
- Single-frame YIN estimation
- Sliding-window f0 tracks over a buffer
"""

from .yin import (
    YinConfig,
    PitchEstimate,
    estimate_f0,
    difference_function,
    cumulative_mean_normalized_difference,
)
from .pitch import PitchAnalyzer

__all__ = [
    "YinConfig",
    "PitchEstimate",
    "estimate_f0",
    "difference_function",
    "cumulative_mean_normalized_difference",
    "PitchAnalyzer",
]
