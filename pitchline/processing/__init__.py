"""Processing layer - Pitch track denoising and smoothing.

This layer cleans raw per-frame pitch values:
- NaN-aware running median (outlier suppression on the batch path)
- Exponential moving average (live smoothing)
"""

from .median import median_filter
from .smoothing import ema

__all__ = [
    "median_filter",
    "ema",
]
