"""Exponential smoothing for live pitch values."""

import math
from typing import Optional

from ..core.constants import EMA_ALPHA


def ema(previous: Optional[float], value: float, alpha: float = EMA_ALPHA) -> float:
    """
    One step of an exponential moving average.

    Args:
        previous: Last smoothed value, or None before the first sample
        value: New observation
        alpha: Weight of the new observation (0-1)

    Returns:
        Smoothed value; the first observation passes through unchanged
    """
    if previous is None or not math.isfinite(previous):
        return value
    return previous * (1.0 - alpha) + value * alpha
