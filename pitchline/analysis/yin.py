"""Single-frame F0 estimation with the YIN algorithm.

Steps, for one frame x of length L and lags tau in [min_lag, max_lag]:

1. Difference function d(tau) = sum (x[i] - x[i + tau])^2 over the first
   N = min(L, 2 * max_lag) samples.
2. Cumulative mean normalized difference (CMND)
   cmnd(tau) = d(tau) * tau / sum(d(1..tau)), with cmnd(0) = 1.
3. The first lag whose CMND dips below the threshold is taken as the period,
   not the global minimum.
4. Parabolic interpolation around that lag refines the period estimate.

The confidence reported is 1 - cmnd(tau) at the integer lag.  The voicing
gate is tuned against that value; it is not recomputed at the refined lag.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from ..core.constants import (
    DEFAULT_MAX_FREQ,
    DEFAULT_MIN_FREQ,
    DEFAULT_PROBABILITY_THRESHOLD,
    DEFAULT_SR,
    DEFAULT_THRESHOLD,
)
from ..core.errors import ConfigurationError


@dataclass(frozen=True)
class YinConfig:
    """Configuration for YIN estimation.

    Attributes:
        threshold: CMND dip threshold (lower = fewer false positives,
            more missed frames)
        probability_threshold: Minimum confidence to report a frequency
        sample_rate: Sample rate of the frames in Hz
        min_freq: Lowest detectable frequency in Hz (sets max_lag)
        max_freq: Highest detectable frequency in Hz (sets min_lag)
    """

    threshold: float = DEFAULT_THRESHOLD
    probability_threshold: float = DEFAULT_PROBABILITY_THRESHOLD
    sample_rate: int = DEFAULT_SR
    min_freq: float = DEFAULT_MIN_FREQ
    max_freq: float = DEFAULT_MAX_FREQ

    def __post_init__(self):
        if not self.sample_rate > 0:
            raise ConfigurationError(
                f"sample_rate must be positive, got {self.sample_rate}"
            )
        if not self.min_freq > 0:
            raise ConfigurationError(f"min_freq must be positive, got {self.min_freq}")
        if not self.max_freq > self.min_freq:
            raise ConfigurationError(
                f"max_freq ({self.max_freq}) must be greater than "
                f"min_freq ({self.min_freq})"
            )
        if not 0.0 < self.threshold < 1.0:
            raise ConfigurationError(
                f"threshold must be in (0, 1), got {self.threshold}"
            )
        if not 0.0 <= self.probability_threshold <= 1.0:
            raise ConfigurationError(
                "probability_threshold must be in [0, 1], "
                f"got {self.probability_threshold}"
            )
        if self.min_lag < 1:
            raise ConfigurationError(
                f"max_freq ({self.max_freq} Hz) is above the sample rate "
                f"({self.sample_rate} Hz)"
            )
        if self.min_lag >= self.max_lag:
            raise ConfigurationError(
                f"Frequency range {self.min_freq}-{self.max_freq} Hz spans no "
                f"lag at {self.sample_rate} Hz"
            )

    @property
    def min_lag(self) -> int:
        """Shortest period searched, in samples."""
        return int(math.floor(self.sample_rate / self.max_freq))

    @property
    def max_lag(self) -> int:
        """Longest period searched, in samples."""
        return int(math.floor(self.sample_rate / self.min_freq))

    def with_sample_rate(self, sample_rate: int) -> "YinConfig":
        """Return a validated copy for another sample rate."""
        return replace(self, sample_rate=sample_rate)


@dataclass(frozen=True)
class PitchEstimate:
    """Result of one frame estimation."""

    freq_hz: Optional[float]  # None when unvoiced
    probability: float  # 0-1

    @property
    def voiced(self) -> bool:
        return self.freq_hz is not None


UNVOICED = PitchEstimate(freq_hz=None, probability=0.0)


def difference_function(frame: np.ndarray, config: YinConfig) -> np.ndarray:
    """
    Compute d(tau) for tau in 0..max_lag.

    Lags below min_lag and lags with no overlapping sample pair are left
    at zero.
    """
    x = np.asarray(frame, dtype=np.float64)
    max_lag = config.max_lag
    n = min(len(x), 2 * max_lag)

    diff = np.zeros(max_lag + 1)
    for tau in range(config.min_lag, min(max_lag, n - 1) + 1):
        delta = x[: n - tau] - x[tau:n]
        diff[tau] = np.dot(delta, delta)
    return diff


def cumulative_mean_normalized_difference(
    frame: np.ndarray,
    config: YinConfig,
) -> np.ndarray:
    """
    Compute cmnd(tau) for tau in 0..max_lag.

    Where the running sum of d(1..tau) is exactly zero the ratio is
    undefined; cmnd(tau) is set to 0 there instead of propagating NaN.
    """
    return _normalize(difference_function(frame, config))


def _normalize(diff: np.ndarray) -> np.ndarray:
    cmnd = np.ones_like(diff)
    running = np.cumsum(diff[1:])
    taus = np.arange(1, len(diff))
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = diff[1:] * taus / running
    cmnd[1:] = np.where(running == 0.0, 0.0, ratio)
    return cmnd


def estimate_f0(frame: np.ndarray, config: YinConfig) -> PitchEstimate:
    """
    Estimate the fundamental frequency of one frame.

    Args:
        frame: Mono samples in [-1, 1]
        config: YIN configuration (sample rate must match the frame)

    Returns:
        PitchEstimate; freq_hz is None for unvoiced frames.  Short, silent
        or constant frames are unvoiced, never an error.
    """
    x = np.asarray(frame, dtype=np.float64)
    min_lag = config.min_lag
    n = min(len(x), 2 * config.max_lag)
    # A lag needs at least one sample pair
    max_lag = min(config.max_lag, n - 1)
    if max_lag < min_lag:
        return UNVOICED

    diff = difference_function(x, config)
    if not np.any(diff[min_lag : max_lag + 1]):
        # No variation at any lag: the period is undefined, not zero
        return UNVOICED

    cmnd = _normalize(diff)

    below = np.flatnonzero(cmnd[min_lag : max_lag + 1] < config.threshold)
    if below.size == 0:
        return UNVOICED
    tau = min_lag + int(below[0])

    better_tau = float(tau)
    if tau - 1 >= min_lag and tau + 1 <= max_lag:
        s0, s1, s2 = cmnd[tau - 1], cmnd[tau], cmnd[tau + 1]
        denom = 2.0 * s1 - s2 - s0
        if denom != 0.0:
            better_tau = tau + (s2 - s0) / (2.0 * denom)
        if better_tau <= 0.0:
            better_tau = float(tau)

    probability = float(np.clip(1.0 - cmnd[tau], 0.0, 1.0))
    if probability < config.probability_threshold:
        return PitchEstimate(freq_hz=None, probability=probability)

    return PitchEstimate(
        freq_hz=float(config.sample_rate / better_tau),
        probability=probability,
    )
