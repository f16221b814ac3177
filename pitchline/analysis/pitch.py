"""Frame-by-frame pitch tracking over a recorded buffer."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np
import librosa

from ..core.constants import FRAME_SIZE, HOP_SIZE
from ..core.conversion import f0_to_midi
from ..core.errors import ConfigurationError
from .yin import PitchEstimate, YinConfig, estimate_f0

logger = logging.getLogger(__name__)


class PitchAnalyzer:
    """Slide a fixed window across a buffer and run YIN on each window."""

    def __init__(
        self,
        config: Optional[YinConfig] = None,
        frame_size: int = FRAME_SIZE,
        hop_length: int = HOP_SIZE,
        n_jobs: int = 1,
    ):
        """
        Initialize PitchAnalyzer.

        Args:
            config: YIN settings; its sample rate is replaced by the
                buffer's sample rate at analysis time
            frame_size: Analysis window in samples
            hop_length: Samples between consecutive windows
            n_jobs: Worker threads for per-window estimation (1 = inline)
        """
        if frame_size <= 0 or hop_length <= 0:
            raise ConfigurationError(
                f"frame_size and hop_length must be positive, "
                f"got {frame_size} and {hop_length}"
            )
        if n_jobs < 1:
            raise ConfigurationError(f"n_jobs must be at least 1, got {n_jobs}")

        self.config = config or YinConfig()
        self.frame_size = frame_size
        self.hop_length = hop_length
        self.n_jobs = n_jobs

    def frame_starts(self, n_samples: int) -> np.ndarray:
        """Start sample of every window that fits inside the buffer."""
        if n_samples < self.frame_size:
            return np.zeros(0, dtype=int)
        return np.arange(0, n_samples - self.frame_size + 1, self.hop_length)

    def estimate_frames(self, audio: np.ndarray, sr: int) -> List[PitchEstimate]:
        """
        Run YIN once per analysis window.

        Returns:
            One PitchEstimate per window, in window order
        """
        config = self.config.with_sample_rate(sr)
        audio = np.asarray(audio, dtype=np.float64)
        starts = self.frame_starts(len(audio))

        def run(start: int) -> PitchEstimate:
            return estimate_f0(audio[start : start + self.frame_size], config)

        if self.n_jobs == 1 or len(starts) < 2:
            return [run(int(s)) for s in starts]

        # Windows are independent; map() hands results back in input order
        with ThreadPoolExecutor(max_workers=self.n_jobs) as pool:
            return list(pool.map(run, (int(s) for s in starts)))

    def detect_f0(
        self,
        audio: np.ndarray,
        sr: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Detect fundamental frequency (f0) over time.

        Args:
            audio: Mono audio array
            sr: Sample rate

        Returns:
            Tuple of (f0 in Hz with NaN for unvoiced frames, probability)
        """
        estimates = self.estimate_frames(audio, sr)
        f0 = np.array(
            [np.nan if e.freq_hz is None else e.freq_hz for e in estimates],
            dtype=float,
        )
        probability = np.array([e.probability for e in estimates], dtype=float)

        logger.debug(
            "Pitch track: %d frames, %d voiced",
            len(f0),
            int(np.count_nonzero(np.isfinite(f0))),
        )
        return f0, probability

    def frame_times(self, n_frames: int, sr: int) -> np.ndarray:
        """Start time in seconds of each analysis window."""
        return librosa.frames_to_time(
            np.arange(n_frames), sr=sr, hop_length=self.hop_length
        )

    def get_pitch_contour(
        self,
        audio: np.ndarray,
        sr: int,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get the unquantized pitch contour.

        Returns:
            Tuple of (times, fractional MIDI pitches with NaN when unvoiced)
        """
        f0, _ = self.detect_f0(audio, sr)
        return self.frame_times(len(f0), sr), f0_to_midi(f0)
