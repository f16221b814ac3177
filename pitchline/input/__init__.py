"""Input layer - Hands recorded audio to the batch path as (samples, sr)."""

from .loader import AudioLoader

__all__ = ["AudioLoader"]
