"""pitchline - Monophonic pitch tracking and melody segmentation.

Architecture Layers:
    1. core/          - Note type, constants, pitch/MIDI/name conversions
    2. processing/    - Pitch track denoising (median) and smoothing (EMA)
    3. analysis/      - YIN frame estimation and sliding-window f0 tracks
    4. transcription/ - Batch segmentation of a buffer into notes
    5. streaming/     - Tick-driven live tracking over a frame source
    6. input/         - Audio file loading
    7. output/        - Export (JSON note records, MIDI)
"""

__version__ = "0.1.0"

# Core types
from .core import Note, ConfigurationError

# Analysis layer
from .analysis import YinConfig, PitchEstimate, PitchAnalyzer, estimate_f0

# Processing layer
from .processing import median_filter, ema

# Transcription layer
from .transcription import MonophonicTranscriber, SegmenterConfig

# Streaming layer
from .streaming import (
    StreamingTracker,
    TrackerConfig,
    TrackerContext,
    RingBufferSource,
    PitchPoint,
    PitchHistory,
)

# Input layer
from .input import AudioLoader

# Output layer
from .output import MIDIExporter, save_notes, load_notes

__all__ = [
    # Core
    "Note",
    "ConfigurationError",
    # Analysis
    "YinConfig",
    "PitchEstimate",
    "PitchAnalyzer",
    "estimate_f0",
    # Processing
    "median_filter",
    "ema",
    # Transcription
    "MonophonicTranscriber",
    "SegmenterConfig",
    # Streaming
    "StreamingTracker",
    "TrackerConfig",
    "TrackerContext",
    "RingBufferSource",
    "PitchPoint",
    "PitchHistory",
    # Input
    "AudioLoader",
    # Output
    "MIDIExporter",
    "save_notes",
    "load_notes",
]
