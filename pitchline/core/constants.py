"""Global constants for pitchline."""

# Pitch class tables (index 0 = C)
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
SOLFEGE_NAMES = [
    "Do", "Do#", "Re", "Re#", "Mi", "Fa",
    "Fa#", "Sol", "Sol#", "La", "La#", "Si",
]

# Tuning reference (12-tone equal temperament)
A4_HZ = 440.0
A4_MIDI = 69

# Audio processing defaults
DEFAULT_SR = 44100
FRAME_SIZE = 2048
HOP_SIZE = 512

# YIN defaults
DEFAULT_THRESHOLD = 0.12
DEFAULT_PROBABILITY_THRESHOLD = 0.1
DEFAULT_MIN_FREQ = 50.0
DEFAULT_MAX_FREQ = 1200.0

# Segmentation
MEDIAN_WINDOW = 7
MIN_NOTE_DURATION = 0.08  # seconds

# Streaming
EMA_ALPHA = 0.25
TICK_INTERVAL = 1.0 / 60.0  # one tick per display refresh
POINT_QUEUE_SIZE = 256
HISTORY_SECONDS = 30.0
