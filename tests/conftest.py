"""Shared signal generators for the test suite."""

import numpy as np
import pytest


def generate_sine_wave(freq: float, duration: float, sr: int = 44100, amplitude: float = 0.5) -> np.ndarray:
    """Generate a sine wave at given frequency."""
    t = np.arange(int(round(sr * duration))) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def generate_silence(duration: float, sr: int = 44100) -> np.ndarray:
    """Generate silence."""
    return np.zeros(int(round(sr * duration)), dtype=np.float32)


@pytest.fixture
def sample_rate():
    return 44100


@pytest.fixture
def sine():
    return generate_sine_wave


@pytest.fixture
def silence():
    return generate_silence


@pytest.fixture
def two_tone(sample_rate):
    """A3 for 1 s, 0.2 s of silence, then A4 for 1 s."""
    return np.concatenate([
        generate_sine_wave(220.0, 1.0, sample_rate),
        generate_silence(0.2, sample_rate),
        generate_sine_wave(440.0, 1.0, sample_rate),
    ])
