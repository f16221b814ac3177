"""Tests for single-frame YIN estimation and the sliding-window analyzer."""

import numpy as np
import pytest

from pitchline.analysis import (
    PitchAnalyzer,
    YinConfig,
    cumulative_mean_normalized_difference,
    difference_function,
    estimate_f0,
)
from pitchline.core import ConfigurationError


class TestYinConfig:
    """Tests for YinConfig validation and lag bounds."""

    def test_default_lags(self):
        config = YinConfig()
        assert config.sample_rate == 44100
        assert config.min_lag == 36  # floor(44100 / 1200)
        assert config.max_lag == 882  # floor(44100 / 50)

    @pytest.mark.parametrize("kwargs", [
        {"threshold": 0.0},
        {"threshold": 1.0},
        {"probability_threshold": 1.5},
        {"probability_threshold": -0.1},
        {"min_freq": 0.0},
        {"min_freq": 500.0, "max_freq": 400.0},
        {"sample_rate": 0},
        # max_freq above the sample rate leaves no lag to search
        {"sample_rate": 1000, "max_freq": 1200.0},
    ])
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            YinConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            YinConfig(threshold=2.0)

    def test_with_sample_rate(self):
        config = YinConfig(threshold=0.05).with_sample_rate(22050)
        assert config.sample_rate == 22050
        assert config.threshold == 0.05
        assert config.max_lag == 441

    def test_with_invalid_sample_rate(self):
        with pytest.raises(ConfigurationError):
            YinConfig().with_sample_rate(0)


class TestEstimateF0:
    """Tests for estimate_f0 on synthetic frames."""

    @pytest.mark.parametrize("freq", [220.0, 440.0])
    def test_pure_sine_within_one_percent(self, sine, freq):
        config = YinConfig(threshold=0.02)
        frame = sine(freq, 2048 / 44100)

        estimate = estimate_f0(frame, config)

        assert estimate.voiced
        assert estimate.freq_hz == pytest.approx(freq, rel=0.01)
        assert estimate.probability > 0.9

    def test_default_threshold_is_close(self, sine):
        estimate = estimate_f0(sine(440.0, 2048 / 44100), YinConfig())
        assert estimate.voiced
        assert estimate.freq_hz == pytest.approx(440.0, rel=0.03)

    def test_silence_is_unvoiced(self, silence):
        estimate = estimate_f0(silence(2048 / 44100), YinConfig())
        assert estimate.freq_hz is None
        assert estimate.probability == 0.0

    def test_constant_frame_is_unvoiced(self):
        estimate = estimate_f0(np.full(2048, 0.3), YinConfig())
        assert not estimate.voiced

    def test_short_frame_is_unvoiced(self):
        estimate = estimate_f0(np.ones(10), YinConfig())
        assert estimate.freq_hz is None
        assert estimate.probability == 0.0

    def test_empty_frame_is_unvoiced(self):
        assert not estimate_f0(np.zeros(0), YinConfig()).voiced

    def test_probability_in_range_for_noise(self):
        rng = np.random.default_rng(0)
        for _ in range(5):
            estimate = estimate_f0(rng.standard_normal(2048) * 0.1, YinConfig())
            assert 0.0 <= estimate.probability <= 1.0

    def test_probability_gate(self, sine):
        """A confident frame below a stricter gate keeps its probability."""
        config = YinConfig(probability_threshold=0.999)
        estimate = estimate_f0(sine(440.0, 2048 / 44100), config)
        assert estimate.freq_hz is None
        assert 0.5 < estimate.probability < 0.999

    def test_frequency_within_search_range(self, sine):
        config = YinConfig(threshold=0.05)
        estimate = estimate_f0(sine(330.0, 2048 / 44100), config)
        assert config.min_freq <= estimate.freq_hz <= config.max_freq


class TestDifferenceFunction:
    """Tests for the difference and CMND arrays."""

    def test_cmnd_starts_at_one(self, sine):
        cmnd = cumulative_mean_normalized_difference(sine(440.0, 0.05), YinConfig())
        assert cmnd[0] == 1.0
        assert np.all(np.isfinite(cmnd))
        assert np.all(cmnd >= 0.0)

    def test_difference_has_dip_at_period(self, sine):
        config = YinConfig()
        diff = difference_function(sine(441.0, 0.05), config)
        # 441 Hz at 44.1 kHz repeats every 100 samples
        assert diff[100] < 1e-3 * diff[50]

    def test_zero_running_sum_gives_zero(self):
        cmnd = cumulative_mean_normalized_difference(np.zeros(2048), YinConfig())
        assert cmnd[0] == 1.0
        assert np.all(cmnd[1:] == 0.0)


class TestPitchAnalyzer:
    """Tests for sliding-window f0 tracks."""

    def test_frame_count(self):
        analyzer = PitchAnalyzer()
        assert len(analyzer.frame_starts(2047)) == 0
        # A window may end exactly at the end of the buffer
        assert len(analyzer.frame_starts(2048)) == 1
        assert len(analyzer.frame_starts(2048 + 512)) == 2

    def test_detect_f0_marks_unvoiced_as_nan(self, sine, silence, sample_rate):
        audio = np.concatenate([silence(0.2), sine(440.0, 0.3)])
        f0, probability = PitchAnalyzer().detect_f0(audio, sample_rate)

        assert len(f0) == len(probability)
        assert np.isnan(f0[0])
        assert probability[0] == 0.0
        assert f0[-1] == pytest.approx(440.0, rel=0.03)

    def test_threaded_matches_inline(self, two_tone, sample_rate):
        inline, _ = PitchAnalyzer(n_jobs=1).detect_f0(two_tone, sample_rate)
        threaded, _ = PitchAnalyzer(n_jobs=3).detect_f0(two_tone, sample_rate)
        np.testing.assert_array_equal(inline, threaded)

    def test_frame_times(self, sample_rate):
        times = PitchAnalyzer(hop_length=512).frame_times(3, sample_rate)
        np.testing.assert_allclose(times, [0.0, 512 / 44100, 1024 / 44100])

    def test_pitch_contour(self, sine, sample_rate):
        times, midi = PitchAnalyzer(config=YinConfig(threshold=0.02)).get_pitch_contour(
            sine(440.0, 0.5), sample_rate
        )
        assert len(times) == len(midi)
        assert np.nanmedian(midi) == pytest.approx(69.0, abs=0.2)

    @pytest.mark.parametrize("kwargs", [
        {"frame_size": 0},
        {"hop_length": -1},
        {"n_jobs": 0},
    ])
    def test_invalid_analyzer(self, kwargs):
        with pytest.raises(ConfigurationError):
            PitchAnalyzer(**kwargs)
