"""Tests for the command-line interface."""

import asyncio

import numpy as np
import pytest
import soundfile as sf
from typer.testing import CliRunner

from pitchline.analysis import YinConfig
from pitchline.cli import _run_tracker, app
from pitchline.core import Note
from pitchline.output import load_notes, save_notes

runner = CliRunner()


@pytest.fixture
def two_tone_wav(tmp_path, two_tone, sample_rate):
    path = tmp_path / "two_tone.wav"
    sf.write(str(path), two_tone, sample_rate)
    return path


class TestExtract:
    """Tests for the extract command."""

    def test_extract_writes_notes(self, two_tone_wav, tmp_path):
        output = tmp_path / "notes.json"
        midi = tmp_path / "notes.mid"
        result = runner.invoke(app, [
            "extract", str(two_tone_wav),
            "-o", str(output),
            "--midi", str(midi),
            "--threshold", "0.05",
        ])

        assert result.exit_code == 0, result.output
        assert [n.midi for n in load_notes(str(output))] == [57, 69]
        assert midi.exists()

    def test_default_output_path(self, two_tone_wav):
        result = runner.invoke(app, ["extract", str(two_tone_wav), "--threshold", "0.05"])
        assert result.exit_code == 0, result.output
        assert two_tone_wav.with_suffix(".json").exists()

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["extract", str(tmp_path / "nope.wav")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "audio.xyz"
        path.write_text("dummy content")
        result = runner.invoke(app, ["extract", str(path)])
        assert result.exit_code == 1
        assert "Unsupported format" in result.output

    def test_resample_and_normalize(self, two_tone_wav, tmp_path):
        output = tmp_path / "resampled.json"
        result = runner.invoke(app, [
            "extract", str(two_tone_wav),
            "-o", str(output),
            "--sr", "22050",
            "--normalize",
            "--threshold", "0.05",
            "--json",
        ])

        assert result.exit_code == 0, result.output
        assert '"sample_rate": 22050' in result.output
        assert [n.midi for n in load_notes(str(output))] == [57, 69]

    def test_invalid_sample_rate(self, two_tone_wav):
        result = runner.invoke(app, ["extract", str(two_tone_wav), "--sr", "0"])
        assert result.exit_code == 1

    def test_invalid_threshold(self, two_tone_wav):
        result = runner.invoke(app, ["extract", str(two_tone_wav), "--threshold", "1.5"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestShow:
    """Tests for the show command."""

    @pytest.fixture
    def notes_file(self, tmp_path):
        path = tmp_path / "notes.json"
        save_notes([
            Note(start=0.0, duration=0.5, midi=60),
            Note(start=0.5, duration=0.5, midi=69),
        ], str(path))
        return path

    def test_show_note_names(self, notes_file):
        result = runner.invoke(app, ["show", str(notes_file)])
        assert result.exit_code == 0, result.output
        assert "C4" in result.output
        assert "A4" in result.output

    def test_show_solfege(self, notes_file):
        result = runner.invoke(app, ["show", str(notes_file), "--solfege"])
        assert result.exit_code == 0, result.output
        assert "Do" in result.output
        assert "La" in result.output

    def test_show_limit(self, notes_file):
        result = runner.invoke(app, ["show", str(notes_file), "--limit", "1"])
        assert result.exit_code == 0, result.output
        assert "1 more notes" in result.output

    def test_show_invalid_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"notes": []}')
        result = runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 1

    def test_show_non_record_entries(self, tmp_path):
        path = tmp_path / "numbers.json"
        path.write_text("[1, 2]")
        result = runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 1
        assert "Invalid note list" in result.output

    def test_show_empty(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]")
        result = runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 0
        assert "No notes" in result.output


class TestTrack:
    """Tests for the track command."""

    def test_track_reports_points(self, tmp_path, sine):
        path = tmp_path / "a4.wav"
        sf.write(str(path), sine(440.0, 0.5, sr=22050), 22050)

        result = runner.invoke(app, ["track", str(path), "--speed", "5", "--every", "5"])

        assert result.exit_code == 0, result.output
        assert "voiced" in result.output
        assert "Pitch Stream" in result.output

    def test_track_rejects_bad_rate(self, tmp_path):
        path = tmp_path / "a4.wav"
        sf.write(str(path), np.zeros(2048, dtype=np.float32), 22050)
        result = runner.invoke(app, ["track", str(path), "--fps", "0"])
        assert result.exit_code == 1

    def test_stream_longer_than_history_is_kept(self):
        sr = 8000
        audio = np.zeros(31 * sr, dtype=np.float32)

        # 31 s of source time played 200x faster than real time
        points = asyncio.run(_run_tracker(audio, sr, YinConfig(), 60.0, 0.0, 200.0))

        assert points[0].t_sec < 1.0
        assert points[-1].t_sec > 30.0
        times = [p.t_sec for p in points]
        assert times == sorted(times)
