"""Command-line interface for pitchline.

Provides commands for:
- extract: Segment an audio file into a note list (JSON, optional MIDI)
- show: Display a saved note list by note name or solfege
- track: Play a file through the live tracker and report the pitch stream
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core import ConfigurationError, HOP_SIZE, Note, hz_to_midi, midi_to_note_name, midi_to_solfege

app = typer.Typer(
    name="pitchline",
    help="Monophonic pitch tracking and melody segmentation",
    rich_markup_mode="markdown",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _yin_config(threshold: float, probability_threshold: float, fmin: float, fmax: float):
    from .analysis import YinConfig

    try:
        return YinConfig(
            threshold=threshold,
            probability_threshold=probability_threshold,
            min_freq=fmin,
            max_freq=fmax,
        )
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)


def _load_audio(input_file: Path, target_sr: Optional[int] = None, normalize: bool = False):
    from .input import AudioLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    console.print(f"[blue]Loading audio:[/blue] {input_file}")
    loader = AudioLoader(target_sr=target_sr, normalize=normalize)
    try:
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return loader, audio, sr


@app.command()
def extract(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output note list (JSON). Default: <input>.json"
    ),
    midi_output: Optional[Path] = typer.Option(
        None, "--midi", help="Also export the notes as a MIDI file"
    ),
    threshold: float = typer.Option(
        0.12, "--threshold", help="YIN dip threshold (lower = stricter)"
    ),
    probability_threshold: float = typer.Option(
        0.1, "--probability-threshold", help="Minimum voicing confidence"
    ),
    fmin: float = typer.Option(50.0, "--fmin", help="Lowest detectable frequency (Hz)"),
    fmax: float = typer.Option(1200.0, "--fmax", help="Highest detectable frequency (Hz)"),
    jobs: int = typer.Option(1, "-j", "--jobs", help="Worker threads for pitch estimation"),
    sample_rate: Optional[int] = typer.Option(
        None, "--sr", help="Resample to this rate before analysis (default: file rate)"
    ),
    normalize: bool = typer.Option(
        False, "--normalize", help="Peak-normalize the audio before analysis"
    ),
    solfege: bool = typer.Option(
        False, "--solfege", help="Show solfege syllables instead of note names"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Segment the melody of an audio file into a note list.

    **Examples:**

        pitchline extract soprano.wav

        pitchline extract soprano.mp3 -o soprano.json --midi soprano.mid
    """
    from .transcription import MonophonicTranscriber, SegmenterConfig
    from .output import MIDIExporter, save_notes

    _configure_logging(verbose)
    if sample_rate is not None and sample_rate <= 0:
        console.print("[red]Error: --sr must be positive[/red]")
        raise typer.Exit(1)
    yin = _yin_config(threshold, probability_threshold, fmin, fmax)
    loader, audio, sr = _load_audio(input_file, target_sr=sample_rate, normalize=normalize)
    duration = loader.get_duration(audio, sr)

    if output is None:
        output = input_file.with_suffix(".json")

    if verbose:
        console.print(f"  Duration: {duration:.2f}s, Sample rate: {sr}Hz")

    console.print("[blue]Extracting melody...[/blue]")
    try:
        transcriber = MonophonicTranscriber(SegmenterConfig(yin=yin, n_jobs=jobs))
        notes = transcriber.transcribe(audio, sr)
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"  Detected {len(notes)} notes")

    save_notes(notes, str(output))
    if midi_output is not None:
        MIDIExporter().export(notes, str(midi_output))

    if json_output:
        result = {
            "input": str(input_file),
            "output": str(output),
            "midi": str(midi_output) if midi_output else None,
            "notes_count": len(notes),
            "duration": duration,
            "sample_rate": sr,
        }
        console.print_json(data=result)
        return

    console.print(f"[blue]Notes written to:[/blue] {output}")
    if midi_output is not None:
        console.print(f"[blue]MIDI written to:[/blue] {midi_output}")
    if verbose and notes:
        _show_notes_table(notes, solfege=solfege)
    console.print("[green]Extraction complete![/green]")


@app.command()
def show(
    notes_file: Path = typer.Argument(..., help="Note list JSON"),
    solfege: bool = typer.Option(
        False, "--solfege", help="Show solfege syllables instead of note names"
    ),
    limit: int = typer.Option(0, "--limit", "-n", help="Show at most N notes (0 = all)"),
):
    """Display a saved note list."""
    from .output import load_notes

    if not notes_file.exists():
        console.print(f"[red]Error: File not found: {notes_file}[/red]")
        raise typer.Exit(1)

    try:
        notes = load_notes(str(notes_file))
    except ValueError as e:
        console.print(f"[red]Error: Invalid note list: {e}[/red]")
        raise typer.Exit(1)

    if not notes:
        console.print("[yellow]No notes in file[/yellow]")
        return

    shown = notes[:limit] if limit > 0 else notes
    _show_notes_table(shown, solfege=solfege)
    if len(shown) < len(notes):
        console.print(f"   [dim]... and {len(notes) - len(shown)} more notes[/dim]")

    span = max(n.end for n in notes)
    console.print(f"  {len(notes)} notes over {span:.2f}s")


@app.command()
def track(
    input_file: Path = typer.Argument(..., help="Audio file to play through the tracker"),
    offset: float = typer.Option(0.0, "--offset", help="Start position in seconds"),
    fps: float = typer.Option(60.0, "--fps", help="Ticks per second"),
    speed: float = typer.Option(1.0, "--speed", help="Playback speed factor"),
    threshold: float = typer.Option(0.12, "--threshold", help="YIN dip threshold"),
    probability_threshold: float = typer.Option(
        0.1, "--probability-threshold", help="Minimum voicing confidence"
    ),
    fmin: float = typer.Option(50.0, "--fmin", help="Lowest detectable frequency (Hz)"),
    fmax: float = typer.Option(1200.0, "--fmax", help="Highest detectable frequency (Hz)"),
    every: int = typer.Option(10, "--every", help="Show every Nth point"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
    json_output: bool = typer.Option(
        False, "--json", help="Output points as JSON (for scripting)"
    ),
):
    """Feed a file through the live tracker in real time.

    Simulates a live source: samples are written into a ring buffer at the
    playback rate while the tracker ticks at **--fps**.
    """
    _configure_logging(verbose)
    if fps <= 0 or speed <= 0:
        console.print("[red]Error: --fps and --speed must be positive[/red]")
        raise typer.Exit(1)

    yin = _yin_config(threshold, probability_threshold, fmin, fmax)
    loader, audio, sr = _load_audio(input_file)
    start = int(max(offset, 0.0) * sr)

    console.print(
        f"[blue]Tracking[/blue] {loader.get_duration(audio, sr) - start / sr:.2f}s "
        f"at {fps:g} ticks/s..."
    )
    points = asyncio.run(_run_tracker(audio[start:], sr, yin, fps, offset, speed))

    voiced = [p for p in points if p.freq is not None]
    if json_output:
        console.print_json(
            data=[
                {"t": round(p.t_sec, 4), "freq": p.freq, "probability": p.probability}
                for p in points
            ]
        )
        return

    _show_points_table(points[:: max(every, 1)])
    console.print(f"  {len(points)} points, {len(voiced)} voiced")


async def _run_tracker(audio, sr, yin, fps, offset, speed):
    from .streaming import (
        PitchPoint,
        RingBufferSource,
        StreamingTracker,
        TrackerConfig,
        TrackerContext,
    )

    t0 = time.monotonic()
    source = RingBufferSource(sample_rate=sr)
    context = TrackerContext(source=source, clock=lambda: (time.monotonic() - t0) * speed)
    points: List[PitchPoint] = []
    tracker = StreamingTracker(
        context,
        yin_config=yin,
        on_point=points.append,
        config=TrackerConfig(interval=1.0 / (fps * speed)),
    )

    with context:
        tracker.start(start_offset=offset)
        try:
            for i in range(0, len(audio), HOP_SIZE):
                source.write(audio[i : i + HOP_SIZE])
                await asyncio.sleep(HOP_SIZE / sr / speed)
        finally:
            tracker.stop()

    return points


def _show_notes_table(notes: List[Note], solfege: bool = False):
    """Display notes in a table."""
    table = Table(title="Detected Notes")
    table.add_column("Pitch", style="cyan")
    table.add_column("MIDI", style="blue")
    table.add_column("Start (s)", style="green")
    table.add_column("Duration (s)", style="yellow")

    for note in notes:
        table.add_row(
            note.solfege if solfege else note.pitch_name,
            str(note.midi),
            f"{note.start:.3f}",
            f"{note.duration:.3f}",
        )

    console.print(table)


def _show_points_table(points):
    """Display pitch points in a table."""
    table = Table(title="Pitch Stream")
    table.add_column("Time (s)", style="green")
    table.add_column("Freq (Hz)", style="cyan")
    table.add_column("Note", style="blue")
    table.add_column("Solfege", style="blue")
    table.add_column("Probability", style="magenta")

    for p in points:
        midi = hz_to_midi(p.freq)
        table.add_row(
            f"{p.t_sec:.3f}",
            "-" if p.freq is None else f"{p.freq:.1f}",
            "-" if midi is None else midi_to_note_name(midi),
            "-" if midi is None else midi_to_solfege(midi),
            f"{p.probability:.2f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
