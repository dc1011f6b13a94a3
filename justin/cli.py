"""justin CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from justin import __version__
from justin.config import DEFAULT_INTENSITY, DEFAULT_LIMIT, TuningConfig
from justin.dispatcher import EventDispatcher
from justin.event_script import EventScriptError, apply_command, parse_script
from justin.interval_table import TABLES, available_limits
from justin.message_renderers import RENDERERS, get_renderer

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_dispatcher(limit: int, intensity: float, mean: bool) -> EventDispatcher:
    config = TuningConfig(limit=limit, intensity=intensity, mean_mode=mean)
    return EventDispatcher.from_config(config)


def tuning_options(func):
    """Options shared by every command that runs the engine."""
    func = click.option(
        "--mean/--no-mean",
        default=True,
        show_default=True,
        help=(
            "Mean mode: centre the retuned chord on the equal-tempered average. "
            "With --no-mean the lowest note keeps its equal-tempered pitch."
        ),
    )(func)
    func = click.option(
        "--intensity",
        type=float,
        default=DEFAULT_INTENSITY,
        show_default=True,
        help="Fraction of the just correction applied to each bend (not clamped).",
    )(func)
    func = click.option(
        "--limit",
        type=click.Choice([str(limit) for limit in available_limits()]),
        default=str(DEFAULT_LIMIT),
        show_default=True,
        help="Prime limit of the interval table.",
    )(func)
    return func


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="justin")
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr.")
def main(verbose: bool) -> None:
    """justin: adaptive just intonation for MIDI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, stream=sys.stderr)


# ── play subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("script", type=click.File("r"), default="-")
@tuning_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(RENDERERS), case_sensitive=False),
    default="text",
    show_default=True,
    help="Outbound message format: Max-style text lines or JSON lines.",
)
def play(script, limit: str, intensity: float, mean: bool, output_format: str) -> None:
    """
    Replay an event script and print the outbound messages.

    SCRIPT is a file with one command per line (default: stdin).

    \b
    Commands:
      noteIn PITCH VELOCITY     (velocity 0 is a note-off)
      setLimit 5|7|11|13
      setMeanMode 0|1
      setIntensity AMOUNT
      allNotesOff

    \b
    Examples:
      printf 'noteIn 60 100\\nnoteIn 64 100\\n' | justin play
      justin play chords.txt --limit 7 --no-mean --format json
    """
    try:
        commands = parse_script(script)
    except EventScriptError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        sys.exit(1)

    dispatcher = _build_dispatcher(int(limit), intensity, mean)
    renderer = get_renderer(output_format)

    for command in commands:
        result = apply_command(dispatcher, command)
        if not result.ok:
            click.echo(f"line {command.line_no}: {result.detail}", err=True)
            continue
        click.echo(renderer.render(result.messages), nl=False)


# ── retune subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("midi_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to <input>_just.mid.",
)
@tuning_options
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=120,
    show_default=True,
    help="Playback tempo in BPM.",
)
@click.option(
    "--bend-range",
    type=click.IntRange(1, 24),
    default=2,
    show_default=True,
    help="Pitch bend sensitivity of the target synth, in semitones.",
)
def retune(
    midi_file: str,
    output: str | None,
    limit: str,
    intensity: float,
    mean: bool,
    tempo: int,
    bend_range: int,
) -> None:
    """
    Retune a MIDI file to just intonation.

    Every pitch class is moved to its own channel and bent with pitch wheel
    events, so play the result on a multi-timbral synth with the same bend
    range on all channels.

    \b
    Examples:
      justin retune chorale.mid
      justin retune chorale.mid --limit 7 --intensity 1.0 -o chorale_7.mid
    """
    from justin.midi_exporter import RetunedMidiExporter
    from justin.midi_reader import read_note_events

    midi_path = Path(midi_file)
    resolved_output = output if output is not None else str(
        midi_path.with_name(f"{midi_path.stem}_just.mid")
    )

    click.echo(f"justin v{__version__}")
    click.echo(f"  MIDI   : {midi_file}")
    click.echo(f"  Tuning : {limit}-limit  |  Intensity: {intensity}  |  Mean: {'on' if mean else 'off'}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    click.echo("[1/2] Reading note events with music21...")
    try:
        events = read_note_events(midi_file)
    except Exception as exc:
        click.echo(f"  ERROR: Could not read MIDI file: {exc}", err=True)
        sys.exit(1)

    if not events:
        click.echo("  WARNING: No notes found in the MIDI file.", err=True)
        sys.exit(1)

    click.echo(f"      {len(events) // 2} note(s)")

    click.echo(f"[2/2] Writing retuned MIDI file → '{resolved_output}'...")
    dispatcher = _build_dispatcher(int(limit), intensity, mean)
    exporter = RetunedMidiExporter(tempo=tempo, bend_range=bend_range)
    try:
        exporter.export(events, dispatcher, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file: {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(f"Done!  Set a pitch bend range of {bend_range} semitones on every channel.")


# ── tables subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.option(
    "--limit",
    type=click.Choice([str(limit) for limit in available_limits()]),
    default=None,
    help="Show only this table.",
)
def tables(limit: str | None) -> None:
    """Print the interval table presets."""
    limits = [int(limit)] if limit is not None else available_limits()
    for index, value in enumerate(limits):
        if index:
            click.echo()
        click.echo(f"{value}-limit")
        click.echo("  class  just     cents   rank")
        for entry in TABLES[value].entries:
            click.echo(
                f"  {entry.chromatic_class:>5}  {entry.just_deviation:>5.2f}  "
                f"{entry.cents_offset:>+7.1f}  {entry.rank:>5}"
            )
