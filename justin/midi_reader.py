"""Reads a MIDI file into a time-ordered stream of note-on/note-off events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_VELOCITY = 64  # used when music21 reports no velocity for a note

# Ordering of events that share a time.
_CLOSES_EARLIER = 0
_STRIKES = 1
_CLOSES_LATER = 2


@dataclass(frozen=True)
class TimedNoteEvent:
    """
    A note event at a position in the file.

    Attributes:
        time:     Position in beats (quarter notes) from the start.
        pitch:    MIDI note number.
        velocity: MIDI velocity; 0 marks a note-off.
    """

    time: float
    pitch: int
    velocity: int

    @property
    def is_note_on(self) -> bool:
        return self.velocity > 0


def _parse_midi_score(midi_path: str) -> Any:
    from music21 import converter

    return converter.parse(midi_path, format="midi")


def _element_velocity(element: Any) -> int:
    velocity = getattr(getattr(element, "volume", None), "velocity", None)
    if isinstance(velocity, (int, float)) and velocity > 0:
        return int(velocity)
    return DEFAULT_VELOCITY


def score_to_events(score: Any) -> list[TimedNoteEvent]:
    """
    Flatten a music21 score into note-on and note-off events.

    Chords contribute one pair of events per pitch. At equal times note-offs
    that close an earlier note sort first, so a repeated pitch is released
    before it is struck again. The note-off of a zero-length note (grace
    notes, same-tick on/off) sorts after the note-ons at its time, so it
    still releases the note it belongs to.
    """
    keyed: list[tuple[tuple[float, int, int], TimedNoteEvent]] = []
    for element in score.flatten().notes:
        start = float(element.offset)
        end = start + float(element.duration.quarterLength)
        velocity = _element_velocity(element)
        if end <= start:
            end, off_order = start, _CLOSES_LATER
        else:
            off_order = _CLOSES_EARLIER
        pitches = element.pitches if element.isChord else [element.pitch]
        for pitch in pitches:
            on = TimedNoteEvent(time=start, pitch=pitch.midi, velocity=velocity)
            off = TimedNoteEvent(time=end, pitch=pitch.midi, velocity=0)
            keyed.append(((start, _STRIKES, on.pitch), on))
            keyed.append(((end, off_order, off.pitch), off))

    keyed.sort(key=lambda pair: pair[0])
    return [event for _, event in keyed]


def read_note_events(midi_path: str) -> list[TimedNoteEvent]:
    """
    Parse a MIDI file with music21 and return its note events.

    Raises:
        OSError: If the file cannot be read.
    """
    return score_to_events(_parse_midi_score(midi_path))
