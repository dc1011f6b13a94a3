"""Data models for outbound messages."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class NoteControl:
    """MIDI thru for the equal-tempered note. Velocity 0 is a note-off."""

    kind: ClassVar[str] = "noteControl"

    pitch: int
    velocity: int


@dataclass(frozen=True)
class NoteMessage:
    """Bend in semitones, already scaled by intensity, for one held pitch."""

    kind: ClassVar[str] = "noteMessage"

    pitch: int
    bend: float


@dataclass(frozen=True)
class JustPitches:
    """Intensity-scaled absolute pitches of the held notes, in set order."""

    kind: ClassVar[str] = "justPitches"

    pitches: list[float]


@dataclass(frozen=True)
class EqualPitches:
    """Original pitches of the held notes, in set order."""

    kind: ClassVar[str] = "equalPitches"

    pitches: list[int]


@dataclass(frozen=True)
class OffsetOctave:
    """Scaled offset per pitch class (12 slots, last held note wins)."""

    kind: ClassVar[str] = "offsetOctave"

    offsets: list[float]


@dataclass(frozen=True)
class OffsetList:
    """Scaled offset of every held note, in set order."""

    kind: ClassVar[str] = "offsetList"

    offsets: list[float]


@dataclass(frozen=True)
class Done:
    """End of processing for one inbound event."""

    kind: ClassVar[str] = "done"


OutboundMessage = (
    NoteControl | NoteMessage | JustPitches | EqualPitches | OffsetOctave | OffsetList | Done
)
