"""Held notes and the mutable set that owns them."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NO_RANK = -1  # applied_rank before any interval has corrected the note


@dataclass
class Note:
    """
    A currently sounding note.

    Attributes:
        original_pitch: MIDI note number received from the host. Never changes,
                        and is what the instrument is actually triggered with.
        working_pitch:  Justly tuned pitch in fractional semitones.
        applied_rank:   Highest interval rank that has corrected this note in
                        the current pass, or NO_RANK.
        velocity:       MIDI velocity from the note-on.
    """

    original_pitch: int
    working_pitch: float
    applied_rank: int
    velocity: int

    @classmethod
    def from_note_on(cls, pitch: int, velocity: int) -> "Note":
        return cls(original_pitch=pitch, working_pitch=pitch, applied_rank=NO_RANK, velocity=velocity)

    @property
    def offset(self) -> float:
        """Correction in semitones relative to the equal-tempered pitch."""
        return self.working_pitch - self.original_pitch

    def reset(self) -> None:
        self.working_pitch = self.original_pitch
        self.applied_rank = NO_RANK


class ActiveNoteSet:
    """
    Ordered collection of held notes.

    Order is insertion order until the retuning engine sorts the set by
    original pitch. A second note-on for a pitch that is already held adds a
    second Note rather than replacing the first.
    """

    def __init__(self) -> None:
        self._notes: list[Note] = []

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __getitem__(self, index: int) -> Note:
        return self._notes[index]

    @property
    def pitches(self) -> list[int]:
        return [note.original_pitch for note in self._notes]

    def note_on(self, pitch: int, velocity: int) -> Note:
        note = Note.from_note_on(pitch, velocity)
        self._notes.append(note)
        logger.debug("note on %s (velocity %s), %d held", pitch, velocity, len(self._notes))
        return note

    def note_off(self, pitch: int) -> Note | None:
        """
        Remove the first held note with this original pitch.

        Returns:
            The removed Note, or None if the pitch is not held.
        """
        for index, note in enumerate(self._notes):
            if note.original_pitch == pitch:
                del self._notes[index]
                logger.debug("note off %s, %d held", pitch, len(self._notes))
                return note
        return None

    def sort_by_pitch(self) -> None:
        """Sort ascending by original pitch. Equal pitches keep their order."""
        self._notes.sort(key=lambda note: note.original_pitch)

    def clear(self) -> list[Note]:
        """Remove every note and return them in their previous order."""
        released = self._notes
        self._notes = []
        return released
