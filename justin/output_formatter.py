"""OutputFormatter: Builds outbound messages from the tuning context."""

import numpy as np

from justin.context import TuningContext
from justin.interval_table import SEMITONES_PER_OCTAVE
from justin.messages import (
    Done,
    EqualPitches,
    JustPitches,
    NoteControl,
    NoteMessage,
    OffsetList,
    OffsetOctave,
    OutboundMessage,
)


class OutputFormatter:
    """
    Derives synthesizer and diagnostic messages from the held notes.

    Every bend is `(working_pitch - original_pitch) * intensity`. Intensity is
    applied here and nowhere else, so changing it never requires a new
    retuning pass.
    """

    def note_control(self, pitch: int, velocity: int) -> NoteControl:
        return NoteControl(pitch=pitch, velocity=velocity)

    def release_all(self, context: TuningContext) -> list[OutboundMessage]:
        """Note-offs for every held note, in set order."""
        return [NoteControl(pitch=note.original_pitch, velocity=0) for note in context.notes]

    def pitch_messages(self, context: TuningContext) -> list[OutboundMessage]:
        """One NoteMessage per held note, followed by the diagnostics."""
        messages: list[OutboundMessage] = [
            NoteMessage(pitch=note.original_pitch, bend=bend)
            for note, bend in zip(context.notes, self.scaled_offsets(context))
        ]
        messages.extend(self.diagnostics(context))
        return messages

    def diagnostics(self, context: TuningContext) -> list[OutboundMessage]:
        """Pitch lists, per-octave offsets and per-note offsets."""
        offsets = self.scaled_offsets(context)
        equal = context.notes.pitches
        just = [pitch + offset for pitch, offset in zip(equal, offsets)]
        return [
            JustPitches(pitches=just),
            EqualPitches(pitches=equal),
            OffsetOctave(offsets=self.octave_offsets(context)),
            OffsetList(offsets=offsets),
        ]

    def scaled_offsets(self, context: TuningContext) -> list[float]:
        return [note.offset * context.intensity for note in context.notes]

    def octave_offsets(self, context: TuningContext) -> list[float]:
        """Scaled offset by pitch class; a later note overwrites an earlier one."""
        octave = np.zeros(SEMITONES_PER_OCTAVE)
        for note in context.notes:
            octave[note.original_pitch % SEMITONES_PER_OCTAVE] = note.offset * context.intensity
        return [float(value) for value in octave]

    def done(self) -> Done:
        return Done()
