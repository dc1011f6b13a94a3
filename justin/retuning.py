"""RetuningEngine: Turns the held equal-tempered chord into a justly tuned one."""

import logging

import numpy as np

from justin.context import TuningContext
from justin.interval_table import IntervalTable
from justin.notes import ActiveNoteSet, Note

logger = logging.getLogger(__name__)


class RetuningEngine:
    """
    Recomputes the working pitch of every held note from scratch.

    Algorithm overview
    ------------------
    1. **Reset** - every note goes back to its equal-tempered pitch with no
       applied rank.

    2. **Sort** - notes are ordered by original pitch (stable), so every pair
       has a well defined low and high note. Sets of fewer than two notes are
       left untouched.

    3. **Pairwise adjustment** - every pair (low, high) is visited, outer loop
       over the low index and inner loop over the high index. The interval
       class of the pair is looked up in the interval table. If its rank beats
       the rank already applied to either note, the pair is re-tuned to the
       just interval, expanded back to the real (possibly compound) size:

           compound = (just_deviation - interval % 12) + interval

       The note with the lower applied rank moves and the other one is the
       anchor; on a tie the high note moves. Both notes then remember the
       higher of their rank and the interval's rank. Later pairs may move a
       note that an earlier pair already placed, so the visiting order is
       part of the result.

    4. **Mean-centering** (optional) - the whole chord is shifted so that the
       sum of working pitches equals the sum of original pitches. This splits
       each correction between the notes instead of pinning the lowest note
       to equal temperament.
    """

    def retune(self, context: TuningContext) -> None:
        """Run a full pass over the context's held notes, in place."""
        notes = context.notes
        self._reset(notes)

        if len(notes) < 2:
            return

        notes.sort_by_pitch()
        self._adjust_pairs(notes, context.table)

        if context.mean_mode:
            self._mean_center(notes)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "retuned %d notes (%d-limit, mean mode %s): %s",
                len(notes),
                context.table.limit,
                "on" if context.mean_mode else "off",
                " ".join(f"{note.original_pitch}:{note.offset:+.4f}" for note in notes),
            )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _reset(self, notes: ActiveNoteSet) -> None:
        for note in notes:
            note.reset()

    def _adjust_pairs(self, notes: ActiveNoteSet, table: IntervalTable) -> None:
        count = len(notes)
        for lo in range(count - 1):
            low = notes[lo]
            for hi in range(lo + 1, count):
                high = notes[hi]
                interval = high.original_pitch - low.original_pitch
                entry = table.entry_for(interval)

                if entry.rank > high.applied_rank or entry.rank > low.applied_rank:
                    octave_class = interval % len(table)
                    compound = (entry.just_deviation - octave_class) + interval
                    self._tune_interval(low, high, compound)
                    low.applied_rank = max(low.applied_rank, entry.rank)
                    high.applied_rank = max(high.applied_rank, entry.rank)

    def _tune_interval(self, low: Note, high: Note, compound: float) -> None:
        """Move the less settled note so the pair spans `compound` semitones."""
        if high.applied_rank > low.applied_rank:
            low.working_pitch = high.working_pitch - compound
        else:
            high.working_pitch = low.working_pitch + compound

    def _mean_center(self, notes: ActiveNoteSet) -> None:
        original = np.array([note.original_pitch for note in notes], dtype=float)
        working = np.array([note.working_pitch for note in notes], dtype=float)
        mean_offset = float((original.sum() - working.sum()) / len(notes))
        for note in notes:
            note.working_pitch += mean_offset
