"""RetunedMidiExporter: Writes a retuned performance as a multi-channel MIDI file."""

from collections.abc import Iterable

from midiutil import MIDIFile

from justin.dispatcher import EventDispatcher
from justin.interval_table import SEMITONES_PER_OCTAVE
from justin.messages import NoteControl, NoteMessage
from justin.midi_reader import TimedNoteEvent

TRACK_CONDUCTOR = 0  # Tempo only, never receives notes
TRACK_NOTES = 1

# Pitch bend acts on a whole channel, so each pitch class gets its own.
PITCH_CLASS_TO_CHANNEL = list(range(SEMITONES_PER_OCTAVE))
# Channel 10 (9 on the wire) is reserved for drums; use 13 (12) instead.
PITCH_CLASS_TO_CHANNEL[9] = 12

PITCH_WHEEL_MIN = -8192
PITCH_WHEEL_MAX = 8191

# Registered parameter 0/0 is the pitch bend sensitivity.
CC_RPN_MSB = 101
CC_RPN_LSB = 100
CC_DATA_ENTRY_MSB = 6
CC_DATA_ENTRY_LSB = 38


def channel_for_pitch(pitch: int) -> int:
    return PITCH_CLASS_TO_CHANNEL[pitch % SEMITONES_PER_OCTAVE]


def bend_to_pitch_wheel(bend: float, bend_range: float) -> int:
    """Convert a bend in semitones to a signed 14-bit pitch wheel value."""
    value = round(bend / bend_range * 8192)
    return max(PITCH_WHEEL_MIN, min(PITCH_WHEEL_MAX, value))


class RetunedMidiExporter:
    """
    Plays note events through a dispatcher and records what it sends.

    Track layout (Format 1)
    -----------------------
    Track 0 - conductor track (tempo only)

    Track 1 - "Retuned" - every note, on the channel of its pitch class.
        Each NoteMessage becomes a pitch wheel event on that channel at the
        time of the event that produced it. Two held notes of the same pitch
        class share a channel, so the later bend applies to both, matching
        the per-octave offset summary.

    The receiving synth must use the same bend range as ``bend_range``; it is
    announced on every channel at time 0 through RPN 0.
    """

    DEFAULT_TEMPO = 120      # BPM
    DEFAULT_BEND_RANGE = 2   # semitones each way

    def __init__(
        self,
        tempo: int = DEFAULT_TEMPO,
        bend_range: int = DEFAULT_BEND_RANGE,
    ) -> None:
        """
        Args:
            tempo:      Playback tempo in beats per minute.
            bend_range: Pitch bend sensitivity in whole semitones.
        """
        if bend_range <= 0:
            raise ValueError("bend_range must be a positive number of semitones.")
        self.tempo = tempo
        self.bend_range = bend_range

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _announce_bend_range(self, midi: MIDIFile) -> None:
        for channel in sorted(set(PITCH_CLASS_TO_CHANNEL)):
            midi.addControllerEvent(TRACK_NOTES, channel, 0, CC_RPN_MSB, 0)
            midi.addControllerEvent(TRACK_NOTES, channel, 0, CC_RPN_LSB, 0)
            midi.addControllerEvent(TRACK_NOTES, channel, 0, CC_DATA_ENTRY_MSB, self.bend_range)
            midi.addControllerEvent(TRACK_NOTES, channel, 0, CC_DATA_ENTRY_LSB, 0)

    def _add_note(
        self, midi: MIDIFile, pitch: int, start: float, end: float, velocity: int
    ) -> None:
        midi.addNote(
            track=TRACK_NOTES,
            channel=channel_for_pitch(pitch),
            pitch=pitch,
            time=start,
            duration=max(0.0, end - start),
            volume=velocity,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, events: Iterable[TimedNoteEvent], dispatcher: EventDispatcher) -> MIDIFile:
        """
        Run every event through the dispatcher and collect the result.

        Args:
            events:     Note events ordered by time.
            dispatcher: Dispatcher holding the tuning configuration to apply.

        Returns:
            The populated MIDIFile, not yet written.
        """
        midi = MIDIFile(numTracks=2, removeDuplicates=False, deinterleave=False)
        midi.addTempo(TRACK_CONDUCTOR, 0, self.tempo)
        midi.addTrackName(TRACK_NOTES, 0, f"Retuned ({dispatcher.table.limit}-limit)")
        self._announce_bend_range(midi)

        sounding: dict[int, list[tuple[float, int]]] = {}
        last_time = 0.0

        for event in events:
            last_time = max(last_time, event.time)
            result = dispatcher.note_event(event.pitch, event.velocity)
            for message in result.messages:
                if isinstance(message, NoteControl):
                    if message.velocity > 0:
                        sounding.setdefault(message.pitch, []).append((event.time, message.velocity))
                    elif sounding.get(message.pitch):
                        start, velocity = sounding[message.pitch].pop(0)
                        self._add_note(midi, message.pitch, start, event.time, velocity)
                elif isinstance(message, NoteMessage):
                    midi.addPitchWheelEvent(
                        TRACK_NOTES,
                        channel_for_pitch(message.pitch),
                        event.time,
                        bend_to_pitch_wheel(message.bend, self.bend_range),
                    )

        # close notes that never received a note-off
        for pitch, starts in sounding.items():
            for start, velocity in starts:
                self._add_note(midi, pitch, start, last_time, velocity)

        return midi

    def export(
        self,
        events: Iterable[TimedNoteEvent],
        dispatcher: EventDispatcher,
        output_path: str,
    ) -> None:
        """
        Retune the events and write a Standard MIDI File.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        midi = self.build(events, dispatcher)
        with open(output_path, "wb") as f:
            midi.writeFile(f)
