"""Unit tests for EventDispatcher: note events, configuration and output."""

import pytest

from justin.config import TuningConfig
from justin.context import TuningContext
from justin.dispatcher import EventDispatcher, parse_mean_mode
from justin.errors import ConfigErrorKind, InvalidMeanModeError
from justin.messages import (
    Done,
    EqualPitches,
    JustPitches,
    NoteControl,
    NoteMessage,
    OffsetList,
    OffsetOctave,
)
from justin.retuning import RetuningEngine


class CountingEngine(RetuningEngine):
    def __init__(self) -> None:
        self.passes = 0

    def retune(self, context: TuningContext) -> None:
        self.passes += 1
        super().retune(context)


def _bends(messages: list) -> dict[int, float]:
    return {m.pitch: m.bend for m in messages if isinstance(m, NoteMessage)}


def _dispatcher(**config) -> EventDispatcher:
    return EventDispatcher.from_config(TuningConfig(**config))


# ---------------------------------------------------------------------------
# Note events
# ---------------------------------------------------------------------------

def test_default_configuration() -> None:
    dispatcher = EventDispatcher()
    assert dispatcher.table.limit == 5
    assert dispatcher.context.intensity == 0.75
    assert dispatcher.context.mean_mode is True


def test_note_on_message_sequence() -> None:
    result = EventDispatcher().note_event(60, 100)
    assert result.ok
    assert [type(m) for m in result.messages] == [
        NoteControl,
        NoteMessage,
        JustPitches,
        EqualPitches,
        OffsetOctave,
        OffsetList,
        Done,
    ]
    assert result.messages[0] == NoteControl(pitch=60, velocity=100)
    assert result.messages[1] == NoteMessage(pitch=60, bend=0.0)


def test_major_third_bends_with_mean_mode() -> None:
    dispatcher = _dispatcher(intensity=1.0)
    dispatcher.note_event(60, 100)
    bends = _bends(dispatcher.note_event(64, 100).messages)
    assert bends[60] == pytest.approx(0.07)
    assert bends[64] == pytest.approx(-0.07)


def test_major_third_bends_without_mean_mode() -> None:
    dispatcher = _dispatcher(intensity=0.75, mean_mode=False)
    dispatcher.note_event(60, 100)
    bends = _bends(dispatcher.note_event(64, 100).messages)
    assert bends[60] == pytest.approx(0.0)
    assert bends[64] == pytest.approx(-0.14 * 0.75)


def test_every_held_note_gets_a_bend_on_every_event() -> None:
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    dispatcher.note_event(64, 100)
    result = dispatcher.note_event(67, 100)
    assert sorted(_bends(result.messages)) == [60, 64, 67]
    assert isinstance(result.messages[-1], Done)


def test_note_off_thru_uses_zero_velocity() -> None:
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    result = dispatcher.note_event(60, 0)
    assert result.messages[0] == NoteControl(pitch=60, velocity=0)
    assert len(dispatcher.context.notes) == 0


def test_negative_velocity_is_a_note_off() -> None:
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    result = dispatcher.note_event(60, -3)
    assert result.messages[0] == NoteControl(pitch=60, velocity=0)
    assert len(dispatcher.context.notes) == 0


def test_note_off_for_unheld_pitch_changes_nothing() -> None:
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    dispatcher.note_event(64, 100)
    result = dispatcher.note_event(72, 0)
    assert result.messages[0] == NoteControl(pitch=72, velocity=0)
    assert dispatcher.context.notes.pitches == [60, 64]
    assert isinstance(result.messages[-1], Done)


def test_duplicate_note_on_is_held_twice() -> None:
    # Repeated note-ons are not merged; one note-off releases one copy.
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    dispatcher.note_event(60, 80)
    assert dispatcher.context.notes.pitches == [60, 60]
    dispatcher.note_event(60, 0)
    assert dispatcher.context.notes.pitches == [60]


def test_all_notes_off_releases_in_set_order() -> None:
    dispatcher = EventDispatcher()
    for pitch in (67, 60, 64):
        dispatcher.note_event(pitch, 100)
    result = dispatcher.all_notes_off()
    assert result.messages == [
        NoteControl(pitch=60, velocity=0),
        NoteControl(pitch=64, velocity=0),
        NoteControl(pitch=67, velocity=0),
    ]
    assert len(dispatcher.context.notes) == 0
    dispatcher.engine.retune(dispatcher.context)
    assert len(dispatcher.context.notes) == 0


def test_all_notes_off_with_nothing_held() -> None:
    assert EventDispatcher().all_notes_off().messages == []


def test_clear_notes_is_all_notes_off() -> None:
    dispatcher = EventDispatcher()
    dispatcher.note_event(60, 100)
    assert dispatcher.clear_notes().messages == [NoteControl(pitch=60, velocity=0)]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_invalid_limit_is_rejected_and_previous_table_kept() -> None:
    dispatcher = EventDispatcher()
    assert dispatcher.set_tuning_limit(7).ok
    result = dispatcher.set_tuning_limit(9)
    assert result.error is ConfigErrorKind.INVALID_LIMIT
    assert result.messages == []
    assert "Tuning not available" in result.detail
    assert dispatcher.table.limit == 7


def test_set_limit_retunes_held_chord() -> None:
    dispatcher = _dispatcher(intensity=1.0, mean_mode=False)
    dispatcher.note_event(60, 100)
    dispatcher.note_event(70, 100)
    engine = CountingEngine()
    dispatcher.engine = engine

    result = dispatcher.set_tuning_limit(7)

    assert engine.passes == 1
    assert _bends(result.messages)[70] == pytest.approx(-0.31)
    assert not any(isinstance(m, (NoteControl, Done)) for m in result.messages)


def test_set_mean_mode_retunes_held_chord() -> None:
    dispatcher = _dispatcher(intensity=1.0)
    dispatcher.note_event(60, 100)
    dispatcher.note_event(64, 100)
    result = dispatcher.set_mean_mode("0")
    assert result.ok
    assert dispatcher.context.mean_mode is False
    assert _bends(result.messages) == pytest.approx({60: 0.0, 64: -0.14})


def test_invalid_mean_mode_is_rejected() -> None:
    dispatcher = EventDispatcher()
    result = dispatcher.set_mean_mode("maybe")
    assert result.error is ConfigErrorKind.INVALID_MEAN_MODE
    assert dispatcher.context.mean_mode is True


@pytest.mark.parametrize(
    "flag, expected",
    [(True, True), (False, False), (1, True), (0, False), ("1", True), ("false", False), ("ON", True)],
)
def test_parse_mean_mode_accepts_boolean_likes(flag: object, expected: bool) -> None:
    assert parse_mean_mode(flag) is expected


@pytest.mark.parametrize("flag", [2, -1, "yes please", None, 0.5])
def test_parse_mean_mode_rejects_others(flag: object) -> None:
    with pytest.raises(InvalidMeanModeError):
        parse_mean_mode(flag)


def test_set_intensity_rescales_without_retuning() -> None:
    dispatcher = _dispatcher(intensity=1.0)
    dispatcher.note_event(60, 100)
    dispatcher.note_event(64, 100)
    before = [note.working_pitch for note in dispatcher.context.notes]
    engine = CountingEngine()
    dispatcher.engine = engine

    result = dispatcher.set_intensity(0.5)

    assert engine.passes == 0
    assert [note.working_pitch for note in dispatcher.context.notes] == before
    bends = _bends(result.messages)
    assert bends[60] == pytest.approx(0.035)
    assert bends[64] == pytest.approx(-0.035)
    assert not any(isinstance(m, (NoteControl, Done)) for m in result.messages)


def test_set_intensity_requires_a_number() -> None:
    dispatcher = _dispatcher(intensity=0.75)
    with pytest.raises(ValueError):
        dispatcher.set_intensity("loud")
    assert dispatcher.context.intensity == 0.75


def test_intensity_is_not_clamped() -> None:
    dispatcher = _dispatcher(mean_mode=False)
    dispatcher.note_event(60, 100)
    dispatcher.note_event(64, 100)
    bends = _bends(dispatcher.set_intensity(2.0).messages)
    assert bends[64] == pytest.approx(-0.28)


def test_invalid_startup_limit_raises() -> None:
    with pytest.raises(ValueError):
        _dispatcher(limit=9)
