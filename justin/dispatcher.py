"""EventDispatcher: Entry point for note events and configuration commands."""

import logging
from dataclasses import dataclass, field

from justin.config import TuningConfig
from justin.context import TuningContext
from justin.errors import ConfigErrorKind, InvalidConfigurationError, InvalidMeanModeError
from justin.interval_table import IntervalTable, select_table
from justin.messages import OutboundMessage
from justin.output_formatter import OutputFormatter
from justin.retuning import RetuningEngine

logger = logging.getLogger(__name__)

_TRUE_FLAGS = {"1", "true", "on"}
_FALSE_FLAGS = {"0", "false", "off"}


@dataclass
class DispatchResult:
    """
    Outcome of one inbound call.

    Attributes:
        messages: Outbound messages in emission order.
        error:    Set when a configuration command was rejected. The previous
                  configuration is then still in effect and messages is empty.
        detail:   Human-readable reason for the rejection.
    """

    messages: list[OutboundMessage] = field(default_factory=list)
    error: ConfigErrorKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_mean_mode(flag: object) -> bool:
    """
    Interpret a boolean-like flag.

    Accepts bools, the integers 0 and 1, and the strings "0"/"1",
    "false"/"true" and "off"/"on" in any case.

    Raises:
        InvalidMeanModeError: For anything else.
    """
    if isinstance(flag, bool):
        return flag
    if isinstance(flag, int) and flag in (0, 1):
        return bool(flag)
    if isinstance(flag, str):
        normalized = flag.strip().lower()
        if normalized in _TRUE_FLAGS:
            return True
        if normalized in _FALSE_FLAGS:
            return False
    raise InvalidMeanModeError(flag)


class EventDispatcher:
    """
    Applies inbound events to a TuningContext and reports what to send out.

    Every call runs to completion before returning: the note set is mutated,
    the whole chord is retuned and every resulting message is collected.

    Usage:

        dispatcher = EventDispatcher()
        for message in dispatcher.note_event(60, 100).messages:
            ...
    """

    def __init__(
        self,
        context: TuningContext | None = None,
        engine: RetuningEngine | None = None,
        formatter: OutputFormatter | None = None,
    ) -> None:
        self.context = context or TuningContext.from_config()
        self.engine = engine or RetuningEngine()
        self.formatter = formatter or OutputFormatter()

    @classmethod
    def from_config(cls, config: TuningConfig) -> "EventDispatcher":
        return cls(context=TuningContext.from_config(config))

    @property
    def table(self) -> IntervalTable:
        return self.context.table

    # ------------------------------------------------------------------
    # Note events
    # ------------------------------------------------------------------

    def note_event(self, pitch: int, velocity: int) -> DispatchResult:
        """
        Handle a note-on (velocity > 0) or note-off (velocity <= 0).

        The thru NoteControl is emitted first with the velocity as received for
        note-ons and 0 for note-offs, then bends for every held note, the
        diagnostics and Done.
        """
        is_note_on = velocity > 0
        messages: list[OutboundMessage] = [
            self.formatter.note_control(pitch, velocity if is_note_on else 0)
        ]

        if is_note_on:
            self.context.notes.note_on(pitch, velocity)
        else:
            self.context.notes.note_off(pitch)

        self.engine.retune(self.context)
        messages.extend(self.formatter.pitch_messages(self.context))
        messages.append(self.formatter.done())
        return DispatchResult(messages=messages)

    def all_notes_off(self) -> DispatchResult:
        """Send a note-off for every held note, then forget them all."""
        messages = self.formatter.release_all(self.context)
        self.context.reset()
        logger.debug("all notes off, released %d", len(messages))
        return DispatchResult(messages=messages)

    def clear_notes(self) -> DispatchResult:
        return self.all_notes_off()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_tuning_limit(self, value: object) -> DispatchResult:
        """Select a preset table and retune the held chord under it."""
        try:
            table = select_table(value)
        except InvalidConfigurationError as exc:
            return self._rejected(exc)

        self.context.table = table
        logger.debug("selected %d-limit table", table.limit)
        return self._retune_and_emit()

    def set_mean_mode(self, flag: object) -> DispatchResult:
        """Turn mean-centering on or off and retune the held chord."""
        try:
            mean_mode = parse_mean_mode(flag)
        except InvalidConfigurationError as exc:
            return self._rejected(exc)

        self.context.mean_mode = mean_mode
        logger.debug("mean mode %s", "on" if mean_mode else "off")
        return self._retune_and_emit()

    def set_intensity(self, value: float) -> DispatchResult:
        """
        Change the output scale and re-send bends for the held notes.

        Working pitches are reused as they are; no retuning pass runs.
        Intensity is not a rejectable setting: callers pass a real number and
        own any conversion from text, as the event script parser does.

        Raises:
            ValueError, TypeError: If value is not a number. The previous
                                   intensity is kept.
        """
        self.context.intensity = float(value)
        logger.debug("intensity %s", self.context.intensity)
        return DispatchResult(messages=self.formatter.pitch_messages(self.context))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _retune_and_emit(self) -> DispatchResult:
        self.engine.retune(self.context)
        return DispatchResult(messages=self.formatter.pitch_messages(self.context))

    def _rejected(self, exc: InvalidConfigurationError) -> DispatchResult:
        logger.warning("%s", exc)
        return DispatchResult(error=exc.kind, detail=str(exc))
