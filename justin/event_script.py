"""EventScript: Parses a line-oriented script of inbound host commands."""

from collections.abc import Iterable
from dataclasses import dataclass

from justin.dispatcher import DispatchResult, EventDispatcher


class EventScriptError(ValueError):
    """A script line that cannot be turned into a command."""

    def __init__(self, line_no: int, line: str, reason: str) -> None:
        self.line_no = line_no
        self.line = line
        super().__init__(f"line {line_no}: {reason}: {line.strip()!r}")


@dataclass(frozen=True)
class Command:
    """
    One parsed script line.

    Attributes:
        name:    Canonical command name (noteIn, setLimit, setMeanMode,
                 setIntensity, allNotesOff, clearNotes).
        args:    Converted arguments.
        line_no: 1-based line number in the script, for error reports.
    """

    name: str
    args: tuple[object, ...]
    line_no: int


# alias -> (canonical name, argument converters)
_COMMANDS: dict[str, tuple[str, tuple[type, ...]]] = {
    "notein": ("noteIn", (int, int)),
    "note": ("noteIn", (int, int)),
    "setlimit": ("setLimit", (int,)),
    "limit": ("setLimit", (int,)),
    "setmeanmode": ("setMeanMode", (str,)),
    "mean": ("setMeanMode", (str,)),
    "setintensity": ("setIntensity", (float,)),
    "intensity": ("setIntensity", (float,)),
    "allnotesoff": ("allNotesOff", ()),
    "clearnotes": ("clearNotes", ()),
}


def parse_line(line: str, line_no: int = 1) -> Command | None:
    """
    Parse one script line.

    Returns:
        The Command, or None for blank lines and ``#`` comments.

    Raises:
        EventScriptError: For unknown commands, a wrong argument count, or
                          arguments that do not convert.
    """
    text = line.split("#", maxsplit=1)[0].strip()
    if not text:
        return None

    word, *raw_args = text.split()
    known = _COMMANDS.get(word.lower())
    if known is None:
        raise EventScriptError(line_no, line, f"unknown command '{word}'")

    name, converters = known
    if len(raw_args) != len(converters):
        raise EventScriptError(
            line_no, line, f"{name} takes {len(converters)} argument(s), got {len(raw_args)}"
        )

    try:
        args = tuple(convert(raw) for convert, raw in zip(converters, raw_args))
    except ValueError:
        raise EventScriptError(line_no, line, f"bad argument for {name}") from None

    return Command(name=name, args=args, line_no=line_no)


def parse_script(lines: Iterable[str]) -> list[Command]:
    """Parse every line of a script, skipping blanks and comments."""
    commands: list[Command] = []
    for line_no, line in enumerate(lines, start=1):
        command = parse_line(line, line_no)
        if command is not None:
            commands.append(command)
    return commands


def apply_command(dispatcher: EventDispatcher, command: Command) -> DispatchResult:
    """Send one parsed command to the dispatcher."""
    handlers = {
        "noteIn": dispatcher.note_event,
        "setLimit": dispatcher.set_tuning_limit,
        "setMeanMode": dispatcher.set_mean_mode,
        "setIntensity": dispatcher.set_intensity,
        "allNotesOff": dispatcher.all_notes_off,
        "clearNotes": dispatcher.clear_notes,
    }
    return handlers[command.name](*command.args)
