"""TuningContext: The live state every engine operation reads and mutates."""

from dataclasses import dataclass, field

from justin.config import TuningConfig
from justin.interval_table import IntervalTable, select_table
from justin.notes import ActiveNoteSet


@dataclass
class TuningContext:
    """
    Selected interval table, output intensity, mean mode and held notes.

    One context is created per host session and handed to the retuning engine,
    output formatter and dispatcher. It has no internal locking, so a
    multi-threaded host must serialise every call that touches it.
    """

    table: IntervalTable
    intensity: float
    mean_mode: bool
    notes: ActiveNoteSet = field(default_factory=ActiveNoteSet)

    @classmethod
    def from_config(cls, config: TuningConfig | None = None) -> "TuningContext":
        """
        Build a context from startup configuration.

        Raises:
            InvalidLimitError: If config.limit is not an available preset.
        """
        config = config or TuningConfig()
        return cls(
            table=select_table(config.limit),
            intensity=config.intensity,
            mean_mode=config.mean_mode,
        )

    def reset(self) -> None:
        """Drop every held note. Tuning settings are kept."""
        self.notes.clear()
