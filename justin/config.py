"""Tuning configuration defaults."""

from dataclasses import dataclass

DEFAULT_LIMIT = 5
DEFAULT_INTENSITY = 0.75  # fraction of the just correction actually applied
DEFAULT_MEAN_MODE = True


@dataclass
class TuningConfig:
    """
    Startup values for a tuning context.

    Attributes:
        limit:     Prime limit of the interval table (5, 7, 11 or 13).
        intensity: Scale applied to every outgoing bend. Not clamped, so values
                   above 1.0 exaggerate the correction and negative values
                   invert it.
        mean_mode: When True the retuned chord is re-centred so its average
                   pitch matches the equal-tempered average. When False the
                   lowest note stays at its equal-tempered pitch.
    """

    limit: int = DEFAULT_LIMIT
    intensity: float = DEFAULT_INTENSITY
    mean_mode: bool = DEFAULT_MEAN_MODE
