"""Error types and the structured status returned for rejected configuration."""

from enum import Enum


class ConfigErrorKind(Enum):
    """Why a configuration command was rejected."""

    INVALID_LIMIT = "invalid_limit"
    INVALID_MEAN_MODE = "invalid_mean_mode"


class InvalidConfigurationError(ValueError):
    """Base class for configuration values the engine refuses to apply."""

    kind: ConfigErrorKind


class InvalidLimitError(InvalidConfigurationError):
    """Raised when a tuning limit outside the available presets is requested."""

    kind = ConfigErrorKind.INVALID_LIMIT

    def __init__(self, limit: object, valid: list[int]) -> None:
        self.limit = limit
        self.valid = valid
        choices = ", ".join(str(v) for v in valid)
        super().__init__(f"Tuning not available: {limit!r}. Valid limits: {choices}.")


class InvalidMeanModeError(InvalidConfigurationError):
    """Raised when a mean-mode flag cannot be read as true or false."""

    kind = ConfigErrorKind.INVALID_MEAN_MODE

    def __init__(self, flag: object) -> None:
        self.flag = flag
        super().__init__(
            f"Not a valid mean mode: {flag!r}. Use 1 or true, 0 or false."
        )
