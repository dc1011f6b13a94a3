"""Adaptive just intonation for MIDI note streams."""

from justin.config import TuningConfig
from justin.dispatcher import DispatchResult, EventDispatcher
from justin.errors import ConfigErrorKind, InvalidConfigurationError
from justin.interval_table import IntervalEntry, IntervalTable, available_limits, select_table

__version__ = "0.1.0"

__all__ = [
    "ConfigErrorKind",
    "DispatchResult",
    "EventDispatcher",
    "IntervalEntry",
    "IntervalTable",
    "InvalidConfigurationError",
    "TuningConfig",
    "available_limits",
    "select_table",
]
