"""Timer package."""

from .session import TimerSession, TimerStatus, SessionFormatError
from .events import Started, Paused, Resumed, Tick, Completed, TimerEvent
from .driver import (
    TimerDriver,
    TimerDirection,
    DEFAULT_TICK_INTERVAL,
    MIN_TICK_INTERVAL,
)
from .controller import TimerController
from .formatting import format_time, status_label, status_value

__all__ = [
    "TimerSession",
    "TimerStatus",
    "SessionFormatError",
    "Started",
    "Paused",
    "Resumed",
    "Tick",
    "Completed",
    "TimerEvent",
    "TimerDriver",
    "TimerDirection",
    "DEFAULT_TICK_INTERVAL",
    "MIN_TICK_INTERVAL",
    "TimerController",
    "format_time",
    "status_label",
    "status_value",
]
