"""timerkit: drift-free timer sessions and progress polling for GUI controls."""

from . import logger  # noqa: F401  (installs the package NullHandler)
from .timer import (
    TimerSession,
    TimerStatus,
    TimerDriver,
    TimerDirection,
    TimerController,
)

__version__ = "0.1.0"

__all__ = [
    "TimerSession",
    "TimerStatus",
    "TimerDriver",
    "TimerDirection",
    "TimerController",
]
