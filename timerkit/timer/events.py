"""Typed events delivered through the driver and controller ``event`` signals.

One signal carries all of them; consumers branch on the type::

    def on_event(event: TimerEvent) -> None:
        if isinstance(event, Tick):
            ring.set_progress(event.progress)
        elif isinstance(event, Completed):
            toast.show("Done!")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Started:
    session_id: str
    duration: float


@dataclass(frozen=True)
class Paused:
    session_id: str
    elapsed: float


@dataclass(frozen=True)
class Resumed:
    session_id: str
    elapsed: float


@dataclass(frozen=True)
class Tick:
    """One progress sample.

    ``progress`` is in ``[0, 1]``; its meaning follows the driver's
    direction (fraction remaining for a countdown, fraction elapsed when
    counting up).
    """

    session_id: str
    progress: float
    remaining: float
    elapsed: float


@dataclass(frozen=True)
class Completed:
    session_id: str
    duration: float


TimerEvent = Union[Started, Paused, Resumed, Tick, Completed]
