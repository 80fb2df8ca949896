"""Elapsed-time state machine for a single timer.

States
------
NOT_STARTED   Fresh (or reset) session, no clock reference yet.
IN_PROGRESS   Running since ``start()``.
PAUSED        Frozen at the instant ``pause()`` was called.
RESUMED       Running again after a pause.
COMPLETED     Terminal, references cleared.

Transitions
-----------
NOT_STARTED → IN_PROGRESS              (start)
IN_PROGRESS | RESUMED → PAUSED         (pause)
PAUSED → RESUMED                       (resume)
Any → NOT_STARTED                      (reset)
Any → COMPLETED                        (complete)

Timekeeping
-----------
Elapsed time is never accumulated tick by tick.  It is recomputed on every
read from a monotonic start reference minus the total time spent paused,
so polling frequency cannot introduce drift::

    elapsed = (now_or_paused_at - start_reference) - accumulated_pause_span

Persistence converts the monotonic references into absolute UTC
timestamps at save time and back at load time.  A wall-clock jump while
the process is not running therefore shows up in the restored elapsed
time; a jump while it *is* running does not.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

log = logging.getLogger(__name__)

Clock = Callable[[], float]


# ── enums ─────────────────────────────────────────────────────────────────


class TimerStatus(Enum):
    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    PAUSED = "isPaused"
    RESUMED = "isResumed"
    COMPLETED = "isCompleted"


_LIVE_STATES = frozenset({TimerStatus.IN_PROGRESS, TimerStatus.RESUMED})

CONTRACT_KEYS = (
    "id", "duration", "startTime", "status", "pausedAt", "pausedDuration",
)


class SessionFormatError(ValueError):
    """Raised when a serialized session cannot be decoded."""


# ── session ───────────────────────────────────────────────────────────────


class TimerSession:
    """Pause/resume-capable elapsed-time tracker.

    ``duration`` is a plain attribute the owner may change at any time;
    it only affects ``time_remaining``.  The clock references can only be
    changed through the five transition methods.

    Parameters
    ----------
    duration
        Total span in seconds.
    session_id
        Identifier to reuse (deserialization); a new UUID4 otherwise.
    clock
        Monotonic time source in seconds.  Tests inject a fake one.
    """

    def __init__(
        self,
        duration: float,
        *,
        session_id: str | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._id: str = session_id or str(uuid.uuid4())
        self.duration: float = float(duration)
        self._clock: Clock = clock

        self._status: TimerStatus = TimerStatus.NOT_STARTED
        self._start_reference: float | None = None
        self._paused_at_reference: float | None = None
        self._accumulated_pause_span: float = 0.0

    def __repr__(self) -> str:
        return (
            f"<TimerSession id={self._id} status={self._status.value} "
            f"duration={self.duration:g} elapsed={self.elapsed_time:.3f}>"
        )

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def id(self) -> str:
        return self._id

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def start_reference(self) -> float | None:
        return self._start_reference

    @property
    def paused_at_reference(self) -> float | None:
        return self._paused_at_reference

    @property
    def accumulated_pause_span(self) -> float:
        return self._accumulated_pause_span

    @property
    def elapsed_time(self) -> float:
        """Live seconds since ``start()``, excluding paused intervals."""
        if self._start_reference is None:
            return 0.0
        if self._status == TimerStatus.PAUSED and self._paused_at_reference is not None:
            reference_now = self._paused_at_reference
        else:
            reference_now = self._clock()
        return reference_now - self._start_reference - self._accumulated_pause_span

    @property
    def time_remaining(self) -> float:
        return max(0.0, self.duration - self.elapsed_time)

    @property
    def progress(self) -> float:
        """0.0 → 1.0 fraction of the duration already elapsed."""
        if self._status == TimerStatus.COMPLETED:
            return 1.0
        if self.duration <= 0:
            return 0.0 if self._start_reference is None else 1.0
        return max(0.0, min(1.0, self.elapsed_time / self.duration))

    @property
    def is_running(self) -> bool:
        """True while time is advancing (IN_PROGRESS or RESUMED)."""
        return self._status in _LIVE_STATES

    @property
    def is_paused(self) -> bool:
        return self._status == TimerStatus.PAUSED

    @property
    def is_completed(self) -> bool:
        return self._status == TimerStatus.COMPLETED

    # ══════════════════════════════════════════════════════════════════
    #  TRANSITIONS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin timing.  Only valid from NOT_STARTED; ignored otherwise."""
        if self._status != TimerStatus.NOT_STARTED:
            log.debug("start() ignored for %s in %s", self._id, self._status.value)
            return
        self._start_reference = self._clock()
        self._paused_at_reference = None
        self._accumulated_pause_span = 0.0
        self._status = TimerStatus.IN_PROGRESS
        log.debug("Started session %s (duration=%gs)", self._id, self.duration)

    def pause(self) -> None:
        """Freeze elapsed time.  Only valid while running."""
        if self._status not in _LIVE_STATES:
            log.debug("pause() ignored for %s in %s", self._id, self._status.value)
            return
        self._paused_at_reference = self._clock()
        self._status = TimerStatus.PAUSED
        log.debug("Paused session %s at %.3fs", self._id, self.elapsed_time)

    def resume(self) -> None:
        """Continue after a pause.

        The status always becomes RESUMED.  The paused interval is only
        folded into the pause span when a pause instant was recorded, so
        calling this from any other state touches nothing but the tag.
        """
        self._status = TimerStatus.RESUMED
        if self._paused_at_reference is None:
            return
        self._accumulated_pause_span += self._clock() - self._paused_at_reference
        self._paused_at_reference = None
        log.debug(
            "Resumed session %s (paused total %.3fs)",
            self._id, self._accumulated_pause_span,
        )

    def reset(self) -> None:
        """Back to NOT_STARTED with every reference cleared."""
        self._clear_references()
        self._status = TimerStatus.NOT_STARTED
        log.debug("Reset session %s", self._id)

    def complete(self) -> None:
        """Mark the session terminal.  Elapsed time reads 0 afterwards."""
        self._clear_references()
        self._status = TimerStatus.COMPLETED
        log.debug("Completed session %s", self._id)

    def _clear_references(self) -> None:
        self._start_reference = None
        self._paused_at_reference = None
        self._accumulated_pause_span = 0.0

    # ══════════════════════════════════════════════════════════════════
    #  SERIALIZATION
    # ══════════════════════════════════════════════════════════════════

    def to_dict(self, *, wall_clock: Clock = time.time) -> dict[str, Any]:
        """Encode as the persistence contract.

        Monotonic references become absolute UTC timestamps, anchored on
        the current wall-clock and monotonic readings.
        """
        mono_now = self._clock()
        wall_now = wall_clock()

        def to_wall(reference: float | None) -> str | None:
            if reference is None:
                return None
            ts = wall_now - (mono_now - reference)
            return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()

        return {
            "id": self._id,
            "duration": self.duration,
            "startTime": to_wall(self._start_reference),
            "status": self._status.value,
            "pausedAt": to_wall(self._paused_at_reference),
            "pausedDuration": self._accumulated_pause_span,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ) -> "TimerSession":
        """Rebuild a session saved by :meth:`to_dict`.

        A session saved while running keeps counting the time that passed
        between save and load.
        """
        if not isinstance(data, dict):
            raise SessionFormatError(f"expected an object, got {type(data).__name__}")
        missing = [k for k in ("id", "duration", "status") if k not in data]
        if missing:
            raise SessionFormatError(f"missing keys: {', '.join(missing)}")

        try:
            status = TimerStatus(data["status"])
        except ValueError as exc:
            raise SessionFormatError(f"unknown status {data['status']!r}") from exc

        try:
            duration = float(data["duration"])
            paused_duration = float(data.get("pausedDuration") or 0.0)
        except (TypeError, ValueError) as exc:
            raise SessionFormatError("duration fields must be numbers") from exc

        session = cls(duration, session_id=str(data["id"]), clock=clock)
        mono_now = clock()
        wall_now = wall_clock()

        def to_reference(value: Any) -> float | None:
            if value is None:
                return None
            try:
                stamp = datetime.fromisoformat(value)
            except (TypeError, ValueError) as exc:
                raise SessionFormatError(f"bad timestamp {value!r}") from exc
            if stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=timezone.utc)
            return mono_now - (wall_now - stamp.timestamp())

        start_time = data.get("startTime")
        paused_at = data.get("pausedAt")
        _check_references(status, start_time, paused_at)

        session._status = status
        session._start_reference = to_reference(start_time)
        session._paused_at_reference = to_reference(paused_at)
        session._accumulated_pause_span = paused_duration
        log.debug("Restored session %s in %s", session.id, status.value)
        return session

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(**kwargs))

    @classmethod
    def from_json(cls, text: str, **kwargs: Any) -> "TimerSession":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SessionFormatError(f"invalid JSON: {exc}") from exc
        return cls.from_dict(data, **kwargs)


def _check_references(status: TimerStatus, start_time: Any, paused_at: Any) -> None:
    """Reject timestamp combinations no sequence of transitions can produce.

    ``pausedAt`` is set exactly while PAUSED.  IN_PROGRESS always has a
    ``startTime``; NOT_STARTED and COMPLETED never have one.
    """
    if (paused_at is None) == (status == TimerStatus.PAUSED):
        if paused_at is None:
            raise SessionFormatError("paused session without pausedAt")
        raise SessionFormatError(f"pausedAt set on a {status.value} session")
    if status == TimerStatus.IN_PROGRESS and start_time is None:
        raise SessionFormatError("running session without startTime")
    if status in (TimerStatus.NOT_STARTED, TimerStatus.COMPLETED) and start_time is not None:
        raise SessionFormatError(f"startTime set on a {status.value} session")
