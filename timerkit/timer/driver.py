"""Polling loop that turns a :class:`TimerSession` into progress events.

The driver never keeps time itself.  Every tick re-reads the session's
computed ``time_remaining``, so a late or skipped tick cannot accumulate
error.  The loop is a single ``QTimer``: ``stop()`` cancels it on the spot
and ``observe()`` always stops the previous loop before arming a new one,
so one driver never has two loops in flight.
"""

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .events import Completed, Tick
from .session import TimerSession, TimerStatus

log = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_TICK_INTERVAL = 1.0  # seconds
MIN_TICK_INTERVAL = 0.01


class TimerDirection(Enum):
    COUNTDOWN = "countdown"   # progress = remaining / total
    COUNT_UP = "count_up"     # progress = elapsed / total


# ── driver ────────────────────────────────────────────────────────────────


class TimerDriver(QObject):
    """Samples one session per tick while it is live.

    Signals
    -------
    event(TimerEvent)
        ``Tick`` for every sample, then a single ``Completed`` when the
        remaining time reaches zero.  Nothing is emitted after
        ``Completed`` or after ``stop()``.
    """

    event = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        direction: TimerDirection = TimerDirection.COUNTDOWN,
    ) -> None:
        super().__init__(parent)
        self._session: TimerSession | None = None
        self._tick_interval: float = _clamp_interval(tick_interval)
        self._direction: TimerDirection = direction
        self._last_progress: float | None = None
        self._completion_fired: bool = False

        self._qt_timer = QTimer(self)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def session(self) -> TimerSession | None:
        return self._session

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def direction(self) -> TimerDirection:
        return self._direction

    @direction.setter
    def direction(self, value: TimerDirection) -> None:
        self._direction = value

    @property
    def last_progress(self) -> float | None:
        """Progress carried by the most recent ``Tick`` (None before any)."""
        return self._last_progress

    @property
    def idle_progress(self) -> float:
        """Progress shown before a session starts."""
        return 1.0 if self._direction == TimerDirection.COUNTDOWN else 0.0

    @property
    def terminal_progress(self) -> float:
        """Progress shown once a session has completed."""
        return 0.0 if self._direction == TimerDirection.COUNTDOWN else 1.0

    @property
    def is_active(self) -> bool:
        return self._qt_timer.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def observe(
        self, session: TimerSession, tick_interval: float | None = None
    ) -> None:
        """Start polling ``session``, replacing any loop already running.

        The first sample is taken immediately.  A session that is already
        COMPLETED is remembered but never polled.
        """
        self.stop()
        self._session = session
        self._completion_fired = False
        if tick_interval is not None:
            self._tick_interval = _clamp_interval(tick_interval)

        if session.status == TimerStatus.COMPLETED:
            log.debug("observe() ignored for completed session %s", session.id)
            return

        self._qt_timer.setInterval(round(self._tick_interval * 1000))
        self._qt_timer.start()
        log.debug(
            "Observing session %s every %.3fs", session.id, self._tick_interval
        )
        self._on_tick()

    def stop(self) -> None:
        """Cancel the loop.  No further events are emitted."""
        if self._qt_timer.isActive():
            self._qt_timer.stop()
            if self._session is not None:
                log.debug("Stopped polling session %s", self._session.id)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: loop body
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if not self._qt_timer.isActive():
            return  # cancelled
        session = self._session
        if session is None or self._completion_fired:
            self.stop()
            return
        if not session.is_running:
            # Paused, reset or completed elsewhere; the owner restarts us.
            self.stop()
            return

        if session.time_remaining <= 0:
            self._finish(session)
            return

        sample = self.sample(session)
        self._last_progress = sample.progress
        self.event.emit(sample)

    def sample(self, session: TimerSession | None = None) -> Tick:
        """Build a ``Tick`` for the current instant without emitting it."""
        session = session or self._session
        if session is None:
            raise ValueError("no session to sample")
        remaining = session.time_remaining
        elapsed = session.elapsed_time
        progress = self._progress_for(remaining, elapsed, session.duration)
        return Tick(session.id, progress, remaining, elapsed)

    def _finish(self, session: TimerSession) -> None:
        self.stop()
        self._completion_fired = True
        total = session.duration
        session.complete()
        self._last_progress = self.terminal_progress
        log.info("Session %s completed (%gs)", session.id, total)
        self.event.emit(Completed(session.id, total))

    def _progress_for(self, remaining: float, elapsed: float, total: float) -> float:
        if total <= 0:
            return 1.0
        if self._direction == TimerDirection.COUNTDOWN:
            return max(0.0, min(remaining / total, 1.0))
        return max(0.0, min(elapsed / total, 1.0))


def _clamp_interval(seconds: float) -> float:
    return max(MIN_TICK_INTERVAL, float(seconds))
