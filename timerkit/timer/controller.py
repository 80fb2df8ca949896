"""Caller-side coordinator for one session and its driver.

A timer control (a circular button, a menu-bar item, a CLI) wants four
things: turn a tap into the right transition, keep a poll loop running
only while time is moving, know the current ring fill, and get one
stream of events.  :class:`TimerController` does exactly that and nothing
visual.

Tap cycle
---------
NOT_STARTED → start
IN_PROGRESS / RESUMED → pause
PAUSED → resume
COMPLETED → (nothing; ``reset()`` first)
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from .driver import DEFAULT_TICK_INTERVAL, TimerDirection, TimerDriver
from .events import Completed, Paused, Resumed, Started, Tick
from .formatting import format_time, status_label, status_value
from .session import TimerSession, TimerStatus

log = logging.getLogger(__name__)


class TimerController(QObject):
    """Drives a :class:`TimerSession` through a :class:`TimerDriver`.

    Signals
    -------
    event(TimerEvent)
        ``Started``, ``Paused``, ``Resumed``, ``Tick`` and ``Completed``
        in the order they happen.  ``Completed`` fires at most once until
        the next ``reset()``.
    status_changed(new_status: TimerStatus)
        Emitted after every transition the controller performs or
        observes.
    """

    event = pyqtSignal(object)
    status_changed = pyqtSignal(object)

    def __init__(
        self,
        session: TimerSession,
        parent: QObject | None = None,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        direction: TimerDirection = TimerDirection.COUNTDOWN,
        db_enabled: bool = False,
    ) -> None:
        super().__init__(parent)
        self._db_enabled: bool = db_enabled
        self._driver = TimerDriver(
            self, tick_interval=tick_interval, direction=direction
        )
        self._driver.event.connect(self._on_driver_event)

        self._session: TimerSession = session
        self._progress: float = self._driver.idle_progress
        self._completion_fired: bool = False
        self.attach(session)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def session(self) -> TimerSession:
        return self._session

    @property
    def driver(self) -> TimerDriver:
        return self._driver

    @property
    def status(self) -> TimerStatus:
        return self._session.status

    @property
    def progress(self) -> float:
        """Ring fill in ``[0, 1]`` as of the latest sample."""
        return self._progress

    @property
    def elapsed_text(self) -> str:
        return format_time(self._session.elapsed_time)

    @property
    def remaining_text(self) -> str:
        return format_time(self._session.time_remaining)

    @property
    def accessibility_label(self) -> str:
        return status_label(self.status)

    @property
    def accessibility_value(self) -> str:
        return status_value(self.status, self._session.elapsed_time)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start a fresh session.  Zero-length sessions complete at once."""
        session = self._session
        if session.status != TimerStatus.NOT_STARTED:
            return
        if session.duration <= 0:
            log.debug("Session %s has no duration, completing now", session.id)
            self._complete_now()
            return

        session.start()
        self._persist()
        self._set_status()
        self.event.emit(Started(session.id, session.duration))
        self._driver.observe(session)

    def pause(self) -> None:
        session = self._session
        if not session.is_running:
            return
        session.pause()
        self._driver.stop()
        self._persist()
        self._set_status()
        self.event.emit(Paused(session.id, session.elapsed_time))
        self._emit_sample()

    def resume(self) -> None:
        session = self._session
        if not session.is_paused:
            return
        session.resume()
        self._persist()
        self._set_status()
        self.event.emit(Resumed(session.id, session.elapsed_time))
        self._driver.observe(session)

    def reset(self) -> None:
        """Stop everything and return the session to NOT_STARTED."""
        self._driver.stop()
        self._session.reset()
        self._completion_fired = False
        self._progress = self._driver.idle_progress
        self._persist()
        self._set_status()

    def complete(self) -> None:
        """Finish early.  Emits ``Completed`` unless it already fired."""
        if self._completion_fired:
            return
        self._complete_now()

    def tap(self) -> None:
        """Advance the start → pause → resume cycle by one step."""
        status = self._session.status
        if status == TimerStatus.NOT_STARTED:
            self.start()
        elif status in (TimerStatus.IN_PROGRESS, TimerStatus.RESUMED):
            self.pause()
        elif status == TimerStatus.PAUSED:
            self.resume()
        else:
            log.debug("tap() on completed session %s ignored", self._session.id)

    def attach(self, session: TimerSession) -> None:
        """Switch to ``session`` and pick up wherever it currently is.

        A live session (for example one just restored from disk) starts
        polling right away; a paused one publishes its frozen sample.
        """
        self._driver.stop()
        self._session = session
        self._completion_fired = session.is_completed
        self._set_status()

        if session.is_running:
            self._driver.observe(session)
        elif session.is_paused:
            self._emit_sample()
        elif session.is_completed:
            self._progress = self._driver.terminal_progress
        else:
            self._progress = self._driver.idle_progress

    def shutdown(self) -> None:
        """Cancel polling; the session itself is left untouched."""
        self._driver.stop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _complete_now(self) -> None:
        session = self._session
        self._driver.stop()
        session.complete()
        self._completion_fired = True
        self._progress = self._driver.terminal_progress
        self._persist()
        self._set_status()
        self.event.emit(Completed(session.id, session.duration))

    def _emit_sample(self) -> None:
        sample = self._driver.sample(self._session)
        self._progress = sample.progress
        self.event.emit(sample)

    def _on_driver_event(self, event: object) -> None:
        if isinstance(event, Tick):
            self._progress = event.progress
        elif isinstance(event, Completed):
            if self._completion_fired:
                return
            self._completion_fired = True
            self._progress = self._driver.terminal_progress
            self._persist()
            self._set_status()
        self.event.emit(event)

    def _set_status(self) -> None:
        self.status_changed.emit(self._session.status)

    def _persist(self) -> None:
        if not self._db_enabled:
            return
        from ..database.store import save_session

        save_session(self._session)
