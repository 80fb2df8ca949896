"""Tests for the TimerSession state machine.

Covers: transitions and ignored transitions, elapsed/remaining arithmetic
across pauses, reset/complete clearing, real-clock pause/resume timing,
and the serialization contract (including save-while-running reloads).
"""

import json
import time

import pytest

from timerkit.timer.session import (
    CONTRACT_KEYS,
    SessionFormatError,
    TimerSession,
    TimerStatus,
)

from helpers import FakeClock


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state(self, session):
        assert session.status == TimerStatus.NOT_STARTED
        assert session.start_reference is None
        assert session.elapsed_time == 0
        assert session.time_remaining == 10

    def test_ids_are_unique(self):
        assert TimerSession(5).id != TimerSession(5).id

    def test_explicit_id_is_kept(self):
        assert TimerSession(5, session_id="abc").id == "abc"

    def test_start_goes_in_progress(self, session, clock):
        session.start()
        assert session.status == TimerStatus.IN_PROGRESS
        assert session.start_reference == clock.now
        assert session.is_running

    def test_start_ignored_when_already_running(self, session, clock):
        session.start()
        clock.advance(3)
        session.start()
        assert session.elapsed_time == pytest.approx(3)

    def test_start_ignored_after_completion(self, session):
        session.complete()
        session.start()
        assert session.status == TimerStatus.COMPLETED
        assert session.start_reference is None

    def test_start_allowed_after_reset(self, session, clock):
        session.start()
        clock.advance(4)
        session.reset()
        session.start()
        clock.advance(1)
        assert session.status == TimerStatus.IN_PROGRESS
        assert session.elapsed_time == pytest.approx(1)

    def test_pause_from_in_progress(self, session):
        session.start()
        session.pause()
        assert session.status == TimerStatus.PAUSED
        assert session.paused_at_reference is not None
        assert session.is_paused

    def test_pause_from_resumed(self, session):
        session.start()
        session.pause()
        session.resume()
        session.pause()
        assert session.status == TimerStatus.PAUSED

    @pytest.mark.parametrize("setup", ["nothing", "complete", "pause"])
    def test_pause_ignored_when_not_running(self, session, clock, setup):
        if setup == "complete":
            session.complete()
        elif setup == "pause":
            session.start()
            session.pause()
        before = (session.status, session.paused_at_reference)
        clock.advance(2)
        session.pause()
        assert (session.status, session.paused_at_reference) == before

    def test_resume_from_paused(self, session):
        session.start()
        session.pause()
        session.resume()
        assert session.status == TimerStatus.RESUMED
        assert session.paused_at_reference is None

    def test_resume_when_not_paused_only_flips_status(self, session, clock):
        session.start()
        clock.advance(2)
        session.resume()
        assert session.status == TimerStatus.RESUMED
        assert session.accumulated_pause_span == 0
        assert session.elapsed_time == pytest.approx(2)

    def test_resume_from_not_started_leaves_elapsed_zero(self, session):
        session.resume()
        assert session.status == TimerStatus.RESUMED
        assert session.elapsed_time == 0

    @pytest.mark.parametrize("steps", [[], ["start"], ["start", "pause"],
                                       ["start", "pause", "resume"], ["complete"]])
    def test_reset_from_any_state(self, session, clock, steps):
        for step in steps:
            getattr(session, step)()
            clock.advance(1)
        session.reset()
        assert session.status == TimerStatus.NOT_STARTED
        assert session.elapsed_time == 0
        assert session.time_remaining == session.duration
        assert session.accumulated_pause_span == 0

    @pytest.mark.parametrize("steps", [[], ["start"], ["start", "pause"],
                                       ["start", "pause", "resume"]])
    def test_complete_from_any_state(self, session, clock, steps):
        for step in steps:
            getattr(session, step)()
            clock.advance(1)
        session.complete()
        clock.advance(5)
        assert session.status == TimerStatus.COMPLETED
        assert session.elapsed_time == 0
        assert session.start_reference is None
        assert session.paused_at_reference is None
        assert session.is_completed


# ═══════════════════════════════════════════════════════════════════════════
#  ELAPSED / REMAINING
# ═══════════════════════════════════════════════════════════════════════════


class TestElapsedTime:

    def test_elapsed_tracks_clock(self, session, clock):
        session.start()
        clock.advance(2.5)
        assert session.elapsed_time == pytest.approx(2.5)
        assert session.time_remaining == pytest.approx(7.5)

    def test_elapsed_frozen_while_paused(self, session, clock):
        session.start()
        clock.advance(3)
        session.pause()
        clock.advance(100)
        assert session.elapsed_time == pytest.approx(3)

    def test_pause_span_subtracted_after_resume(self, session, clock):
        session.start()
        clock.advance(3)
        session.pause()
        clock.advance(20)
        session.resume()
        assert session.accumulated_pause_span == pytest.approx(20)
        clock.advance(1)
        assert session.elapsed_time == pytest.approx(4)

    def test_multiple_pause_cycles_accumulate(self, session, clock):
        session.start()
        for _ in range(3):
            clock.advance(1)
            session.pause()
            clock.advance(5)
            session.resume()
        assert session.elapsed_time == pytest.approx(3)
        assert session.accumulated_pause_span == pytest.approx(15)

    def test_remaining_clamps_at_zero(self, session, clock):
        session.start()
        clock.advance(25)
        assert session.time_remaining == 0

    def test_negative_duration_never_reports_negative_time(self, clock):
        s = TimerSession(-5, clock=clock)
        s.start()
        clock.advance(1)
        assert s.time_remaining == 0

    def test_changing_duration_affects_only_remaining(self, session, clock):
        session.start()
        clock.advance(4)
        session.duration = 30
        assert session.elapsed_time == pytest.approx(4)
        assert session.time_remaining == pytest.approx(26)

    def test_reads_have_no_side_effects(self, session, clock):
        session.start()
        clock.advance(1)
        for _ in range(50):
            _ = session.elapsed_time, session.time_remaining, session.progress
        assert session.status == TimerStatus.IN_PROGRESS
        assert session.elapsed_time == pytest.approx(1)

    def test_progress(self, session, clock):
        assert session.progress == 0.0
        session.start()
        clock.advance(5)
        assert session.progress == pytest.approx(0.5)
        clock.advance(50)
        assert session.progress == 1.0
        session.complete()
        assert session.progress == 1.0

    def test_zero_duration_progress(self, clock):
        s = TimerSession(0, clock=clock)
        assert s.progress == 0.0
        s.start()
        assert s.progress == 1.0


# ═══════════════════════════════════════════════════════════════════════════
#  REAL CLOCK
# ═══════════════════════════════════════════════════════════════════════════


class TestRealClock:

    def test_elapsed_near_zero_after_start(self):
        s = TimerSession(60)
        s.start()
        assert 0 <= s.elapsed_time < 0.1

    def test_pause_resume_scenario(self):
        s = TimerSession(30)
        s.start()
        time.sleep(0.1)
        s.pause()
        at_pause = s.elapsed_time
        assert at_pause == pytest.approx(0.1, abs=0.05)

        time.sleep(0.2)
        assert s.elapsed_time == pytest.approx(at_pause, abs=1e-9)

        s.resume()
        assert s.elapsed_time >= at_pause
        time.sleep(0.1)
        assert s.elapsed_time == pytest.approx(0.2, abs=0.05)
        assert s.elapsed_time > at_pause


# ═══════════════════════════════════════════════════════════════════════════
#  SERIALIZATION
# ═══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def wall():
    return FakeClock(start=1_760_000_000.0)


def _advance(seconds, *clocks):
    for c in clocks:
        c.advance(seconds)


class TestSerialization:

    def test_contract_keys(self, session):
        assert tuple(session.to_dict()) == CONTRACT_KEYS

    def test_not_started_encodes_nulls(self, session):
        data = session.to_dict()
        assert data["startTime"] is None
        assert data["pausedAt"] is None
        assert data["pausedDuration"] == 0
        assert data["status"] == "notStarted"

    def test_round_trip_preserves_identity(self, session, clock, wall):
        session.start()
        restored = TimerSession.from_dict(
            session.to_dict(wall_clock=wall), clock=clock, wall_clock=wall
        )
        assert restored.id == session.id
        assert restored.duration == session.duration
        assert restored.status == TimerStatus.IN_PROGRESS

    def test_running_session_keeps_counting_while_saved(self, session, clock, wall):
        session.start()
        _advance(2, clock, wall)
        data = session.to_dict(wall_clock=wall)

        _advance(30, clock, wall)   # "app closed" for 30 s
        restored = TimerSession.from_dict(data, clock=clock, wall_clock=wall)
        assert restored.elapsed_time == pytest.approx(32, abs=1e-3)

    def test_fresh_process_clock_offset_does_not_matter(self, session, clock, wall):
        session.start()
        _advance(2, clock, wall)
        data = session.to_dict(wall_clock=wall)

        new_process_clock = FakeClock(start=5.0)
        wall.advance(10)
        restored = TimerSession.from_dict(data, clock=new_process_clock, wall_clock=wall)
        assert restored.elapsed_time == pytest.approx(12, abs=1e-3)

    def test_paused_session_stays_frozen(self, session, clock, wall):
        session.start()
        _advance(3, clock, wall)
        session.pause()
        _advance(4, clock, wall)
        data = session.to_dict(wall_clock=wall)
        assert data["pausedAt"] is not None

        _advance(60, clock, wall)
        restored = TimerSession.from_dict(data, clock=clock, wall_clock=wall)
        assert restored.status == TimerStatus.PAUSED
        assert restored.elapsed_time == pytest.approx(3, abs=1e-3)

        restored.resume()
        assert restored.accumulated_pause_span == pytest.approx(64, abs=1e-3)
        _advance(1, clock, wall)
        assert restored.elapsed_time == pytest.approx(4, abs=1e-3)

    def test_pause_span_survives(self, session, clock, wall):
        session.start()
        _advance(1, clock, wall)
        session.pause()
        _advance(5, clock, wall)
        session.resume()
        data = session.to_dict(wall_clock=wall)
        assert data["pausedDuration"] == pytest.approx(5)

        restored = TimerSession.from_dict(data, clock=clock, wall_clock=wall)
        assert restored.elapsed_time == pytest.approx(1, abs=1e-3)
        assert restored.status == TimerStatus.RESUMED

    def test_json_round_trip_after_real_delay(self):
        s = TimerSession(120)
        s.start()
        text = s.to_json()
        before = s.elapsed_time
        t0 = time.monotonic()
        time.sleep(0.2)
        restored = TimerSession.from_json(text)
        after = restored.elapsed_time
        delta = time.monotonic() - t0
        assert after == pytest.approx(before + delta, abs=0.02)
        assert json.loads(text)["status"] == "inProgress"

    def test_naive_timestamps_read_as_utc(self, clock, wall):
        data = {
            "id": "x", "duration": 10, "status": "inProgress",
            "startTime": "2025-10-09T08:53:15", "pausedAt": None,
            "pausedDuration": 0,
        }
        aware = dict(data, startTime="2025-10-09T08:53:15+00:00")
        a = TimerSession.from_dict(data, clock=clock, wall_clock=wall)
        b = TimerSession.from_dict(aware, clock=clock, wall_clock=wall)
        assert a.elapsed_time == pytest.approx(b.elapsed_time)

    @pytest.mark.parametrize("payload", [
        [],
        {"duration": 5, "status": "notStarted"},
        {"id": "x", "duration": 5, "status": "running"},
        {"id": "x", "duration": "five", "status": "notStarted"},
        {"id": "x", "duration": 5, "status": "inProgress", "startTime": "yesterday"},
        {"id": "x", "duration": 5, "status": "inProgress", "startTime": None},
        {"id": "x", "duration": 5, "status": "isPaused",
         "startTime": "2025-10-09T08:53:15+00:00", "pausedAt": None},
        {"id": "x", "duration": 5, "status": "isResumed",
         "startTime": "2025-10-09T08:53:15+00:00",
         "pausedAt": "2025-10-09T08:53:20+00:00"},
        {"id": "x", "duration": 5, "status": "notStarted",
         "startTime": "2025-10-09T08:53:15+00:00"},
        {"id": "x", "duration": 5, "status": "isCompleted",
         "startTime": "2025-10-09T08:53:15+00:00"},
    ])
    def test_malformed_payloads_raise(self, payload):
        with pytest.raises(SessionFormatError):
            TimerSession.from_dict(payload)

    def test_invalid_json_raises(self):
        with pytest.raises(SessionFormatError):
            TimerSession.from_json("{not json")

    def test_format_error_is_value_error(self):
        assert issubclass(SessionFormatError, ValueError)

    def test_resume_without_start_still_round_trips(self, session, clock, wall):
        session.resume()
        data = session.to_dict(wall_clock=wall)
        restored = TimerSession.from_dict(data, clock=clock, wall_clock=wall)
        assert restored.status == TimerStatus.RESUMED
        assert restored.elapsed_time == 0
