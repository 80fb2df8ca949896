"""Save and restore timer sessions through the serialization contract.

Records are written from :meth:`TimerSession.to_dict` and read back with
:meth:`TimerSession.from_dict`, so a session saved while running resumes
counting the moment it is loaded.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from ..timer.session import Clock, TimerSession
from .db import get_session
from .models import TimerSessionRecord

log = logging.getLogger(__name__)


def _to_db_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value).astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()


def _record_to_dict(record: TimerSessionRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "duration": record.duration,
        "startTime": _from_db_time(record.start_time),
        "status": record.status,
        "pausedAt": _from_db_time(record.paused_at),
        "pausedDuration": record.paused_duration,
    }


# ── public API ────────────────────────────────────────────────────────────


def save_session(session: TimerSession) -> None:
    """Insert or update the row for ``session``."""
    data = session.to_dict()
    with get_session() as db:
        record = db.get(TimerSessionRecord, data["id"])
        if record is None:
            record = TimerSessionRecord(id=data["id"])
            db.add(record)
        record.duration = data["duration"]
        record.start_time = _to_db_time(data["startTime"])
        record.status = data["status"]
        record.paused_at = _to_db_time(data["pausedAt"])
        record.paused_duration = data["pausedDuration"]
    log.info("Saved session %s (%s)", data["id"], data["status"])


def load_session(
    session_id: str, *, clock: Clock = time.monotonic
) -> TimerSession | None:
    """Restore one session, or ``None`` if it was never saved."""
    with get_session() as db:
        record = db.get(TimerSessionRecord, session_id)
        if record is None:
            return None
        data = _record_to_dict(record)
    return TimerSession.from_dict(data, clock=clock)


def load_sessions(*, clock: Clock = time.monotonic) -> list[TimerSession]:
    """Every saved session, most recently updated first."""
    with get_session() as db:
        records = (
            db.query(TimerSessionRecord)
            .order_by(TimerSessionRecord.updated_at.desc())
            .all()
        )
        rows = [_record_to_dict(r) for r in records]
    return [TimerSession.from_dict(row, clock=clock) for row in rows]


def delete_session(session_id: str) -> bool:
    """Remove a saved session.  Returns False when nothing was stored."""
    with get_session() as db:
        record = db.get(TimerSessionRecord, session_id)
        if record is None:
            return False
        db.delete(record)
    log.info("Deleted session %s", session_id)
    return True
