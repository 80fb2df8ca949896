"""SQLAlchemy ORM models for persisted timer sessions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimerSessionRecord(Base):
    """One saved :class:`~timerkit.timer.session.TimerSession`.

    Columns mirror the serialization contract.  Timestamps are stored as
    naive UTC datetimes.
    """

    __tablename__ = "timer_sessions"

    id = Column(String(36), primary_key=True)
    duration = Column(Float, nullable=False, default=0.0)
    start_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="notStarted")
    paused_at = Column(DateTime, nullable=True)
    paused_duration = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return (
            f"<TimerSessionRecord id={self.id} status={self.status} "
            f"duration={self.duration}>"
        )
