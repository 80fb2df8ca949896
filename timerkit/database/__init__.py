"""Database package."""

from .db import (
    SCHEMA_VERSION,
    SchemaVersionError,
    configure_engine,
    get_session,
    init_db,
    schema_version,
)
from .models import TimerSessionRecord
from .store import delete_session, load_session, load_sessions, save_session

__all__ = [
    "SCHEMA_VERSION",
    "SchemaVersionError",
    "configure_engine",
    "get_session",
    "init_db",
    "schema_version",
    "TimerSessionRecord",
    "save_session",
    "load_session",
    "load_sessions",
    "delete_session",
]
