"""Database connection, schema stamp and session management.

The store lives in ``timerkit.db`` under the application directory unless
``Settings.database_url`` (or a test) points it elsewhere.  SQLite files
are stamped with ``SCHEMA_VERSION`` through ``PRAGMA user_version`` so a
file written by a newer release is refused instead of misread.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import APP_SUPPORT_DIR
from .models import Base

log = logging.getLogger(__name__)

DB_PATH = APP_SUPPORT_DIR / "timerkit.db"
SCHEMA_VERSION = 1


class SchemaVersionError(RuntimeError):
    """The database was written by a newer schema than this release knows."""


# ── engine & session factory (created lazily) ─────────────────────────────

_engine: Engine | None = None
_SessionFactory = None


def _make_engine(url: str) -> Engine:
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = _make_engine(f"sqlite:///{DB_PATH}")
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Point the store at ``url`` (tests use ``sqlite:///:memory:``)."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = _make_engine(url)
    log.debug("Database URL set to %s", _engine.url)


def schema_version() -> int:
    """The stamped schema version, or 0 for an unstamped/non-SQLite store."""
    engine = _get_engine()
    if engine.dialect.name != "sqlite":
        return 0
    with engine.connect() as conn:
        return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def init_db() -> None:
    """Create missing tables and stamp the schema version.

    Raises :class:`SchemaVersionError` if the file is from a newer schema.
    """
    engine = _get_engine()
    found = schema_version()
    if found > SCHEMA_VERSION:
        raise SchemaVersionError(
            f"database schema v{found} is newer than supported v{SCHEMA_VERSION}"
        )
    Base.metadata.create_all(engine)
    if engine.dialect.name == "sqlite" and found < SCHEMA_VERSION:
        with engine.begin() as conn:
            conn.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION}")
    log.debug("Database ready at %s (schema v%d)", engine.url, SCHEMA_VERSION)


@contextmanager
def get_session():
    """Yield an ORM session; commit on success, rollback and re-raise on error."""
    db: OrmSession = _get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
