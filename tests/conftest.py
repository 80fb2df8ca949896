"""Shared pytest fixtures for timerkit tests."""

import logging
import sys

import pytest

from PyQt6.QtCore import QCoreApplication

from timerkit.database.db import configure_engine, init_db
from timerkit.logger import LOGGER_NAME
from timerkit.timer import TimerController, TimerDriver, TimerSession

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    """A 10-second session on the fake clock."""
    return TimerSession(10, clock=clock)


@pytest.fixture
def driver(qapp):
    """Driver with a 1 s interval, counting down."""
    d = TimerDriver()
    yield d
    d.stop()


@pytest.fixture
def controller(qapp, session):
    """Controller over the 10 s fake-clock session, DB disabled."""
    c = TimerController(session)
    yield c
    c.shutdown()


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    """Redirect settings.json into a temp directory."""
    path = tmp_path / "settings.json"
    monkeypatch.setattr("timerkit.settings.SETTINGS_PATH", path)
    monkeypatch.setattr("timerkit.settings.APP_SUPPORT_DIR", tmp_path)
    return path


@pytest.fixture
def restore_logging():
    """Drop handlers a test adds to the package logger."""
    pkg = logging.getLogger(LOGGER_NAME)
    before = list(pkg.handlers)
    level = pkg.level
    yield
    for h in list(pkg.handlers):
        if h not in before:
            pkg.removeHandler(h)
            h.close()
    pkg.setLevel(level)
