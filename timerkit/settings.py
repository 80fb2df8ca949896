"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/timerkit/settings.json

Set ``TIMERKIT_HOME`` to keep everything (settings, database, logs)
somewhere else.

Usage::

    settings = load_settings()
    settings.tick_interval = 0.25
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

log = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path(
    os.environ.get("TIMERKIT_HOME")
    or Path.home() / "Library" / "Application Support" / "timerkit"
)
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"
LOG_DIR = APP_SUPPORT_DIR / "logs"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    tick_interval: float = 1.0             # seconds between samples
    default_duration: float = 60.0         # seconds
    direction: str = "countdown"           # countdown | count_up

    # ── persistence ───────────────────────────────────────────────────
    persist_sessions: bool = True
    database_url: str = ""                 # empty: timerkit.db in APP_SUPPORT_DIR

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_to_console: bool = False


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError) as exc:
        log.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
