"""Headless timer runner: python -m timerkit.

Examples::

    python -m timerkit --duration 90 --interval 0.5
    python -m timerkit --list
    python -m timerkit --resume 2f6c0d9e-...

Ctrl-C pauses the running session (and saves it when persistence is on)
so it can be picked up later with ``--resume``.
"""

from __future__ import annotations

import argparse
import signal
import sys

from PyQt6.QtCore import QCoreApplication

from .logger import configure_logging
from .settings import LOG_DIR, load_settings
from .timer import (
    Completed,
    Paused,
    Tick,
    TimerController,
    TimerDirection,
    TimerSession,
    TimerStatus,
    format_time,
)


def _build_parser(defaults) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timerkit", description="Run a timer session.")
    parser.add_argument("--duration", type=float, default=defaults.default_duration,
                        help="Session length in seconds.")
    parser.add_argument("--interval", type=float, default=defaults.tick_interval,
                        help="Seconds between progress samples.")
    parser.add_argument("--count-up", action="store_true",
                        help="Report progress as elapsed fraction instead of remaining.")
    parser.add_argument("--resume", metavar="SESSION_ID",
                        help="Continue a previously saved session.")
    parser.add_argument("--list", action="store_true", help="List saved sessions and exit.")
    parser.add_argument("--no-save", action="store_true", help="Do not persist the session.")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    args = _build_parser(settings).parse_args(argv)
    configure_logging(settings.log_level, LOG_DIR, console=settings.log_to_console)

    persist = settings.persist_sessions and not args.no_save
    if persist or args.list or args.resume:
        from .database import configure_engine, init_db
        if settings.database_url:
            configure_engine(settings.database_url)
        init_db()

    if args.list:
        from .database import load_sessions
        for saved in load_sessions():
            print(f"{saved.id}  {saved.status.value:<12} "
                  f"{format_time(saved.elapsed_time)} / {format_time(saved.duration)}")
        return 0

    if args.resume:
        from .database import load_session
        session = load_session(args.resume)
        if session is None:
            print(f"No saved session {args.resume}", file=sys.stderr)
            return 1
    else:
        session = TimerSession(args.duration)

    if args.count_up or settings.direction == TimerDirection.COUNT_UP.value:
        direction = TimerDirection.COUNT_UP
    else:
        direction = TimerDirection.COUNTDOWN

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    controller = TimerController(
        session,
        tick_interval=args.interval,
        direction=direction,
        db_enabled=persist,
    )

    announced = False
    looping = False

    def finish() -> None:
        if looping:
            app.quit()

    def on_event(event) -> None:
        nonlocal announced
        if isinstance(event, Tick):
            print(f"\r{format_time(event.remaining)}  {event.progress:4.0%}",
                  end="", flush=True)
        elif isinstance(event, Paused):
            print(f"\nPaused {session.id} at {format_time(event.elapsed)}")
            finish()
        elif isinstance(event, Completed):
            announced = True
            print("\nDone.")
            finish()

    controller.event.connect(on_event)
    signal.signal(signal.SIGINT, lambda *_: controller.pause())

    if session.status == TimerStatus.NOT_STARTED:
        controller.start()
    elif session.is_paused:
        controller.resume()

    if not controller.driver.is_active:
        if session.is_completed and not announced:
            print("Done.")
        return 0
    looping = True
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
