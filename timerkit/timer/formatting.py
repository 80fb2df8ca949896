"""Display helpers shared by every timer presentation."""

from __future__ import annotations

from .session import TimerStatus


def format_time(seconds: float) -> str:
    """``MM:SS`` with truncated seconds.  Minutes are not wrapped at 60."""
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def status_label(status: TimerStatus) -> str:
    """Short spoken label for a timer control."""
    if status == TimerStatus.COMPLETED:
        return "Completed"
    if status in (TimerStatus.IN_PROGRESS, TimerStatus.RESUMED):
        return "Timer running"
    return "Start timer"


def status_value(status: TimerStatus, elapsed: float) -> str:
    if status == TimerStatus.COMPLETED:
        return "Done"
    if status in (TimerStatus.IN_PROGRESS, TimerStatus.RESUMED):
        return format_time(elapsed)
    return ""
