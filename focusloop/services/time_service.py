from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from focusloop.schemas.session import Session


def local_now() -> datetime:
    return datetime.now().astimezone()


def local_date(dt: datetime) -> date:
    """Calendar day of an instant in the local timezone (naive values are taken as local)."""
    return dt.astimezone().date()


def start_of_day(day: date) -> datetime:
    """Local midnight at the start of ``day``."""
    return datetime.combine(day, time.min).astimezone()


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def format_time(seconds: int) -> str:
    """Render a countdown as MM:SS. Minutes are not wrapped at 60."""
    if seconds < 0:
        raise ValueError("seconds must be non-negative")
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def sessions_in_range(
    sessions: Iterable[Session], days: int, now: datetime | None = None
) -> list[Session]:
    """Sessions completed in the last ``days`` calendar days, today included."""
    now = (now or local_now()).astimezone()
    start = start_of_day(local_date(now) - timedelta(days=days - 1))
    return [s for s in sessions if start <= s.completed_at.astimezone() <= now]
