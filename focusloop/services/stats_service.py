import math
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from focusloop.constants import SESSIONS_PER_PRODUCTIVE_DAY
from focusloop.schemas.session import Session, SessionType
from focusloop.schemas.stats import (
    CategoryBreakdown,
    ProductivityMetric,
    TodayProgress,
    UserStats,
    WeekdayCount,
)
from focusloop.schemas.task import Task, TaskCategory
from focusloop.services.time_service import local_date, local_now, sessions_in_range


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def focus_only(sessions: Iterable[Session]) -> list[Session]:
    return [s for s in sessions if s.type == SessionType.FOCUS]


def daily_stats(
    sessions: Iterable[Session], days: int, now: datetime | None = None
) -> dict[str, int]:
    """Focus session count per local calendar day, oldest day first.

    Always has exactly ``days`` keys ending today; sessions outside the
    window are ignored.
    """
    today = local_date(now or local_now())
    counts = {
        (today - timedelta(days=offset)).isoformat(): 0
        for offset in range(days - 1, -1, -1)
    }
    for s in focus_only(sessions):
        key = local_date(s.completed_at).isoformat()
        if key in counts:
            counts[key] += 1
    return counts


def sessions_by_category(sessions: Iterable[Session]) -> dict[str, int]:
    return dict(Counter(s.category for s in focus_only(sessions)))


def sessions_by_hour(sessions: Iterable[Session]) -> dict[int, int]:
    hours = {hour: 0 for hour in range(24)}
    for s in focus_only(sessions):
        hours[s.completed_at.astimezone().hour] += 1
    return hours


def total_focus_time(sessions: Iterable[Session]) -> int:
    return sum(s.duration for s in focus_only(sessions))


def average_sessions_per_day(
    sessions: Iterable[Session], days: int, now: datetime | None = None
) -> float:
    if days <= 0:
        return 0.0
    return len(focus_only(sessions_in_range(sessions, days, now=now))) / days


def productivity_score(
    sessions: Iterable[Session], days: int = 7, now: datetime | None = None
) -> int:
    """0..100 score where SESSIONS_PER_PRODUCTIVE_DAY focus sessions a day is 100."""
    if days <= 0:
        return 0
    recent = focus_only(sessions_in_range(sessions, days, now=now))
    if not recent:
        return 0
    avg_per_day = len(recent) / days
    score = min(100.0, avg_per_day / SESSIONS_PER_PRODUCTIVE_DAY * 100)
    return round_half_up(score)


def today_progress(
    sessions: Iterable[Session], goal: int = 8, now: datetime | None = None
) -> TodayProgress:
    completed = len(focus_only(sessions_in_range(sessions, 1, now=now)))
    percentage = completed / goal * 100 if goal > 0 else 0.0
    return TodayProgress(completed=completed, goal=goal, percentage=percentage)


def weekly_comparison(
    sessions: Iterable[Session], now: datetime | None = None
) -> list[WeekdayCount]:
    now = now or local_now()
    today = local_date(now)
    counts = daily_stats(sessions, 7, now=now)
    result = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        result.append(
            WeekdayCount(day=day.strftime("%a"), date=day.isoformat(), sessions=counts[day.isoformat()])
        )
    return result


def productivity_metrics(
    sessions: Sequence[Session],
    stats: UserStats,
    tasks: Sequence[Task],
    days: int,
    now: datetime | None = None,
) -> list[ProductivityMetric]:
    """Five 0..100 scores describing the last ``days`` days.

    Focus: share of the 8-a-day target reached. Consistency: current streak
    relative to the longest. Completion: share of tasks done. Variety: share of
    categories worked in. Efficiency: average daily sessions on the same
    8-a-day scale.
    """
    focus = focus_only(sessions_in_range(sessions, days, now=now)) if days > 0 else []
    avg_per_day = len(focus) / days if days > 0 else 0.0
    categories = sessions_by_category(focus)

    consistency = (
        stats.current_streak / stats.longest_streak * 100 if stats.longest_streak else 0.0
    )
    completion = sum(1 for t in tasks if t.completed) / max(len(tasks), 1) * 100

    return [
        ProductivityMetric(
            subject="Focus",
            value=min(100.0, avg_per_day / SESSIONS_PER_PRODUCTIVE_DAY * 100),
        ),
        ProductivityMetric(subject="Consistency", value=consistency),
        ProductivityMetric(subject="Completion", value=completion),
        ProductivityMetric(
            subject="Variety", value=len(categories) / len(TaskCategory) * 100
        ),
        ProductivityMetric(
            subject="Efficiency",
            value=min(100.0, avg_per_day * 100 / SESSIONS_PER_PRODUCTIVE_DAY),
        ),
    ]


def category_breakdown(
    sessions: Iterable[Session], tasks: Sequence[Task]
) -> list[CategoryBreakdown]:
    """Per category with at least one focus session, joined with the task list."""
    result = []
    for category, count in sessions_by_category(sessions).items():
        category_tasks = [t for t in tasks if t.category == category]
        result.append(
            CategoryBreakdown(
                category=category,
                session_count=count,
                task_count=len(category_tasks),
                completed_task_count=sum(1 for t in category_tasks if t.completed),
                total_pomodoros=sum(t.pomodoros_completed for t in category_tasks),
            )
        )
    return result
