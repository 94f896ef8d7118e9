import math
import random
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from focusloop.constants import MOTIVATIONAL_QUOTES, XP_PER_SESSION
from focusloop.schemas.session import Session, SessionType
from focusloop.schemas.stats import (
    Achievement,
    AchievementProgress,
    AchievementType,
    StreakResult,
    UserStats,
    XPProgress,
)
from focusloop.services.time_service import days_between, local_date, local_now


def _focus_days(sessions: Iterable[Session]) -> set[date]:
    return {local_date(s.completed_at) for s in sessions if s.type == SessionType.FOCUS}


def calculate_streak(
    sessions: Iterable[Session], now: datetime | None = None
) -> StreakResult:
    """Current and longest runs of consecutive calendar days with a focus session.

    The current streak is counted backwards from today, so it is 0 once the
    last focus day is older than yesterday and also when today has no focus
    session yet.
    """
    days = _focus_days(sessions)
    if not days:
        return StreakResult(current=0, longest=0)

    today = local_date(now or local_now())
    longest = _longest_run(days)

    if days_between(max(days), today) > 1:
        return StreakResult(current=0, longest=longest)

    current = 0
    check = today
    while check in days:
        current += 1
        check -= timedelta(days=1)

    return StreakResult(current=current, longest=max(longest, current))


def _longest_run(days: set[date]) -> int:
    ordered = sorted(days)
    longest = run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if days_between(prev, curr) == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def calculate_level(xp: int) -> int:
    return math.isqrt(max(xp, 0) // 100) + 1


def xp_for_next_level(level: int) -> int:
    return level * level * 100


def get_xp_progress(xp: int) -> XPProgress:
    level = calculate_level(xp)
    current_level_xp = xp_for_next_level(level - 1)
    needed = xp_for_next_level(level) - current_level_xp
    current = xp - current_level_xp
    return XPProgress(current=current, needed=needed, percentage=current / needed * 100)


def _meets_threshold(achievement: Achievement, stats: UserStats) -> bool:
    if achievement.type == AchievementType.SESSIONS:
        return stats.total_pomodoros >= achievement.threshold
    if achievement.type == AchievementType.STREAK:
        return stats.current_streak >= achievement.threshold
    return False


def check_new_achievements(
    stats: UserStats,
    catalog: Sequence[Achievement],
    now: datetime | None = None,
) -> list[Achievement]:
    """Catalog entries the stats now qualify for, excluding ones already unlocked."""
    unlocked_ids = {a.id for a in stats.achievements}
    unlocked_at = now or local_now()
    return [
        achievement.model_copy(update={"unlocked_at": unlocked_at})
        for achievement in catalog
        if achievement.id not in unlocked_ids and _meets_threshold(achievement, stats)
    ]


def achievement_progress(
    stats: UserStats, catalog: Sequence[Achievement]
) -> list[AchievementProgress]:
    unlocked = {a.id: a for a in stats.achievements}
    result = []
    for achievement in catalog:
        value = (
            stats.total_pomodoros
            if achievement.type == AchievementType.SESSIONS
            else stats.current_streak
        )
        earned = unlocked.get(achievement.id)
        result.append(
            AchievementProgress(
                achievement=achievement,
                unlocked=earned is not None,
                unlocked_at=earned.unlocked_at if earned else None,
                progress=min(100.0, value / achievement.threshold * 100),
            )
        )
    return result


def recompute_stats(
    stats: UserStats,
    sessions: Sequence[Session],
    catalog: Sequence[Achievement],
    now: datetime | None = None,
) -> tuple[UserStats, list[Achievement]]:
    """Derive stats after one more completed session.

    Totals and streaks come from the full log. XP grows by a flat amount for
    the session just completed, whatever its type.
    """
    focus = [s for s in sessions if s.type == SessionType.FOCUS]
    streak = calculate_streak(sessions, now=now)
    xp = stats.xp + XP_PER_SESSION

    updated = stats.model_copy(
        update={
            "total_pomodoros": len(focus),
            "total_focus_time": sum(s.duration for s in focus),
            "current_streak": streak.current,
            "longest_streak": streak.longest,
            "xp": xp,
            "level": calculate_level(xp),
        }
    )
    new_achievements = check_new_achievements(updated, catalog, now=now)
    updated = updated.model_copy(
        update={"achievements": [*stats.achievements, *new_achievements]}
    )
    return updated, new_achievements


def random_motivational_quote() -> str:
    return random.choice(MOTIVATIONAL_QUOTES)
