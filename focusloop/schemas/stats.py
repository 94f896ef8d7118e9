from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from focusloop.schemas.base import CamelModel


class AchievementType(str, Enum):
    SESSIONS = "sessions"
    STREAK = "streak"


class Achievement(CamelModel):
    id: str
    title: str
    description: str
    icon: str
    threshold: int = Field(ge=1)
    type: AchievementType
    unlocked_at: datetime | None = None


class UserStats(CamelModel):
    total_pomodoros: int = 0
    total_focus_time: int = 0  # seconds
    current_streak: int = 0
    longest_streak: int = 0
    level: int = 1
    xp: int = 0
    achievements: list[Achievement] = Field(default_factory=list)


class StreakResult(BaseModel):
    current: int
    longest: int


class XPProgress(BaseModel):
    current: int
    needed: int
    percentage: float


class AchievementProgress(BaseModel):
    achievement: Achievement
    unlocked: bool
    unlocked_at: datetime | None
    progress: float  # 0..100


class TodayProgress(BaseModel):
    completed: int
    goal: int
    percentage: float


class WeekdayCount(BaseModel):
    day: str  # "Mon", "Tue", ...
    date: str
    sessions: int


class ProductivityMetric(BaseModel):
    subject: str
    value: float


class CategoryBreakdown(BaseModel):
    category: str
    session_count: int
    task_count: int
    completed_task_count: int
    total_pomodoros: int
