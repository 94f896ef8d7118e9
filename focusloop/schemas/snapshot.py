from datetime import datetime

from pydantic import Field

from focusloop.schemas.base import CamelModel
from focusloop.schemas.session import Session, SessionType
from focusloop.schemas.settings import AppSettings
from focusloop.schemas.stats import UserStats
from focusloop.schemas.task import Task
from focusloop.schemas.timer import TimerStatus


class AppState(CamelModel):
    """Everything the store owns; persisted as one JSON blob."""

    tasks: list[Task] = Field(default_factory=list)
    sessions: list[Session] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    settings: AppSettings = Field(default_factory=AppSettings)
    timer_status: TimerStatus = TimerStatus.IDLE
    current_session_type: SessionType = SessionType.FOCUS
    time_remaining: int = Field(default=25 * 60, ge=0)
    sessions_until_long_break: int = Field(default=4, ge=1)
    current_task_id: str | None = None


class BackupExport(CamelModel):
    tasks: list[Task] = Field(default_factory=list)
    sessions: list[Session] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    exported_at: datetime | None = None
