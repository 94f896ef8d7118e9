"""Application state store.

AppStore is the single owner of tasks, sessions, stats, settings and timer
runtime. Every operation runs to completion, then the whole state is written
to the snapshot slot. Callers read state through the properties and change it
only through the operations below; calls naming unknown ids are no-ops.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from focusloop.config import settings as app_settings
from focusloop.constants import ACHIEVEMENTS
from focusloop.errors import report_side_effect_failure
from focusloop.schemas.session import Session, SessionType
from focusloop.schemas.settings import AppSettings, AppSettingsUpdate
from focusloop.schemas.snapshot import AppState, BackupExport
from focusloop.schemas.stats import Achievement, TodayProgress, UserStats
from focusloop.schemas.task import SubTask, Task, TaskCreate, TaskFilter, TaskUpdate
from focusloop.schemas.timer import TimerStatus
from focusloop.services import export_service, stats_service, task_service
from focusloop.services.gamification_service import recompute_stats
from focusloop.services.notification_service import (
    AudioPlayer,
    Notifier,
    NullAudioPlayer,
    NullNotifier,
    notify_achievement,
    notify_session_complete,
    play_completion_sound,
    request_permission,
)
from focusloop.services.storage_service import MemorySnapshotStore, SnapshotStore
from focusloop.services.time_service import local_now
from focusloop.services.timer_service import PomodoroTimer

logger = logging.getLogger(__name__)


M = TypeVar("M", bound=BaseModel)


def _detached(model: M | None) -> M | None:
    """Deep copy handed to callers so edits never reach the owned state."""
    return model.model_copy(deep=True) if model is not None else None


def initial_state(settings: AppSettings | None = None) -> AppState:
    settings = settings or AppSettings()
    return AppState(
        settings=settings,
        time_remaining=settings.focus_duration,
        sessions_until_long_break=settings.long_break_interval,
    )


class AppStore:
    def __init__(
        self,
        storage: SnapshotStore | None = None,
        notifier: Notifier | None = None,
        audio: AudioPlayer | None = None,
        catalog: Sequence[Achievement] = ACHIEVEMENTS,
        key: str = app_settings.SNAPSHOT_KEY,
        clock: Callable[[], datetime] = local_now,
        daily_goal: int = app_settings.DAILY_SESSION_GOAL,
    ):
        self.storage = storage if storage is not None else MemorySnapshotStore()
        self.notifier = notifier if notifier is not None else NullNotifier()
        self.audio = audio if audio is not None else NullAudioPlayer()
        self.catalog = list(catalog)
        self.key = key
        self.clock = clock
        self.daily_goal = daily_goal
        self._state = self._rehydrate()
        self.timer = PomodoroTimer(self._state)

    # --- read access ---

    @property
    def state(self) -> AppState:
        return self._state.model_copy(deep=True)

    @property
    def tasks(self) -> list[Task]:
        return [_detached(t) for t in self._state.tasks]

    @property
    def sessions(self) -> list[Session]:
        return list(self._state.sessions)

    @property
    def stats(self) -> UserStats:
        return _detached(self._state.stats)

    @property
    def settings(self) -> AppSettings:
        return _detached(self._state.settings)

    @property
    def timer_status(self) -> TimerStatus:
        return self._state.timer_status

    @property
    def current_session_type(self) -> SessionType:
        return self._state.current_session_type

    @property
    def time_remaining(self) -> int:
        return self._state.time_remaining

    @property
    def sessions_until_long_break(self) -> int:
        return self._state.sessions_until_long_break

    @property
    def current_task_id(self) -> str | None:
        return self._state.current_task_id

    @property
    def current_task(self) -> Task | None:
        task = task_service.find_task(self._state.tasks, self._state.current_task_id)
        return _detached(task)

    def get_task(self, task_id: str) -> Task | None:
        return _detached(task_service.find_task(self._state.tasks, task_id))

    def today_progress(self) -> TodayProgress:
        return stats_service.today_progress(
            self._state.sessions, goal=self.daily_goal, now=self.clock()
        )

    def filtered_tasks(self, criteria: TaskFilter | dict | None = None) -> list[Task]:
        if isinstance(criteria, dict):
            criteria = TaskFilter.model_validate(criteria)
        matched = task_service.filter_tasks(self._state.tasks, criteria)
        return [_detached(t) for t in matched]

    # --- timer ---

    def start_timer(self) -> bool:
        changed = self.timer.start()
        if changed:
            self._persist()
        return changed

    def pause_timer(self) -> bool:
        changed = self.timer.pause()
        if changed:
            self._persist()
        return changed

    def reset_timer(self) -> None:
        self.timer.reset()
        self._persist()

    def tick(self) -> Session | None:
        if not self.timer.is_running:
            return None
        session = self.timer.tick(self.current_task, now=self.clock())
        if session is None:
            self._persist()
            return None
        self._finish_session(session)
        return session

    def skip_session(self) -> Session:
        return self.complete_session()

    def complete_session(self) -> Session:
        session = self.timer.complete(self.current_task, now=self.clock())
        self._finish_session(session)
        return session

    def set_current_task(self, task_id: str | None) -> bool:
        if task_id is not None and self.get_task(task_id) is None:
            return False
        self._state.current_task_id = task_id
        self._persist()
        return True

    def _finish_session(self, session: Session) -> None:
        self._state.sessions.append(session)
        if session.type == SessionType.FOCUS and session.task_id is not None:
            task_service.increment_pomodoros(self._state.tasks, session.task_id)
        new_achievements = self._recompute_stats()
        self._persist()

        settings = self._state.settings
        if settings.sound_enabled:
            play_completion_sound(self.audio)
        if settings.notifications_enabled:
            notify_session_complete(self.notifier, session.type)
        self._announce(new_achievements)

    # --- stats ---

    def update_stats(self) -> list[Achievement]:
        """Recompute stats and award the per-session XP once more."""
        new_achievements = self._recompute_stats()
        self._persist()
        self._announce(new_achievements)
        return new_achievements

    def _recompute_stats(self) -> list[Achievement]:
        stats, new_achievements = recompute_stats(
            self._state.stats, self._state.sessions, self.catalog, now=self.clock()
        )
        self._state.stats = stats
        for achievement in new_achievements:
            logger.info("Achievement unlocked: %s", achievement.id)
        return new_achievements

    def _announce(self, achievements: Sequence[Achievement]) -> None:
        for achievement in achievements:
            notify_achievement(self.notifier, achievement)

    def request_notification_permission(self) -> bool:
        return request_permission(self.notifier)

    # --- tasks ---

    def add_task(self, data: TaskCreate | dict) -> Task:
        if isinstance(data, dict):
            data = TaskCreate.model_validate(data)
        task = task_service.create_task(data, now=self.clock())
        self._state.tasks.append(task)
        self._persist()
        return _detached(task)

    def update_task(self, task_id: str, data: TaskUpdate | dict) -> Task | None:
        if isinstance(data, dict):
            data = TaskUpdate.model_validate(data)
        task = task_service.update_task(self._state.tasks, task_id, data)
        if task is not None:
            self._persist()
        return _detached(task)

    def delete_task(self, task_id: str) -> bool:
        if not task_service.delete_task(self._state.tasks, task_id):
            return False
        if self._state.current_task_id == task_id:
            self._state.current_task_id = None
        self._persist()
        return True

    def toggle_task_complete(self, task_id: str) -> Task | None:
        task = task_service.toggle_complete(self._state.tasks, task_id)
        if task is not None:
            self._persist()
        return _detached(task)

    def add_subtask(self, task_id: str, title: str) -> SubTask | None:
        subtask = task_service.add_subtask(self._state.tasks, task_id, title)
        if subtask is not None:
            self._persist()
        return _detached(subtask)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> SubTask | None:
        subtask = task_service.toggle_subtask(self._state.tasks, task_id, subtask_id)
        if subtask is not None:
            self._persist()
        return _detached(subtask)

    def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        removed = task_service.delete_subtask(self._state.tasks, task_id, subtask_id)
        if removed:
            self._persist()
        return removed

    # --- settings ---

    def update_settings(self, data: AppSettingsUpdate | dict) -> AppSettings:
        if isinstance(data, dict):
            data = AppSettingsUpdate.model_validate(data)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "ambient_sound"
        }
        self._state.settings = self._state.settings.model_copy(update=changes)
        self._state.sessions_until_long_break = min(
            self._state.sessions_until_long_break,
            self._state.settings.long_break_interval,
        )
        self._persist()
        return self.settings

    # --- data management ---

    def clear_all_data(self) -> None:
        """Drop tasks, sessions, stats and timer runtime; settings are kept."""
        fresh = initial_state(self._state.settings)
        for field in (
            "tasks",
            "sessions",
            "stats",
            "timer_status",
            "current_session_type",
            "time_remaining",
            "sessions_until_long_break",
            "current_task_id",
        ):
            setattr(self._state, field, getattr(fresh, field))
        logger.info("Cleared all data")
        self._persist()

    def export_data(self) -> BackupExport:
        state = self.state
        return export_service.build_backup(
            state.tasks, state.sessions, state.stats, now=self.clock()
        )

    def export_json(self) -> str:
        return export_service.export_to_json(self.export_data())

    def export_csv(self) -> str:
        return export_service.export_to_csv(self._state.sessions)

    def import_data(self, payload: dict | str | bytes) -> BackupExport:
        """Replace tasks, sessions and stats with a backup's contents.

        Validation happens before anything is replaced, so a rejected backup
        leaves the store untouched.
        """
        backup = export_service.parse_backup(payload)
        imported = backup.model_copy(deep=True)
        self._state.tasks = imported.tasks
        self._state.sessions = imported.sessions
        self._state.stats = imported.stats
        if self.current_task is None:
            self._state.current_task_id = None
        logger.info(
            "Imported %d tasks and %d sessions",
            len(backup.tasks),
            len(backup.sessions),
        )
        self._persist()
        return backup

    # --- persistence ---

    def snapshot(self) -> str:
        return self._state.model_dump_json(by_alias=True)

    def _persist(self) -> None:
        try:
            self.storage.save(self.key, self.snapshot())
        except Exception as exc:
            report_side_effect_failure("Saving snapshot", exc)

    def _rehydrate(self) -> AppState:
        try:
            payload = self.storage.load(self.key)
        except Exception as exc:
            report_side_effect_failure("Loading snapshot", exc)
            return initial_state()
        if payload is None:
            return initial_state()
        try:
            return AppState.model_validate_json(payload)
        except ValidationError as exc:
            logger.warning("Discarding unreadable snapshot %r: %s", self.key, exc)
            return initial_state()
