"""Pomodoro session state machine.

The timer owns the runtime fields of an AppState (status, session type,
countdown, long-break counter) and the transition taken when a phase ends.
It never touches the session log or stats; completing a phase hands back the
new Session record and the store takes it from there.
"""

import logging
from datetime import datetime

from focusloop.constants import DEFAULT_CATEGORY
from focusloop.schemas.session import Session, SessionType
from focusloop.schemas.settings import AppSettings
from focusloop.schemas.snapshot import AppState
from focusloop.schemas.task import Task
from focusloop.schemas.timer import TimerStatus
from focusloop.services.time_service import local_now

logger = logging.getLogger(__name__)


def session_duration(settings: AppSettings, session_type: SessionType) -> int:
    if session_type == SessionType.FOCUS:
        return settings.focus_duration
    if session_type == SessionType.SHORT_BREAK:
        return settings.short_break_duration
    return settings.long_break_duration


class PomodoroTimer:
    def __init__(self, state: AppState):
        self.state = state

    @property
    def settings(self) -> AppSettings:
        return self.state.settings

    @property
    def is_running(self) -> bool:
        return self.state.timer_status == TimerStatus.RUNNING

    def start(self) -> bool:
        if self.is_running:
            return False
        self.state.timer_status = TimerStatus.RUNNING
        return True

    def pause(self) -> bool:
        if not self.is_running:
            return False
        self.state.timer_status = TimerStatus.PAUSED
        return True

    def reset(self) -> None:
        self.state.timer_status = TimerStatus.IDLE
        self.state.time_remaining = session_duration(
            self.settings, self.state.current_session_type
        )

    def tick(self, task: Task | None = None, now: datetime | None = None) -> Session | None:
        """Advance one second. Returns the completed Session when the phase runs out."""
        if not self.is_running:
            return None
        if self.state.time_remaining <= 1:
            return self.complete(task, now=now)
        self.state.time_remaining -= 1
        return None

    def skip(self, task: Task | None = None, now: datetime | None = None) -> Session:
        return self.complete(task, now=now)

    def complete(self, task: Task | None = None, now: datetime | None = None) -> Session:
        """End the current phase and move to the next one.

        The record always carries the configured duration for the finished
        type, whether the countdown ran out or the phase was skipped.
        """
        state = self.state
        completed_type = state.current_session_type

        session = Session(
            task_id=state.current_task_id,
            type=completed_type,
            duration=session_duration(self.settings, completed_type),
            completed_at=now or local_now(),
            category=task.category.value if task is not None else DEFAULT_CATEGORY,
        )

        next_type, counter = self._next_phase(completed_type)
        state.current_session_type = next_type
        state.sessions_until_long_break = counter
        state.time_remaining = session_duration(self.settings, next_type)
        state.timer_status = self._next_status(next_type)

        logger.info(
            "Completed %s session, next is %s (%s)",
            completed_type.value,
            next_type.value,
            state.timer_status.value,
        )
        return session

    def _next_phase(self, completed_type: SessionType) -> tuple[SessionType, int]:
        counter = self.state.sessions_until_long_break
        if completed_type != SessionType.FOCUS:
            return SessionType.FOCUS, counter

        counter -= 1
        if counter <= 0:
            return SessionType.LONG_BREAK, self.settings.long_break_interval
        return SessionType.SHORT_BREAK, counter

    def _next_status(self, next_type: SessionType) -> TimerStatus:
        if self.settings.auto_start_pomodoros:
            return TimerStatus.RUNNING
        if next_type.is_break and self.settings.auto_start_breaks:
            return TimerStatus.RUNNING
        return TimerStatus.IDLE
