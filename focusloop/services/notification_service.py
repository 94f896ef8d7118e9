import logging
from typing import Protocol

from focusloop.constants import (
    ACHIEVEMENT_NOTIFICATION_TITLE,
    COMPLETION_SOUND,
    NOTIFICATION_TITLE,
    SESSION_COMPLETE_MESSAGES,
)
from focusloop.errors import report_side_effect_failure
from focusloop.schemas.session import SessionType
from focusloop.schemas.stats import Achievement

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def request_permission(self) -> bool: ...

    def is_granted(self) -> bool: ...

    def show(self, title: str, body: str) -> None: ...


class AudioPlayer(Protocol):
    def play(self, clip_id: str) -> None: ...


class NullNotifier:
    def request_permission(self) -> bool:
        return False

    def is_granted(self) -> bool:
        return False

    def show(self, title: str, body: str) -> None:
        pass


class LoggingNotifier:
    """Writes notifications to the log; useful for headless runs."""

    def request_permission(self) -> bool:
        return True

    def is_granted(self) -> bool:
        return True

    def show(self, title: str, body: str) -> None:
        logger.info("[notification] %s: %s", title, body)


class NullAudioPlayer:
    def play(self, clip_id: str) -> None:
        pass


def play_completion_sound(player: AudioPlayer) -> bool:
    try:
        player.play(COMPLETION_SOUND)
        return True
    except Exception as exc:
        report_side_effect_failure("Playing completion sound", exc)
        return False


def _show(notifier: Notifier, title: str, body: str) -> bool:
    try:
        if not notifier.is_granted():
            return False
        notifier.show(title, body)
        return True
    except Exception as exc:
        report_side_effect_failure(f"Showing notification {title!r}", exc)
        return False


def notify_session_complete(notifier: Notifier, session_type: SessionType) -> bool:
    return _show(notifier, NOTIFICATION_TITLE, SESSION_COMPLETE_MESSAGES[session_type.value])


def notify_achievement(notifier: Notifier, achievement: Achievement) -> bool:
    body = f"{achievement.icon} {achievement.title}: {achievement.description}"
    return _show(notifier, ACHIEVEMENT_NOTIFICATION_TITLE, body)


def request_permission(notifier: Notifier) -> bool:
    try:
        return notifier.request_permission()
    except Exception as exc:
        report_side_effect_failure("Requesting notification permission", exc)
        return False
