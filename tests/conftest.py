from collections.abc import Callable, Generator
from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import Engine, StaticPool, create_engine

from focusloop.models import Base
from focusloop.schemas.session import Session, SessionType
from focusloop.services.storage_service import MemorySnapshotStore
from focusloop.store import AppStore


class FakeRedis:
    """In-memory Redis mock for testing."""

    def __init__(self):
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = str(value)

    def delete(self, key: str) -> int:
        return 1 if self._store.pop(key, None) is not None else 0


class RecordingNotifier:
    def __init__(self, granted: bool = True):
        self.granted = granted
        self.shown: list[tuple[str, str]] = []
        self.permission_requests = 0

    def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    def is_granted(self) -> bool:
        return self.granted

    def show(self, title: str, body: str) -> None:
        self.shown.append((title, body))


class RecordingAudio:
    def __init__(self):
        self.played: list[str] = []

    def play(self, clip_id: str) -> None:
        self.played.append(clip_id)


@pytest.fixture
def now() -> datetime:
    """Noon today, local time."""
    return datetime.combine(date.today(), time(12, 0)).astimezone()


@pytest.fixture
def make_session(now: datetime) -> Callable[..., Session]:
    def _make(
        days_ago: int = 0,
        hour: int = 10,
        type: SessionType = SessionType.FOCUS,
        duration: int = 1500,
        category: str = "work",
        task_id: str | None = None,
    ) -> Session:
        day = now.date() - timedelta(days=days_ago)
        return Session(
            task_id=task_id,
            type=type,
            duration=duration,
            completed_at=datetime.combine(day, time(hour, 0)).astimezone(),
            category=category,
        )

    return _make


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def storage() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def store(storage, notifier, audio, now) -> AppStore:
    return AppStore(storage=storage, notifier=notifier, audio=audio, clock=lambda: now)


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
