import logging
from typing import Protocol

import redis
from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, sessionmaker

from focusloop.config import Settings
from focusloop.database import create_db_engine, make_session_factory
from focusloop.models.snapshot import StoredSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Durable key-value slot holding serialized store snapshots."""

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, payload: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemorySnapshotStore:
    def __init__(self):
        self._data: dict[str, str] = {}

    def load(self, key: str) -> str | None:
        return self._data.get(key)

    def save(self, key: str, payload: str) -> None:
        self._data[key] = payload

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SqlSnapshotStore:
    """One row per slot in the ``snapshots`` table, replaced on every save."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory: sessionmaker[Session] = make_session_factory(engine)

    def load(self, key: str) -> str | None:
        with self.session_factory() as db:
            row = db.execute(
                select(StoredSnapshot).where(StoredSnapshot.key == key)
            ).scalar_one_or_none()
            return row.payload if row is not None else None

    def save(self, key: str, payload: str) -> None:
        with self.session_factory.begin() as db:
            row = db.get(StoredSnapshot, key)
            if row is None:
                db.add(StoredSnapshot(key=key, payload=payload))
            else:
                row.payload = payload

    def delete(self, key: str) -> None:
        with self.session_factory.begin() as db:
            row = db.get(StoredSnapshot, key)
            if row is not None:
                db.delete(row)


class RedisSnapshotStore:
    def __init__(self, client: redis.Redis):
        self.client = client

    def load(self, key: str) -> str | None:
        value = self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def save(self, key: str, payload: str) -> None:
        self.client.set(key, payload)

    def delete(self, key: str) -> None:
        self.client.delete(key)


def build_snapshot_store(settings: Settings) -> SnapshotStore:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        store: SnapshotStore = MemorySnapshotStore()
    elif backend == "redis":
        store = RedisSnapshotStore(
            redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        )
    elif backend == "sql":
        store = SqlSnapshotStore(create_db_engine(settings.DATABASE_URL))
    else:
        raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
    logger.info("Using %s snapshot storage", backend)
    return store
