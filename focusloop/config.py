from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Snapshot storage
    STORAGE_BACKEND: str = "sql"  # "memory", "sql" or "redis"
    DATABASE_URL: str = "sqlite:///focusloop.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    SNAPSHOT_KEY: str = "pomodoro-app-storage"

    # Timer driver
    TICK_INTERVAL_SECONDS: float = Field(default=1.0, gt=0)

    # Analytics
    DAILY_SESSION_GOAL: int = Field(default=8, ge=1)

    # Observability
    SENTRY_DSN: str = ""
    LOG_LEVEL: str = "INFO"

    ENVIRONMENT: str = "development"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
