import uuid
from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator

from focusloop.schemas.base import CamelModel


class TaskCategory(str, Enum):
    WORK = "work"
    STUDY = "study"
    PERSONAL = "personal"
    FITNESS = "fitness"
    CREATIVE = "creative"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def new_id() -> str:
    return str(uuid.uuid4())


def _strip_title(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class SubTask(CamelModel):
    id: str = Field(default_factory=new_id)
    title: str = Field(min_length=1, max_length=500)
    completed: bool = False


class Task(CamelModel):
    id: str = Field(default_factory=new_id)
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    category: TaskCategory = TaskCategory.PERSONAL
    priority: Priority = Priority.MEDIUM
    deadline: datetime | None = None
    completed: bool = False
    pomodoros_completed: int = Field(default=0, ge=0)
    pomodoros_estimated: int = Field(default=1, ge=1)
    created_at: datetime
    subtasks: list[SubTask] = Field(default_factory=list)


class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    category: TaskCategory = TaskCategory.PERSONAL
    priority: Priority = Priority.MEDIUM
    deadline: datetime | None = None
    completed: bool = False
    pomodoros_completed: int = Field(default=0, ge=0)
    pomodoros_estimated: int = Field(default=1, ge=1, le=99)
    subtasks: list[SubTask] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return _strip_title(value)


class TaskUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    category: TaskCategory | None = None
    priority: Priority | None = None
    deadline: datetime | None = None
    completed: bool | None = None
    pomodoros_completed: int | None = Field(default=None, ge=0)
    pomodoros_estimated: int | None = Field(default=None, ge=1, le=99)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return _strip_title(value)


class TaskFilter(CamelModel):
    category: TaskCategory | None = None
    priority: Priority | None = None
    show_completed: bool = False
