from datetime import datetime
from enum import Enum

from pydantic import Field

from focusloop.schemas.base import CamelModel
from focusloop.schemas.task import new_id


class SessionType(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not SessionType.FOCUS


class Session(CamelModel):
    id: str = Field(default_factory=new_id)
    task_id: str | None = None
    type: SessionType
    duration: int = Field(ge=0)  # seconds
    completed_at: datetime
    category: str

    model_config = {"frozen": True}
