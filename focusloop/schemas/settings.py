from enum import Enum

from pydantic import Field, field_validator

from focusloop.constants import AMBIENT_SOUND_IDS
from focusloop.schemas.base import CamelModel


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


def _check_ambient_sound(value: str | None) -> str | None:
    if value is not None and value not in AMBIENT_SOUND_IDS:
        raise ValueError(f"Unknown ambient sound: {value}")
    return value


class AppSettings(CamelModel):
    focus_duration: int = Field(default=25 * 60, ge=1)
    short_break_duration: int = Field(default=5 * 60, ge=1)
    long_break_duration: int = Field(default=15 * 60, ge=1)
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False
    long_break_interval: int = Field(default=4, ge=1)
    theme: Theme = Theme.LIGHT
    sound_enabled: bool = True
    notifications_enabled: bool = True
    ambient_sound: str | None = None
    volume: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("ambient_sound")
    @classmethod
    def check_ambient_sound(cls, value):
        return _check_ambient_sound(value)


class AppSettingsUpdate(CamelModel):
    focus_duration: int | None = Field(default=None, ge=1)
    short_break_duration: int | None = Field(default=None, ge=1)
    long_break_duration: int | None = Field(default=None, ge=1)
    auto_start_breaks: bool | None = None
    auto_start_pomodoros: bool | None = None
    long_break_interval: int | None = Field(default=None, ge=1)
    theme: Theme | None = None
    sound_enabled: bool | None = None
    notifications_enabled: bool | None = None
    ambient_sound: str | None = None
    volume: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("ambient_sound")
    @classmethod
    def check_ambient_sound(cls, value):
        return _check_ambient_sound(value)
