from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ..config import DEFAULT_REMINDER_MESSAGE

WEEK_SECONDS = 7 * 24 * 60 * 60


class ReminderPreferences(BaseModel):
    enabled: bool = True
    days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    hour: int = Field(default=17, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    message: str = DEFAULT_REMINDER_MESSAGE

    @field_validator("days")
    @classmethod
    def _normalize_days(cls, value: list[int]) -> list[int]:
        for day in value:
            if not 0 <= int(day) <= 6:
                raise ValueError(f"day of week must be 0 (Sunday) to 6 (Saturday), got {day}")
        return sorted({int(day) for day in value})


class ScheduledReminder(BaseModel):
    reminder_id: str
    day_of_week: int
    fire_at: datetime
    repeat_interval_sec: int = WEEK_SECONDS
    title: str
    body: str
    last_sent_at: datetime | None = None


class ReminderState(BaseModel):
    preferences: ReminderPreferences = Field(default_factory=ReminderPreferences)
    scheduled: list[ScheduledReminder] = Field(default_factory=list)
    updated_at: datetime | None = None
