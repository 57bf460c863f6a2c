# src/wellness_forum/schemas/reminder.py
"""Reminder request/response schemas."""

from __future__ import annotations

from datetime import datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wellness_forum.db.time import as_utc

ReminderType = Literal["medication", "period", "ovulation"]
MedicationFrequency = Literal["daily", "weekly", "monthly", "as-needed"]


class MedicationReminderCreate(BaseModel):
    """Medication reminder as entered by the user."""

    title: str = Field(..., min_length=1, max_length=200, description="Medication name")
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: MedicationFrequency = "daily"
    time_of_day: time = Field(..., description="HH:MM in UTC")
    notes: str | None = Field(None, max_length=500)


class ReminderUpdate(BaseModel):
    """Switch a reminder on or off."""

    is_active: bool


class ReminderOut(BaseModel):
    """Stored reminder."""

    id: str
    user_id: str
    title: str
    message: str | None = None
    reminder_type: str
    reminder_date: datetime
    frequency: str
    is_active: bool
    is_sent: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("reminder_date", "created_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)
