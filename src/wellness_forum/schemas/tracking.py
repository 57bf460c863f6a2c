# src/wellness_forum/schemas/tracking.py
"""Schemas for daily health logs and the health profile."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wellness_forum.db.time import as_utc

from .post import parse_tags

ActivityLevel = Literal[
    "sedentary",
    "lightly-active",
    "moderately-active",
    "very-active",
    "extremely-active",
]

DAILY_LOG_LIST_FIELDS = ("symptoms", "medications", "supplements", "cravings")
PROFILE_LIST_FIELDS = (
    "allergies",
    "medical_conditions",
    "medications",
    "health_goals",
    "dietary_preferences",
)


def clean_items(raw: list[str] | None) -> list[str] | None:
    """Trim entries, drop blanks and repeated entries, keep first-seen order."""
    if raw is None:
        return None
    return list(dict.fromkeys(parse_tags(raw)))


class DailyLogUpsert(BaseModel):
    """Fields recorded for one day; unset fields keep their stored value."""

    symptoms: list[str] | None = None
    mood: str | None = Field(None, max_length=32)
    energy_level: str | None = Field(None, max_length=32)
    stress_level: int | None = Field(None, ge=1, le=10)
    sleep_hours: float | None = Field(None, ge=0, le=24)
    sleep_quality: str | None = Field(None, max_length=32)
    exercise_minutes: int | None = Field(None, ge=0, le=24 * 60)
    exercise_type: str | None = Field(None, max_length=64)
    flow_intensity: str | None = Field(None, max_length=32)
    water_intake_ml: int | None = Field(None, ge=0)
    weight_kg: float | None = Field(None, gt=0, lt=500)
    medications: list[str] | None = None
    supplements: list[str] | None = None
    cravings: list[str] | None = None
    food_log: str | None = Field(None, max_length=5_000)
    notes: str | None = Field(None, max_length=5_000)

    @field_validator(*DAILY_LOG_LIST_FIELDS)
    @classmethod
    def _clean_lists(cls, value: list[str] | None) -> list[str] | None:
        return clean_items(value)

    def changes(self) -> dict[str, Any]:
        values = self.model_dump(exclude_unset=True)
        for name in DAILY_LOG_LIST_FIELDS:
            if name in values and values[name] is None:
                values[name] = []
        return values


class DailyLogOut(BaseModel):
    """Stored daily log."""

    id: str
    user_id: str
    log_date: date
    symptoms: list[str] = Field(default_factory=list)
    mood: str | None = None
    energy_level: str | None = None
    stress_level: int | None = None
    sleep_hours: float | None = None
    sleep_quality: str | None = None
    exercise_minutes: int | None = None
    exercise_type: str | None = None
    flow_intensity: str | None = None
    water_intake_ml: int | None = None
    weight_kg: float | None = None
    medications: list[str] = Field(default_factory=list)
    supplements: list[str] = Field(default_factory=list)
    cravings: list[str] = Field(default_factory=list)
    food_log: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class HealthProfileUpdate(BaseModel):
    """Partial update of the health profile, as sent by the dashboard modals."""

    activity_level: ActivityLevel | None = None
    sleep_hours: float | None = Field(None, ge=1, le=24, description="Rounded to whole hours")
    stress_level: int | None = Field(None, ge=1, le=10)
    mood: str | None = Field(None, max_length=32)
    energy_level: str | None = Field(None, max_length=32)
    height_cm: float | None = Field(None, gt=0, lt=300)
    weight_kg: float | None = Field(None, gt=0, lt=500)
    blood_type: str | None = Field(None, max_length=8)
    allergies: list[str] | None = None
    medical_conditions: list[str] | None = None
    medications: list[str] | None = None
    health_goals: list[str] | None = None
    dietary_preferences: list[str] | None = None

    @field_validator(*PROFILE_LIST_FIELDS)
    @classmethod
    def _clean_lists(cls, value: list[str] | None) -> list[str] | None:
        return clean_items(value)

    def changes(self) -> dict[str, Any]:
        values = self.model_dump(exclude_unset=True)
        if values.get("sleep_hours") is not None:
            values["sleep_hours"] = round(values["sleep_hours"])
        for name in PROFILE_LIST_FIELDS:
            if name in values and values[name] is None:
                values[name] = []
        return values


class HealthProfileOut(BaseModel):
    """Stored health profile."""

    user_id: str
    activity_level: str | None = None
    sleep_hours: int | None = None
    stress_level: int | None = None
    mood: str | None = None
    energy_level: str | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    blood_type: str | None = None
    allergies: list[str] = Field(default_factory=list)
    medical_conditions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    health_goals: list[str] = Field(default_factory=list)
    dietary_preferences: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
