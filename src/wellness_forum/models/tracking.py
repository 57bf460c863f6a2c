# src/wellness_forum/models/tracking.py
"""SQLAlchemy models for daily health logs and the per-user health profile."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from wellness_forum.db.session import Base
from wellness_forum.db.time import utcnow

from .post import new_record_id


class DailyLog(Base):
    """Everything a user recorded for one calendar day.

    There is at most one row per user and day; later entries for the same day
    are merged into it.
    """

    __tablename__ = "daily_log"
    __table_args__ = (
        UniqueConstraint("user_id", "log_date", name="uq_daily_log_user_date"),
        CheckConstraint(
            "stress_level IS NULL OR stress_level BETWEEN 1 AND 10",
            name="ck_daily_log_stress_range",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    log_date: Mapped[date] = mapped_column(Date, nullable=False)

    symptoms: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    mood: Mapped[str | None] = mapped_column(String(32))
    energy_level: Mapped[str | None] = mapped_column(String(32))
    stress_level: Mapped[int | None] = mapped_column(Integer)
    sleep_hours: Mapped[float | None] = mapped_column(Float)
    sleep_quality: Mapped[str | None] = mapped_column(String(32))
    exercise_minutes: Mapped[int | None] = mapped_column(Integer)
    exercise_type: Mapped[str | None] = mapped_column(String(64))
    flow_intensity: Mapped[str | None] = mapped_column(String(32))
    water_intake_ml: Mapped[int | None] = mapped_column(Integer)
    weight_kg: Mapped[float | None] = mapped_column(Float)
    medications: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    supplements: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    cravings: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    food_log: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class HealthProfile(Base):
    """Latest known health metrics and background for one user."""

    __tablename__ = "health_profile"
    __table_args__ = (
        CheckConstraint(
            "stress_level IS NULL OR stress_level BETWEEN 1 AND 10",
            name="ck_health_profile_stress_range",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    activity_level: Mapped[str | None] = mapped_column(String(32))
    sleep_hours: Mapped[int | None] = mapped_column(Integer)
    stress_level: Mapped[int | None] = mapped_column(Integer)
    mood: Mapped[str | None] = mapped_column(String(32))
    energy_level: Mapped[str | None] = mapped_column(String(32))
    height_cm: Mapped[float | None] = mapped_column(Float)
    weight_kg: Mapped[float | None] = mapped_column(Float)
    blood_type: Mapped[str | None] = mapped_column(String(8))
    allergies: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    medical_conditions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    medications: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    health_goals: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    dietary_preferences: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
