# src/wellness_forum/models/reminder.py
"""SQLAlchemy models for reminders and stored cycle predictions."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wellness_forum.db.session import Base
from wellness_forum.db.time import utcnow

from .post import new_record_id


class Reminder(Base):
    """Scheduled nudge for a user: medication, period or ovulation."""

    __tablename__ = "reminder"
    __table_args__ = (Index("ix_reminder_user_date", "user_id", "reminder_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str | None] = mapped_column(Text)
    reminder_type: Mapped[str] = mapped_column(String(32), nullable=False)
    reminder_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    frequency: Mapped[str] = mapped_column(String(32), default="once", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class CyclePredictionRecord(Base):
    """A cycle prediction saved for a signed-in user."""

    __tablename__ = "cycle_prediction"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_record_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    cycle_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    cycle_length: Mapped[int] = mapped_column(Integer, nullable=False)
    predicted_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    predicted_ovulation: Mapped[date] = mapped_column(Date, nullable=False)
    predicted_fertile_window_start: Mapped[date] = mapped_column(Date, nullable=False)
    predicted_fertile_window_end: Mapped[date] = mapped_column(Date, nullable=False)
    # Filled in once the user reports when the period actually began.
    actual_period_start: Mapped[date | None] = mapped_column(Date)
    is_predicted: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
