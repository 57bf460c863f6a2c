# src/wellness_forum/schemas/cycle.py
"""Cycle prediction request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

MIN_CYCLE_LENGTH = 15
MAX_CYCLE_LENGTH = 60


class CyclePredictionRequest(BaseModel):
    """Input for a cycle prediction."""

    last_period_start: date
    cycle_length: int = Field(28, ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH)
    as_of: date | None = Field(None, description="Roll the prediction forward to this day")


class CyclePrediction(BaseModel):
    """Predicted dates for the upcoming cycle."""

    cycle_start: date
    cycle_length: int
    next_period_start: date
    ovulation_date: date
    fertile_window_start: date
    fertile_window_end: date


class ReminderDraft(BaseModel):
    """Reminder derived from a prediction, before it is stored."""

    title: str
    message: str
    reminder_type: str
    reminder_date: date
    frequency: str = "monthly"
    is_active: bool = True
    user_id: str | None = None


class CyclePredictionResponse(BaseModel):
    """Prediction plus the reminders derived from it.

    ``prediction_id`` is set when the prediction was saved for a signed-in
    user; its reminders are then stored too.
    """

    prediction: CyclePrediction
    reminders: list[ReminderDraft]
    prediction_id: str | None = None


class ActualPeriodReport(BaseModel):
    """The day a predicted period actually began."""

    actual_period_start: date


class CyclePredictionOut(BaseModel):
    """A saved prediction."""

    id: str
    cycle_start_date: date
    cycle_length: int
    predicted_period_start: date
    predicted_ovulation: date
    predicted_fertile_window_start: date
    predicted_fertile_window_end: date
    actual_period_start: date | None = None
    is_predicted: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
