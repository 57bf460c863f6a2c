"""Menstrual cycle prediction and the reminders derived from it."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from wellness_forum.models import CyclePredictionRecord
from wellness_forum.schemas.cycle import (
    MAX_CYCLE_LENGTH,
    MIN_CYCLE_LENGTH,
    CyclePrediction,
    ReminderDraft,
)
from wellness_forum.services.reminders import replace_cycle_reminders

logger = logging.getLogger(__name__)

# Days either side of ovulation counted as the fertile window.
FERTILE_WINDOW_MARGIN_DAYS = 2
PERIOD_REMINDER_LEAD_DAYS = 2
OVULATION_REMINDER_LEAD_DAYS = 1


def predict_cycle(
    last_period_start: date,
    cycle_length: int,
    as_of: date | None = None,
) -> CyclePrediction:
    """Predict the next period, ovulation day and fertile window.

    Ovulation is placed at the midpoint of the cycle. If ``as_of`` is given
    and the next period would already be in the past, the cycle start is
    moved forward by whole cycles until it is not.

    Args:
        last_period_start: First day of the most recent period.
        cycle_length: Typical cycle length in days.
        as_of: Optional reference day, usually today.

    Raises:
        ValueError: If ``cycle_length`` is outside the supported range.
    """
    if not MIN_CYCLE_LENGTH <= cycle_length <= MAX_CYCLE_LENGTH:
        raise ValueError(
            f"cycle_length must be between {MIN_CYCLE_LENGTH} and {MAX_CYCLE_LENGTH} days"
        )

    cycle = timedelta(days=cycle_length)
    start = last_period_start
    if as_of is not None and start + cycle < as_of:
        # Smallest number of whole cycles that puts the next period on/after as_of.
        cycles_ahead = -(-(as_of - start).days // cycle_length)
        start += timedelta(days=(cycles_ahead - 1) * cycle_length)

    ovulation = start + timedelta(days=cycle_length // 2)
    margin = timedelta(days=FERTILE_WINDOW_MARGIN_DAYS)
    return CyclePrediction(
        cycle_start=start,
        cycle_length=cycle_length,
        next_period_start=start + cycle,
        ovulation_date=ovulation,
        fertile_window_start=ovulation - margin,
        fertile_window_end=ovulation + margin,
    )


def period_reminders(prediction: CyclePrediction, user_id: str | None = None) -> list[ReminderDraft]:
    """Build the monthly period and ovulation reminders for a prediction."""
    return [
        ReminderDraft(
            title="Period Expected Soon",
            message="Your period is expected to start in 2 days. You might want to prepare!",
            reminder_type="period",
            reminder_date=prediction.next_period_start - timedelta(days=PERIOD_REMINDER_LEAD_DAYS),
            user_id=user_id,
        ),
        ReminderDraft(
            title="Ovulation Window",
            message="You're approaching your ovulation window. This is your most fertile time.",
            reminder_type="ovulation",
            reminder_date=prediction.ovulation_date - timedelta(days=OVULATION_REMINDER_LEAD_DAYS),
            user_id=user_id,
        ),
    ]


def save_prediction(
    db: Session,
    user_id: str,
    prediction: CyclePrediction,
    reminders: list[ReminderDraft],
) -> CyclePredictionRecord:
    """Store a prediction and make ``reminders`` the user's current cycle reminders."""
    record = CyclePredictionRecord(
        user_id=user_id,
        cycle_start_date=prediction.cycle_start,
        cycle_length=prediction.cycle_length,
        predicted_period_start=prediction.next_period_start,
        predicted_ovulation=prediction.ovulation_date,
        predicted_fertile_window_start=prediction.fertile_window_start,
        predicted_fertile_window_end=prediction.fertile_window_end,
        is_predicted=True,
    )
    db.add(record)
    replace_cycle_reminders(db, user_id, reminders)
    db.commit()
    db.refresh(record)
    logger.info("Saved cycle prediction %s", record.id)
    return record


def list_predictions(db: Session, user_id: str) -> Sequence[CyclePredictionRecord]:
    """Return the user's saved predictions, latest cycle first."""
    stmt = (
        select(CyclePredictionRecord)
        .where(CyclePredictionRecord.user_id == user_id)
        .order_by(
            CyclePredictionRecord.cycle_start_date.desc(),
            CyclePredictionRecord.created_at.desc(),
        )
    )
    return db.scalars(stmt).all()


def record_actual_period(
    db: Session, record: CyclePredictionRecord, actual_start: date
) -> CyclePredictionRecord:
    record.actual_period_start = actual_start
    record.is_predicted = False
    db.commit()
    db.refresh(record)
    return record
