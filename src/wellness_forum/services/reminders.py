"""Reminder scheduling and persistence."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, time, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from wellness_forum.db.time import as_utc, utcnow
from wellness_forum.models import Reminder
from wellness_forum.schemas.cycle import ReminderDraft
from wellness_forum.schemas.reminder import MedicationReminderCreate

logger = logging.getLogger(__name__)

MEDICATION = "medication"
CYCLE_REMINDER_TYPES = ("period", "ovulation")


def next_occurrence(time_of_day: time, now: datetime) -> datetime:
    """Return today at ``time_of_day`` (UTC), or tomorrow if that has passed."""
    now = as_utc(now)
    candidate = datetime.combine(now.date(), time_of_day.replace(tzinfo=None), tzinfo=UTC)
    if candidate < now:
        candidate += timedelta(days=1)
    return candidate


def medication_message(dosage: str, notes: str | None = None) -> str:
    message = f"Take {dosage.strip()}"
    if notes and notes.strip():
        message += f" - {notes.strip()}"
    return message


def list_reminders(
    db: Session, user_id: str, reminder_type: str | None = None
) -> Sequence[Reminder]:
    """Return the user's reminders, soonest first."""
    stmt = select(Reminder).where(Reminder.user_id == user_id)
    if reminder_type is not None:
        stmt = stmt.where(Reminder.reminder_type == reminder_type)
    return db.scalars(stmt.order_by(Reminder.reminder_date.asc(), Reminder.id.asc())).all()


def get_reminder(db: Session, reminder_id: str) -> Reminder | None:
    return db.get(Reminder, reminder_id)


def create_medication_reminder(
    db: Session,
    user_id: str,
    form: MedicationReminderCreate,
    now: datetime | None = None,
) -> Reminder:
    """Schedule a medication reminder at the next occurrence of its time of day."""
    reminder = Reminder(
        user_id=user_id,
        title=form.title.strip(),
        message=medication_message(form.dosage, form.notes),
        reminder_type=MEDICATION,
        reminder_date=next_occurrence(form.time_of_day, now or utcnow()),
        frequency=form.frequency,
        is_active=True,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    logger.info("Created medication reminder %s", reminder.id)
    return reminder


def set_reminder_active(db: Session, reminder: Reminder, is_active: bool) -> Reminder:
    reminder.is_active = is_active
    db.commit()
    db.refresh(reminder)
    return reminder


def delete_reminder(db: Session, reminder: Reminder) -> None:
    db.delete(reminder)
    db.commit()


def replace_cycle_reminders(
    db: Session, user_id: str, drafts: Iterable[ReminderDraft]
) -> list[Reminder]:
    """Stage ``drafts`` in place of the user's unsent period and ovulation reminders.

    Reminders fire at midnight UTC on their day. The caller commits.
    """
    db.execute(
        delete(Reminder).where(
            Reminder.user_id == user_id,
            Reminder.reminder_type.in_(CYCLE_REMINDER_TYPES),
            Reminder.is_sent.is_(False),
        )
    )
    rows = [
        Reminder(
            user_id=user_id,
            title=draft.title,
            message=draft.message,
            reminder_type=draft.reminder_type,
            reminder_date=datetime.combine(draft.reminder_date, time.min, tzinfo=UTC),
            frequency=draft.frequency,
            is_active=draft.is_active,
        )
        for draft in drafts
    ]
    db.add_all(rows)
    return rows
