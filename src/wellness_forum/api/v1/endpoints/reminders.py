# src/wellness_forum/api/v1/endpoints/reminders.py
"""Reminder endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from wellness_forum.api.v1.dependencies import CurrentActorDep, SessionDep
from wellness_forum.models import Reminder
from wellness_forum.schemas.reminder import (
    MedicationReminderCreate,
    ReminderOut,
    ReminderType,
    ReminderUpdate,
)
from wellness_forum.services import reminders as reminder_service

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _owned_reminder(db: SessionDep, reminder_id: str, actor: CurrentActorDep) -> Reminder:
    reminder = reminder_service.get_reminder(db, reminder_id)
    if reminder is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reminder not found",
        )
    if not actor.owns(reminder):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only change your own reminders",
        )
    return reminder


@router.get("/", response_model=list[ReminderOut])
async def list_reminders(
    actor: CurrentActorDep,
    db: SessionDep,
    reminder_type: ReminderType | None = Query(None, alias="type"),
) -> list[ReminderOut]:
    """Return the caller's reminders, soonest first."""
    reminders = reminder_service.list_reminders(db, actor.user_id, reminder_type)
    return [ReminderOut.model_validate(reminder) for reminder in reminders]


@router.post("/medication", response_model=ReminderOut, status_code=status.HTTP_201_CREATED)
async def create_medication_reminder(
    form: MedicationReminderCreate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> ReminderOut:
    """Schedule a medication reminder at the next occurrence of its time of day."""
    reminder = reminder_service.create_medication_reminder(db, actor.user_id, form)
    return ReminderOut.model_validate(reminder)


@router.patch("/{reminder_id}", response_model=ReminderOut)
async def update_reminder(
    reminder_id: str,
    update: ReminderUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> ReminderOut:
    """Enable or disable one of the caller's reminders."""
    reminder = _owned_reminder(db, reminder_id, actor)
    return ReminderOut.model_validate(
        reminder_service.set_reminder_active(db, reminder, update.is_active)
    )


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(reminder_id: str, actor: CurrentActorDep, db: SessionDep) -> None:
    reminder_service.delete_reminder(db, _owned_reminder(db, reminder_id, actor))
