# src/wellness_forum/api/v1/endpoints/tracking.py
"""Daily health log and health profile endpoints."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from wellness_forum.api.v1.dependencies import CurrentActorDep, SessionDep
from wellness_forum.models import DailyLog
from wellness_forum.schemas.tracking import (
    DailyLogOut,
    DailyLogUpsert,
    HealthProfileOut,
    HealthProfileUpdate,
)
from wellness_forum.services import tracking as tracking_service

router = APIRouter(tags=["tracking"])


def _log_or_404(db: SessionDep, user_id: str, log_date: date) -> DailyLog:
    log = tracking_service.get_daily_log(db, user_id, log_date)
    if log is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No log recorded for {log_date.isoformat()}",
        )
    return log


@router.get("/logs", response_model=list[DailyLogOut])
async def list_daily_logs(
    actor: CurrentActorDep,
    db: SessionDep,
    limit: int = Query(tracking_service.RECENT_LOG_LIMIT, ge=1, le=366),
    with_symptoms: bool = Query(False, description="Only days with at least one symptom"),
) -> list[DailyLogOut]:
    """Return the caller's most recent daily logs, newest day first."""
    logs = tracking_service.recent_daily_logs(db, actor.user_id, limit, with_symptoms)
    return [DailyLogOut.model_validate(log) for log in logs]


@router.get("/logs/{log_date}", response_model=DailyLogOut)
async def get_daily_log(log_date: date, actor: CurrentActorDep, db: SessionDep) -> DailyLogOut:
    """Return the caller's log for one day."""
    return DailyLogOut.model_validate(_log_or_404(db, actor.user_id, log_date))


@router.put("/logs/{log_date}", response_model=DailyLogOut)
async def put_daily_log(
    log_date: date,
    entry: DailyLogUpsert,
    actor: CurrentActorDep,
    db: SessionDep,
) -> DailyLogOut:
    """Record metrics for one day; fields left out keep their stored value."""
    log = tracking_service.upsert_daily_log(db, actor.user_id, log_date, entry)
    return DailyLogOut.model_validate(log)


@router.delete("/logs/{log_date}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_daily_log(log_date: date, actor: CurrentActorDep, db: SessionDep) -> None:
    tracking_service.delete_daily_log(db, _log_or_404(db, actor.user_id, log_date))


@router.get("/health-profile", response_model=HealthProfileOut)
async def get_health_profile(actor: CurrentActorDep, db: SessionDep) -> HealthProfileOut:
    """Return the caller's health profile; empty until something is recorded."""
    profile = tracking_service.get_health_profile(db, actor.user_id)
    if profile is None:
        return HealthProfileOut(user_id=actor.user_id)
    return HealthProfileOut.model_validate(profile)


@router.patch("/health-profile", response_model=HealthProfileOut)
async def update_health_profile(
    update: HealthProfileUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> HealthProfileOut:
    """Update sleep, stress, activity or background fields of the caller's profile."""
    profile = tracking_service.update_health_profile(db, actor.user_id, update)
    return HealthProfileOut.model_validate(profile)
