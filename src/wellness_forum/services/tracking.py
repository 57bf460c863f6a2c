"""CRUD-style helpers for daily health logs and the health profile."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellness_forum.models import DailyLog, HealthProfile
from wellness_forum.schemas.tracking import DailyLogUpsert, HealthProfileUpdate

__all__ = [
    "get_daily_log",
    "recent_daily_logs",
    "upsert_daily_log",
    "delete_daily_log",
    "get_health_profile",
    "update_health_profile",
]

logger = logging.getLogger(__name__)

RECENT_LOG_LIMIT = 7


def get_daily_log(db: Session, user_id: str, log_date: date) -> DailyLog | None:
    """Return the user's log for ``log_date``, if one was recorded."""
    stmt = select(DailyLog).where(DailyLog.user_id == user_id, DailyLog.log_date == log_date)
    return db.scalars(stmt).first()


def recent_daily_logs(
    db: Session,
    user_id: str,
    limit: int = RECENT_LOG_LIMIT,
    with_symptoms: bool = False,
) -> Sequence[DailyLog]:
    """Return the user's most recent logs, newest day first.

    With ``with_symptoms`` only days that list at least one symptom count
    towards ``limit``.
    """
    stmt = (
        select(DailyLog)
        .where(DailyLog.user_id == user_id)
        .order_by(DailyLog.log_date.desc())
    )
    if not with_symptoms:
        return db.scalars(stmt.limit(limit)).all()
    logs = [log for log in db.scalars(stmt) if log.symptoms]
    return logs[:limit]


def _apply(row: object, changes: dict) -> None:
    for key, value in changes.items():
        setattr(row, key, value)


def upsert_daily_log(db: Session, user_id: str, log_date: date, entry: DailyLogUpsert) -> DailyLog:
    """Create the day's log, or merge ``entry`` into the one already stored.

    Fields ``entry`` leaves unset keep their stored value.
    """
    changes = entry.changes()
    log = get_daily_log(db, user_id, log_date)
    if log is None:
        log = DailyLog(user_id=user_id, log_date=log_date)
        db.add(log)
    _apply(log, changes)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same day first; merge into that row.
        db.rollback()
        log = get_daily_log(db, user_id, log_date)
        if log is None:
            raise
        _apply(log, changes)
        db.commit()
    db.refresh(log)
    logger.debug("Stored daily log %s for %s", log_date, user_id)
    return log


def delete_daily_log(db: Session, log: DailyLog) -> None:
    """Remove a daily log."""
    db.delete(log)
    db.commit()


def get_health_profile(db: Session, user_id: str) -> HealthProfile | None:
    """Return the user's health profile, if any metric was ever recorded."""
    return db.scalars(select(HealthProfile).where(HealthProfile.user_id == user_id)).first()


def update_health_profile(db: Session, user_id: str, update: HealthProfileUpdate) -> HealthProfile:
    """Apply a partial update, creating the profile on first use."""
    profile = get_health_profile(db, user_id)
    if profile is None:
        profile = HealthProfile(user_id=user_id)
        db.add(profile)
    _apply(profile, update.changes())
    db.commit()
    db.refresh(profile)
    return profile
