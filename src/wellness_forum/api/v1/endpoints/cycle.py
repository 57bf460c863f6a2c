# src/wellness_forum/api/v1/endpoints/cycle.py
"""Cycle prediction endpoints."""

from fastapi import APIRouter, HTTPException, status

from wellness_forum.api.v1.dependencies import CurrentActorDep, OptionalActorDep, SessionDep
from wellness_forum.models import CyclePredictionRecord
from wellness_forum.schemas.cycle import (
    ActualPeriodReport,
    CyclePredictionOut,
    CyclePredictionRequest,
    CyclePredictionResponse,
)
from wellness_forum.services.cycle import (
    list_predictions,
    period_reminders,
    predict_cycle,
    record_actual_period,
    save_prediction,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])


@router.post("/predictions", response_model=CyclePredictionResponse)
async def create_prediction(
    payload: CyclePredictionRequest,
    actor: OptionalActorDep,
    db: SessionDep,
) -> CyclePredictionResponse:
    """Predict the next cycle and draft the matching reminders.

    For a signed-in caller the prediction is saved and the drafted reminders
    replace their pending period and ovulation reminders. Anonymous callers
    only get the computed dates back.
    """
    try:
        prediction = predict_cycle(payload.last_period_start, payload.cycle_length, payload.as_of)
    except ValueError as err:  # pragma: no cover - schema bounds catch this first
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(err),
        ) from err

    reminders = period_reminders(prediction, actor.user_id if actor else None)
    prediction_id = None
    if actor is not None:
        prediction_id = save_prediction(db, actor.user_id, prediction, reminders).id

    return CyclePredictionResponse(
        prediction=prediction,
        reminders=reminders,
        prediction_id=prediction_id,
    )


@router.get("/predictions", response_model=list[CyclePredictionOut])
async def get_predictions(actor: CurrentActorDep, db: SessionDep) -> list[CyclePredictionOut]:
    """Return the caller's saved predictions, latest cycle first."""
    return [CyclePredictionOut.model_validate(r) for r in list_predictions(db, actor.user_id)]


@router.patch("/predictions/{prediction_id}", response_model=CyclePredictionOut)
async def report_actual_period(
    prediction_id: str,
    report: ActualPeriodReport,
    actor: CurrentActorDep,
    db: SessionDep,
) -> CyclePredictionOut:
    """Record when the predicted period actually started."""
    record = db.get(CyclePredictionRecord, prediction_id)
    if record is None or not actor.owns(record):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prediction not found",
        )
    return CyclePredictionOut.model_validate(
        record_actual_period(db, record, report.actual_period_start)
    )
