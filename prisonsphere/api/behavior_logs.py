"""Behavior rating routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import conduct, schemas
from ..db import get_db
from ..registry import get_inmate
from ..security import get_current_user, warden_required

router = APIRouter(
    prefix="/behavior-logs",
    tags=["behavior logs"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "",
    response_model=schemas.BehaviorLogEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(warden_required)],
)
async def record_behavior(
    log_data: schemas.BehaviorLogCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Record ratings for the inmate's active enrollment, updating in place."""
    log, created = await conduct.record_behavior(db, **log_data.model_dump())
    if not created:
        response.status_code = status.HTTP_200_OK
    message = (
        "Behavior logged successfully!"
        if created
        else "Behavioral log updated successfully!"
    )
    return schemas.BehaviorLogEnvelope(message=message, behavior_log=log)


@router.get("", response_model=list[schemas.BehaviorLog])
async def list_behavior_logs(
    inmate_id: Optional[int] = Query(None, alias="inmateId"),
    db: AsyncSession = Depends(get_db),
):
    """List behavior logs, optionally for one inmate."""
    return await conduct.behavior_logs(db, inmate_id)


@router.get("/inmate/{inmate_id}", response_model=schemas.LatestBehavior)
async def latest_behavior(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """Return the latest ratings of an inmate, zeroed when none exist."""
    await get_inmate(db, inmate_id)
    log = await conduct.latest_behavior(db, inmate_id)
    if log is None:
        return schemas.LatestBehavior()
    return schemas.LatestBehavior(
        work_ethic=log.work_ethic,
        cooperation=log.cooperation,
        incident_reports=log.incident_reports,
        social_skills=log.social_skills,
        incident_label=log.incident_label,
        updated_at=log.updated_at,
        time_ago=conduct.updated_ago(log.updated_at),
    )
