"""Rehabilitation activity log routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import conduct, schemas
from ..db import get_db
from ..registry import get_inmate
from ..security import get_current_user, warden_required
from .deps import Pagination, total_pages

router = APIRouter(
    prefix="/activity-logs",
    tags=["activity logs"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "",
    response_model=schemas.ActivityLogEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(warden_required)],
)
async def record_activity(
    log_data: schemas.ActivityLogCreate, db: AsyncSession = Depends(get_db)
):
    """Append an activity log entry for an inmate."""
    log = await conduct.record_activity(db, **log_data.model_dump())
    return schemas.ActivityLogEnvelope(message="Activity logged successfully!", log=log)


@router.get("", response_model=schemas.ActivityLogPage)
async def list_activity_logs(
    inmate_id: Optional[int] = Query(None, alias="inmateId"),
    pagination: tuple[int, int] = Depends(Pagination()),
    db: AsyncSession = Depends(get_db),
):
    """List activity logs a page at a time, optionally for one inmate."""
    page, limit = pagination
    logs, total = await conduct.activity_logs(db, inmate_id, page=page, limit=limit)
    return schemas.ActivityLogPage(
        logs=logs,
        total_logs=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )


@router.get("/inmate/{inmate_id}", response_model=schemas.ActivityLogPage)
async def inmate_activity_logs(
    inmate_id: int,
    pagination: tuple[int, int] = Depends(Pagination(default_limit=2)),
    db: AsyncSession = Depends(get_db),
):
    """List the latest activity logs of one inmate."""
    await get_inmate(db, inmate_id)
    page, limit = pagination
    logs, total = await conduct.activity_logs(db, inmate_id, page=page, limit=limit)
    return schemas.ActivityLogPage(
        logs=logs,
        total_logs=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )
