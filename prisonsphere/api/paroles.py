"""Parole application routes."""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import parole, schemas
from ..db import get_db
from ..security import get_current_user, warden_required
from .deps import Pagination, total_pages

router = APIRouter(prefix="/paroles", tags=["paroles"])


@router.post(
    "",
    response_model=schemas.ParoleEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(warden_required)],
)
async def submit_parole(
    parole_data: schemas.ParoleCreate, db: AsyncSession = Depends(get_db)
):
    """Submit a parole application for an incarcerated inmate."""
    application = await parole.submit(db, parole_data.inmate_id, parole_data.hearing_date)
    return schemas.ParoleEnvelope(
        message="Parole application submitted successfully", parole=application
    )


# pylint: disable=too-many-arguments, too-many-positional-arguments
@router.get(
    "",
    response_model=schemas.ParoleList,
    dependencies=[Depends(get_current_user)],
)
async def list_paroles(
    search: Optional[str] = Query(None, description="Inmate ID or name."),
    parole_status: Optional[schemas.ParoleStatusEnum] = Query(None, alias="status"),
    start_date: Optional[datetime.date] = Query(None, alias="startDate"),
    end_date: Optional[datetime.date] = Query(None, alias="endDate"),
    pagination: tuple[int, int] = Depends(Pagination()),
    db: AsyncSession = Depends(get_db),
):
    """List parole applications filtered by inmate, status and hearing date."""
    page, limit = pagination
    paroles, total = await parole.list_paroles(
        db,
        search=search,
        status=parole_status.value if parole_status else None,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return schemas.ParoleList(
        paroles=paroles,
        total_paroles=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )


@router.get("/upcoming", response_model=list[schemas.Parole])
async def upcoming_paroles(db: AsyncSession = Depends(get_db)):
    """List pending hearings that are still ahead. No sign-in required."""
    return await parole.upcoming(db)


@router.get(
    "/inmate/{inmate_id}",
    response_model=list[schemas.Parole],
    dependencies=[Depends(get_current_user)],
)
async def paroles_for_inmate(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """List all parole applications of an inmate."""
    return await parole.for_inmate(db, inmate_id)


@router.get(
    "/{parole_id}",
    response_model=schemas.Parole,
    dependencies=[Depends(get_current_user)],
)
async def get_parole(parole_id: int, db: AsyncSession = Depends(get_db)):
    """Retrieve a single parole application."""
    return await parole.get_parole(db, parole_id)


@router.put(
    "/{parole_id}",
    response_model=schemas.ParoleEnvelope,
    dependencies=[Depends(warden_required)],
)
async def decide_parole(
    parole_id: int,
    decision: schemas.ParoleDecision,
    db: AsyncSession = Depends(get_db),
):
    """Approve or deny a pending parole application."""
    application = await parole.decide(
        db, parole_id, decision.status, decision.decision_notes
    )
    return schemas.ParoleEnvelope(
        message=f"Parole {application.status.lower()} successfully",
        parole=application,
    )
