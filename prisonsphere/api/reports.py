"""Archived report routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models, reporting, schemas
from ..db import get_db
from ..security import get_current_user

router = APIRouter(
    prefix="/reports", tags=["reports"], dependencies=[Depends(get_current_user)]
)


@router.post(
    "/inmate-info/{inmate_id}",
    response_model=schemas.ReportEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def inmate_info_report(
    inmate_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    """Generate and archive an inmate information report."""
    report = await reporting.generate(db, inmate_id, "Inmate Info", user)
    return schemas.ReportEnvelope(
        message="Inmate Info Report Generated & Saved", report=report
    )


@router.post(
    "/rehab-status/{inmate_id}",
    response_model=schemas.ReportEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def rehabilitation_report(
    inmate_id: int,
    db: AsyncSession = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    """Generate and archive a rehabilitation status report."""
    report = await reporting.generate(db, inmate_id, "Rehabilitation Status", user)
    return schemas.ReportEnvelope(
        message="Rehabilitation Status Report Generated & Saved", report=report
    )


@router.get("", response_model=list[schemas.Report])
async def list_reports(db: AsyncSession = Depends(get_db)):
    """List archived reports, newest first."""
    return await reporting.list_reports(db)
