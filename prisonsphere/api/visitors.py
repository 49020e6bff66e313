"""Visitor log routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas, visits
from ..db import get_db
from ..security import get_current_user, warden_required

router = APIRouter(
    prefix="/visitors", tags=["visitors"], dependencies=[Depends(get_current_user)]
)


@router.post(
    "/{inmate_id}",
    response_model=schemas.VisitorEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def log_visit(
    inmate_id: int,
    visitor_data: schemas.VisitorCreate,
    db: AsyncSession = Depends(get_db),
):
    """Log a visit to an incarcerated inmate."""
    visit = await visits.log_visit(db, inmate_id, visitor_data.model_dump())
    return schemas.VisitorEnvelope(message="Visitor logged successfully", visitor=visit)


@router.get("/details/{visitor_id}", response_model=schemas.Visitor)
async def get_visit(visitor_id: int, db: AsyncSession = Depends(get_db)):
    """Retrieve a single visit."""
    return await visits.get_visit(db, visitor_id)


@router.put(
    "/details/{visitor_id}",
    response_model=schemas.VisitorEnvelope,
    dependencies=[Depends(warden_required)],
)
async def update_visit(
    visitor_id: int,
    visitor_data: schemas.VisitorUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit the details of a visit."""
    visit = await visits.update_visit(
        db, visitor_id, visitor_data.model_dump(exclude_unset=True)
    )
    return schemas.VisitorEnvelope(message="Visitor updated successfully", visitor=visit)


@router.get("/{inmate_id}", response_model=list[schemas.Visitor])
async def list_visits(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """List the visits of an inmate, most recent first."""
    return await visits.visits_for_inmate(db, inmate_id)
