"""Work program catalog and enrollment routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from .. import enrollment, models, schemas
from ..db import get_db
from ..security import get_current_user, warden_required
from .deps import Pagination, total_pages

router = APIRouter(
    prefix="/work-programs",
    tags=["work programs"],
    dependencies=[Depends(get_current_user)],
)


async def with_rating(
    db: AsyncSession, item: models.WorkProgramEnrollment
) -> schemas.Enrollment:
    """Serialize an enrollment with its frozen or live performance rating."""
    logs = await enrollment.logs_for_enrollment(db, item.id)
    result = schemas.Enrollment.model_validate(item)
    result.performance_rating = enrollment.current_rating(item, logs)
    return result


@router.get("", response_model=list[schemas.WorkProgram])
async def list_programs(db: AsyncSession = Depends(get_db)):
    """List the work program catalog."""
    return await enrollment.list_programs(db)


@router.post(
    "/enroll",
    response_model=schemas.EnrollmentEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(warden_required)],
)
async def enroll(
    enrollment_data: schemas.EnrollmentCreate, db: AsyncSession = Depends(get_db)
):
    """Assign an incarcerated inmate to a work program."""
    item = await enrollment.enroll(db, **enrollment_data.model_dump())
    return schemas.EnrollmentEnvelope(
        message="Inmate successfully enrolled in work program.",
        enrollment=await with_rating(db, item),
    )


@router.get("/enrollments", response_model=schemas.EnrollmentPage)
async def list_enrollments(
    enrollment_status: Optional[schemas.EnrollmentStatusEnum] = Query(
        None, alias="status"
    ),
    pagination: tuple[int, int] = Depends(Pagination()),
    db: AsyncSession = Depends(get_db),
):
    """List enrollments a page at a time, optionally by status."""
    page, limit = pagination
    items, total = await enrollment.list_enrollments(
        db,
        page=page,
        limit=limit,
        status=enrollment_status.value if enrollment_status else None,
    )
    return schemas.EnrollmentPage(
        enrollments=[await with_rating(db, item) for item in items],
        total_enrollments=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )


@router.get(
    "/enrollments/inmate/{inmate_id}", response_model=list[schemas.Enrollment]
)
async def active_enrollments(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """List the active enrollments of an inmate."""
    items = await enrollment.enrollments_for_inmate(db, inmate_id)
    return [await with_rating(db, item) for item in items]


@router.get(
    "/enrollments/inmate/{inmate_id}/latest", response_model=schemas.Enrollment
)
async def latest_completed(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """Return the most recently completed enrollment, or an empty object."""
    item = await enrollment.latest_completed(db, inmate_id)
    if item is None:
        return JSONResponse(content={})
    return await with_rating(db, item)
