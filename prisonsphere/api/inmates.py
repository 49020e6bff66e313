"""Inmate registry routes."""

import logging
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import pdf, registry, reporting, schemas
from ..db import get_db
from ..security import get_current_user, warden_required
from .deps import Pagination, total_pages

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/inmates", tags=["inmates"], dependencies=[Depends(get_current_user)]
)


class PdfTypeEnum(str, Enum):
    """Printable report layouts."""

    INFORMATION = "information"
    REHABILITATION = "rehabilitation"


@router.post(
    "",
    response_model=schemas.InmateRegistered,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(warden_required)],
)
async def register_inmate(
    inmate_data: schemas.InmateCreate, db: AsyncSession = Depends(get_db)
):
    """Register a new inmate under the next sequential identifier."""
    inmate = await registry.register_inmate(db, inmate_data.model_dump())
    return schemas.InmateRegistered(
        message="Inmate registered successfully",
        inmate=inmate,
        next_inmate_id=await registry.next_inmate_id(db),
    )


@router.get("", response_model=schemas.InmatePage)
async def list_inmates(
    pagination: tuple[int, int] = Depends(Pagination(default_limit=5)),
    db: AsyncSession = Depends(get_db),
):
    """List inmates a page at a time."""
    page, limit = pagination
    inmates, total = await registry.list_inmates(db, page, limit)
    return schemas.InmatePage(
        inmates=inmates,
        total_inmates=total,
        total_pages=total_pages(total, limit),
        current_page=page,
    )


@router.get("/next-id", response_model=schemas.NextInmateId)
async def next_inmate_id(db: AsyncSession = Depends(get_db)):
    """Preview the identifier the next registration will receive."""
    return schemas.NextInmateId(next_inmate_id=await registry.next_inmate_id(db))


@router.get("/search", response_model=list[schemas.Inmate])
async def search_inmates(
    query: str = Query("", description="Inmate ID or name."),
    db: AsyncSession = Depends(get_db),
):
    """Search inmates by identifier or name."""
    if not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required.",
        )

    inmates = await registry.search_inmates(db, query)
    if not inmates:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No inmates found."
        )
    return inmates


@router.get("/report/{inmate_id}")
async def inmate_report(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """Return the full report data of an inmate without archiving it."""
    return await reporting.collect(db, inmate_id)


@router.get("/report/{inmate_id}/pdf/{pdf_type}")
async def inmate_report_pdf(
    inmate_id: int, pdf_type: PdfTypeEnum, db: AsyncSession = Depends(get_db)
):
    """Download an inmate report as a PDF document."""
    details = await reporting.collect(db, inmate_id)
    content = pdf.render(details, pdf_type.value)
    filename = f"{details['inmate']['inmateID']}_{pdf_type.value}_report.pdf"
    logger.debug("Rendered %s PDF for inmate #%d", pdf_type.value, inmate_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{inmate_id}", response_model=schemas.Inmate)
async def get_inmate(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """Retrieve a single inmate."""
    return await registry.get_inmate(db, inmate_id)


@router.put(
    "/{inmate_id}",
    response_model=schemas.InmateEnvelope,
    dependencies=[Depends(warden_required)],
)
async def update_inmate(
    inmate_id: int,
    inmate_data: schemas.InmateUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit an inmate's fields and optionally change their status."""
    changes = inmate_data.model_dump(exclude_unset=True, exclude_none=True)
    current = await registry.get_inmate(db, inmate_id)
    already_paroled = changes.get("status") == "Parole" and current.status == "Parole"

    inmate = await registry.update_inmate(db, inmate_id, changes)
    message = (
        "Inmate is already on parole."
        if already_paroled
        else "Inmate updated successfully"
    )
    return schemas.InmateEnvelope(message=message, inmate=inmate)


@router.delete(
    "/{inmate_id}",
    response_model=schemas.InmateEnvelope,
    dependencies=[Depends(warden_required)],
)
async def release_inmate(inmate_id: int, db: AsyncSession = Depends(get_db)):
    """Release an inmate. Records are never hard-deleted."""
    inmate = await registry.release_inmate(db, inmate_id)
    return schemas.InmateEnvelope(message="Inmate released successfully", inmate=inmate)
