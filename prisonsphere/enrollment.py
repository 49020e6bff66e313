"""Work program catalog, enrollment lifecycle and auto-completion."""

import datetime
import logging
from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, models, scoring
from .errors import Conflict, DomainError
from .locks import inmate_lock
from .registry import get_inmate

logger = logging.getLogger(__name__)

STANDARD_PROGRAMS = [
    ("Kitchen Services", "Food preparation and kitchen duties."),
    ("Carpentry Workshop", "Woodwork and furniture making."),
    ("Tailoring Unit", "Sewing and garment production."),
    ("Agricultural Program", "Farming and crop production."),
    ("Laundry Services", "Laundry and uniform services."),
    ("Maintenance Crew", "Facility maintenance and repair."),
    ("Cleaning & Sanitation", "Cleaning and hygiene services."),
    ("Educational Support", "Teaching and literacy programs."),
]


async def list_programs(session: AsyncSession) -> list[models.WorkProgram]:
    """Return the work program catalog ordered by name."""
    result = await session.execute(
        select(models.WorkProgram).order_by(models.WorkProgram.name)
    )
    return list(result.scalars().all())


async def seed_programs(session: AsyncSession, replace: bool = False) -> int:
    """Insert the standard catalog, optionally replacing what is there."""
    if replace:
        await session.execute(delete(models.WorkProgram))

    existing = set((await session.execute(select(models.WorkProgram.name))).scalars())
    added = 0
    for name, description in STANDARD_PROGRAMS:
        if name not in existing:
            session.add(models.WorkProgram(name=name, description=description))
            added += 1

    await session.commit()
    logger.info("Seeded %d work programs", added)
    return added


async def active_enrollment(
    session: AsyncSession, inmate_id: int
) -> Optional[models.WorkProgramEnrollment]:
    """Return the inmate's Active enrollment, if any."""
    stmt = select(models.WorkProgramEnrollment).where(
        models.WorkProgramEnrollment.inmate_id == inmate_id,
        models.WorkProgramEnrollment.status == "Active",
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def enroll(
    session: AsyncSession,
    inmate_id: int,
    work_program_id: int,
    start_date: datetime.date,
    end_date: datetime.date,
) -> models.WorkProgramEnrollment:
    """Assign an incarcerated inmate to a work program."""
    program = await session.get(models.WorkProgram, work_program_id)
    if program is None:
        raise DomainError("Invalid work program selected.")

    if end_date <= start_date:
        raise DomainError("End date must be after the start date.")

    async with inmate_lock(inmate_id):
        inmate = await get_inmate(session, inmate_id)
        if inmate.status != "Incarcerated":
            raise DomainError(
                "Only incarcerated inmates can be assigned to a work program."
            )

        if await active_enrollment(session, inmate_id) is not None:
            raise DomainError("Inmate is already enrolled in an active work program.")

        enrollment = models.WorkProgramEnrollment(
            inmate_id=inmate_id,
            work_program_id=work_program_id,
            start_date=start_date,
            end_date=end_date,
            status="Active",
        )
        session.add(enrollment)
        await activity.record(session, "WORK_PROGRAM_ENROLLED")
        try:
            await session.commit()
        except IntegrityError as error:
            await session.rollback()
            raise Conflict(
                "Inmate is already enrolled in an active work program."
            ) from error

    await session.refresh(enrollment)
    logger.info(
        "Enrolled inmate %s in %s until %s",
        inmate.inmate_code,
        program.name,
        end_date,
    )
    return enrollment


async def list_enrollments(
    session: AsyncSession,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
) -> tuple[list[models.WorkProgramEnrollment], int]:
    """Return one page of enrollments, newest first, with the total count."""
    filters = []
    if status:
        filters.append(models.WorkProgramEnrollment.status == status)

    count_stmt = select(func.count(models.WorkProgramEnrollment.id)).where(*filters)
    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        select(models.WorkProgramEnrollment)
        .where(*filters)
        .order_by(
            models.WorkProgramEnrollment.start_date.desc(),
            models.WorkProgramEnrollment.id.desc(),
        )
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def enrollments_for_inmate(
    session: AsyncSession, inmate_id: int, status: Optional[str] = "Active"
) -> list[models.WorkProgramEnrollment]:
    """Return an inmate's enrollments, restricted to one status by default."""
    stmt = select(models.WorkProgramEnrollment).where(
        models.WorkProgramEnrollment.inmate_id == inmate_id
    )
    if status:
        stmt = stmt.where(models.WorkProgramEnrollment.status == status)
    stmt = stmt.order_by(models.WorkProgramEnrollment.start_date.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def latest_completed(
    session: AsyncSession, inmate_id: int
) -> Optional[models.WorkProgramEnrollment]:
    """Return the most recently completed enrollment of an inmate."""
    stmt = (
        select(models.WorkProgramEnrollment)
        .where(
            models.WorkProgramEnrollment.inmate_id == inmate_id,
            models.WorkProgramEnrollment.status == "Completed",
        )
        .order_by(models.WorkProgramEnrollment.completion_date.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def logs_for_enrollment(
    session: AsyncSession, enrollment_id: int
) -> list[models.BehaviorLog]:
    """Return the behavior logs recorded against an enrollment."""
    stmt = select(models.BehaviorLog).where(
        models.BehaviorLog.enrollment_id == enrollment_id
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def complete_expired_enrollments(
    session: AsyncSession, now: Optional[datetime.datetime] = None
) -> int:
    """Complete every Active enrollment whose end date has passed.

    Each completed enrollment gets its performance rating frozen from its
    behavior logs. A single feed entry is recorded per run that completed
    anything.
    """
    now = now or datetime.datetime.now()

    stmt = select(models.WorkProgramEnrollment).where(
        models.WorkProgramEnrollment.status == "Active",
        models.WorkProgramEnrollment.end_date < now.date(),
    )
    result = await session.execute(stmt)
    expired = list(result.scalars().all())

    for enrollment in expired:
        logs = await logs_for_enrollment(session, enrollment.id)
        enrollment.performance_rating = scoring.performance_rating(logs)
        enrollment.status = "Completed"
        enrollment.completion_date = now

    if expired:
        await activity.record(session, "WORK_PROGRAM_COMPLETED", now=now)

    await session.commit()
    logger.info("%d work programs auto-completed", len(expired))
    return len(expired)


def current_rating(
    enrollment: models.WorkProgramEnrollment, logs: list[models.BehaviorLog]
) -> float:
    """Return the frozen rating of a completed enrollment, or a live one."""
    if enrollment.status == "Completed" and enrollment.performance_rating is not None:
        return enrollment.performance_rating
    return scoring.performance_rating(logs)

