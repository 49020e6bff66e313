"""Parole application workflow."""

import datetime
import logging
from typing import Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, models
from .errors import DomainError, NotFound
from .locks import inmate_lock
from .registry import get_inmate

logger = logging.getLogger(__name__)

DECISIONS = ("Approved", "Denied")


async def get_parole(session: AsyncSession, parole_id: int) -> models.Parole:
    """Load a parole application or raise NotFound."""
    parole = await session.get(models.Parole, parole_id)
    if parole is None:
        raise NotFound("Parole record not found.")
    return parole


async def submit(
    session: AsyncSession,
    inmate_id: int,
    hearing_date: datetime.datetime,
    now: Optional[datetime.datetime] = None,
) -> models.Parole:
    """File a Pending parole application for an incarcerated inmate."""
    now = now or datetime.datetime.now()
    hearing_date = models.to_naive_local(hearing_date)

    async with inmate_lock(inmate_id):
        inmate = await get_inmate(session, inmate_id)
        if inmate.status != "Incarcerated":
            raise DomainError(
                "Parole can only be requested for an incarcerated inmate."
            )
        if hearing_date < now:
            raise DomainError("Hearing date must be in the future.")

        pending_stmt = select(models.Parole.id).where(
            models.Parole.inmate_id == inmate_id, models.Parole.status == "Pending"
        )
        if (await session.execute(pending_stmt)).first() is not None:
            raise DomainError("Inmate already has a pending parole application.")

        parole = models.Parole(
            inmate_id=inmate_id,
            application_date=now,
            hearing_date=hearing_date,
            status="Pending",
        )
        session.add(parole)
        await activity.record(session, "PAROLE_SUBMITTED")
        await session.commit()

    await session.refresh(parole)
    logger.info("Parole #%d submitted for inmate %s", parole.id, inmate.inmate_code)
    return parole


async def decide(
    session: AsyncSession,
    parole_id: int,
    decision: str,
    notes: Optional[str] = None,
) -> models.Parole:
    """Apply the one-time Approved/Denied decision to a pending application.

    Approval moves the inmate to Parole in the same transaction.
    """
    if decision not in DECISIONS:
        raise DomainError("Invalid parole status")

    parole = await get_parole(session, parole_id)

    async with inmate_lock(parole.inmate_id):
        # Re-read under the lock so two concurrent decisions cannot both pass.
        await session.refresh(parole)
        if parole.status == "Approved":
            raise DomainError("Inmate is already on parole.")
        if parole.status == "Denied":
            raise DomainError("Parole application was already denied.")

        if decision == "Approved":
            inmate = await get_inmate(session, parole.inmate_id)
            # Already moved to Parole on the strength of this pending application
            if inmate.status not in ("Incarcerated", "Parole"):
                raise DomainError(
                    f"Cannot parole an inmate whose status is {inmate.status}."
                )
            inmate.status = "Parole"

        parole.status = decision
        parole.decision_notes = notes
        await activity.record(session, f"PAROLE_{decision.upper()}")

        await session.commit()

    await session.refresh(parole)
    logger.info("Parole #%d %s", parole.id, decision.lower())
    return parole


# pylint: disable=too-many-arguments, too-many-positional-arguments
async def list_paroles(
    session: AsyncSession,
    search: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[models.Parole], int]:
    """Return one page of applications matching the filters, with the total."""
    filters = []

    if search:
        pattern = f"%{search.strip().lower()}%"
        filters.append(
            or_(
                func.lower(models.Inmate.inmate_code).like(pattern),
                func.lower(models.Inmate.first_name).like(pattern),
                func.lower(models.Inmate.last_name).like(pattern),
            )
        )

    if status:
        filters.append(models.Parole.status == status)

    if start_date:
        filters.append(
            models.Parole.hearing_date
            >= datetime.datetime.combine(start_date, datetime.time.min)
        )

    if end_date:
        filters.append(
            models.Parole.hearing_date
            <= datetime.datetime.combine(end_date, datetime.time.max)
        )

    base = select(models.Parole).join(
        models.Inmate, models.Parole.inmate_id == models.Inmate.id
    )
    if filters:
        base = base.where(and_(*filters))

    count_stmt = select(func.count()).select_from(base.subquery())
    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        base.order_by(models.Parole.hearing_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def upcoming(
    session: AsyncSession, now: Optional[datetime.datetime] = None
) -> list[models.Parole]:
    """Return pending applications whose hearing is still ahead."""
    now = now or datetime.datetime.now()
    stmt = (
        select(models.Parole)
        .where(models.Parole.status == "Pending", models.Parole.hearing_date >= now)
        .order_by(models.Parole.hearing_date)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def for_inmate(session: AsyncSession, inmate_id: int) -> list[models.Parole]:
    """Return all applications of an inmate, newest first."""
    await get_inmate(session, inmate_id)
    stmt = (
        select(models.Parole)
        .where(models.Parole.inmate_id == inmate_id)
        .order_by(models.Parole.application_date.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
