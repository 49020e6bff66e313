"""Inmate registry: identifier allocation and status lifecycle."""

import logging
from typing import Any, Optional

from nameparser import HumanName
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, models
from .errors import Conflict, DomainError, NotFound
from .locks import inmate_lock, registration_lock

logger = logging.getLogger(__name__)

ID_PREFIX = "INM"

# current status -> statuses reachable from it
TRANSITIONS = {
    "Incarcerated": {"Parole", "Released"},
    "Parole": {"Released"},
    "Released": set(),
}


def format_inmate_code(sequence: int) -> str:
    """Render a sequence number as an INM### identifier."""
    return f"{ID_PREFIX}{sequence:03d}"


async def next_sequence(session: AsyncSession) -> int:
    """Return the next unused identifier sequence number."""
    max_stmt = select(func.max(models.Inmate.sequence))
    max_result = await session.execute(max_stmt)
    sequence = (max_result.scalar_one_or_none() or 0) + 1

    # Skip numbers whose code is already taken, e.g. by imported records.
    while True:
        taken_stmt = select(models.Inmate.id).where(
            models.Inmate.inmate_code == format_inmate_code(sequence)
        )
        taken_result = await session.execute(taken_stmt)
        if taken_result.scalar_one_or_none() is None:
            return sequence
        sequence += 1


async def next_inmate_id(session: AsyncSession) -> str:
    """Return the identifier the next registration will receive."""
    return format_inmate_code(await next_sequence(session))


async def get_inmate(session: AsyncSession, inmate_id: int) -> models.Inmate:
    """Load an inmate or raise NotFound."""
    inmate = await session.get(models.Inmate, inmate_id)
    if inmate is None:
        raise NotFound("Inmate not found.")
    return inmate


async def register_inmate(
    session: AsyncSession, fields: dict[str, Any]
) -> models.Inmate:
    """Create an inmate with the next sequential identifier."""
    async with registration_lock():
        sequence = await next_sequence(session)
        inmate = models.Inmate(
            **fields,
            sequence=sequence,
            inmate_code=format_inmate_code(sequence),
            status="Incarcerated",
        )
        session.add(inmate)
        await activity.record(session, "INMATE_ADDED")
        try:
            await session.commit()
        except IntegrityError as error:
            await session.rollback()
            logger.warning("Identifier %s collided on insert", inmate.inmate_code)
            raise Conflict(
                "Inmate identifier was claimed concurrently. Please retry."
            ) from error

    await session.refresh(inmate)
    logger.info("Registered inmate %s", inmate.inmate_code)
    return inmate


async def latest_parole(
    session: AsyncSession, inmate_id: int
) -> Optional[models.Parole]:
    """Return the most recent parole application of an inmate."""
    stmt = (
        select(models.Parole)
        .where(models.Parole.inmate_id == inmate_id)
        .order_by(models.Parole.application_date.desc(), models.Parole.id.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def check_transition(
    session: AsyncSession, inmate: models.Inmate, target: str
) -> bool:
    """Validate a status change, returning False when it is a no-op.

    Moving into Parole needs a parole application that was not denied. If
    that application is already approved the inmate is on parole and the
    call changes nothing.
    """
    if target == inmate.status:
        return False

    if target not in TRANSITIONS[inmate.status]:
        raise DomainError(
            f"Cannot change inmate status from {inmate.status} to {target}."
        )

    if target == "Parole":
        parole = await latest_parole(session, inmate.id)
        if parole is None:
            raise DomainError("Inmate has no parole application.")
        if parole.status == "Denied":
            raise DomainError(
                "Parole application was denied. Submit a new application first."
            )

    return True


async def update_inmate(
    session: AsyncSession, inmate_id: int, changes: dict[str, Any]
) -> models.Inmate:
    """Apply field edits and an optional status change to an inmate."""
    async with inmate_lock(inmate_id):
        inmate = await get_inmate(session, inmate_id)

        target = changes.pop("status", None)
        status_changed = target is not None and await check_transition(
            session, inmate, target
        )
        if not status_changed and not changes:
            return inmate

        if status_changed:
            inmate.status = target
        inmate.update_from_kwargs(**changes)
        await activity.record(session, "INMATE_UPDATED")
        await session.commit()

    await session.refresh(inmate)
    logger.debug("Updated inmate %s", inmate.inmate_code)
    return inmate


async def release_inmate(session: AsyncSession, inmate_id: int) -> models.Inmate:
    """Soft-delete an inmate by marking them Released."""
    async with inmate_lock(inmate_id):
        inmate = await get_inmate(session, inmate_id)
        if inmate.status == "Released":
            raise DomainError("Inmate is already released.")
        await check_transition(session, inmate, "Released")

        inmate.status = "Released"
        await activity.record(session, "INMATE_RELEASED")
        await session.commit()

    await session.refresh(inmate)
    logger.info("Released inmate %s", inmate.inmate_code)
    return inmate


async def list_inmates(
    session: AsyncSession, page: int, limit: int
) -> tuple[list[models.Inmate], int]:
    """Return one page of inmates ordered by identifier, with the total count."""
    total = (await session.execute(select(func.count(models.Inmate.id)))).scalar_one()
    stmt = (
        select(models.Inmate)
        .order_by(models.Inmate.sequence)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def search_inmates(session: AsyncSession, query: str) -> list[models.Inmate]:
    """Find inmates by identifier, first, last or full name."""
    query = query.strip()
    pattern = f"%{query.lower()}%"
    filters = [
        func.lower(models.Inmate.inmate_code).like(pattern),
        func.lower(models.Inmate.first_name).like(pattern),
        func.lower(models.Inmate.last_name).like(pattern),
        func.lower(
            models.Inmate.first_name + " " + models.Inmate.last_name
        ).like(pattern),
    ]

    # "Last, First" and "First Middle Last" forms
    name = HumanName(query)
    if name.first and name.last:
        logger.debug("Searching inmates by full name: %s %s", name.first, name.last)
        filters.append(
            (func.lower(models.Inmate.first_name) == name.first.lower())
            & (func.lower(models.Inmate.last_name) == name.last.lower())
        )

    stmt = select(models.Inmate).where(or_(*filters)).order_by(models.Inmate.sequence)
    result = await session.execute(stmt)
    return list(result.scalars().all())
