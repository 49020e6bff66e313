"""Visitor log for incarcerated inmates."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, models
from .errors import DomainError, NotFound
from .registry import get_inmate

logger = logging.getLogger(__name__)


async def get_visit(session: AsyncSession, visitor_id: int) -> models.Visitor:
    """Load a visit or raise NotFound."""
    visit = await session.get(models.Visitor, visitor_id)
    if visit is None:
        raise NotFound("Visitor not found.")
    return visit


async def log_visit(
    session: AsyncSession, inmate_id: int, fields: dict[str, Any]
) -> models.Visitor:
    """Record a visit; only incarcerated inmates may receive visitors."""
    inmate = await get_inmate(session, inmate_id)
    if inmate.status != "Incarcerated":
        raise DomainError("Visitor logging denied. This inmate is not incarcerated.")

    if fields.get("visit_timestamp") is None:
        fields.pop("visit_timestamp", None)
    else:
        fields["visit_timestamp"] = models.to_naive_local(fields["visit_timestamp"])

    visit = models.Visitor(inmate_id=inmate_id, **fields)
    session.add(visit)
    await activity.record(session, "VISITOR_LOGGED")
    await session.commit()
    await session.refresh(visit)

    logger.debug("Logged visit #%d for inmate %s", visit.id, inmate.inmate_code)
    return visit


async def visits_for_inmate(
    session: AsyncSession, inmate_id: int
) -> list[models.Visitor]:
    """Return the visits of an inmate, most recent first."""
    await get_inmate(session, inmate_id)
    stmt = (
        select(models.Visitor)
        .where(models.Visitor.inmate_id == inmate_id)
        .order_by(models.Visitor.visit_timestamp.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_visit(
    session: AsyncSession, visitor_id: int, changes: dict[str, Any]
) -> models.Visitor:
    """Edit the details of a logged visit."""
    visit = await get_visit(session, visitor_id)
    if changes.get("visit_timestamp") is not None:
        changes["visit_timestamp"] = models.to_naive_local(changes["visit_timestamp"])

    visit.update_from_kwargs(**changes)
    await activity.record(session, "VISITOR_UPDATED")
    await session.commit()
    await session.refresh(visit)

    logger.debug("Updated visit #%d", visit.id)
    return visit
