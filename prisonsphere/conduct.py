"""Behavior ratings and rehabilitation activity logs."""

import datetime
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, models
from .enrollment import active_enrollment
from .errors import DomainError
from .registry import get_inmate

logger = logging.getLogger(__name__)


def validate_ratings(
    work_ethic: int, cooperation: int, incident_reports: int, social_skills: int
):
    """Reject ratings outside their scales."""
    if not all(1 <= value <= 5 for value in (work_ethic, cooperation, social_skills)):
        raise DomainError("Ratings must be between 1 and 5.")
    if not 0 <= incident_reports <= 10:
        raise DomainError("Incident severity must be between 0 and 10.")


# pylint: disable=too-many-arguments, too-many-positional-arguments
async def record_behavior(
    session: AsyncSession,
    inmate_id: int,
    work_ethic: int,
    cooperation: int,
    incident_reports: int,
    social_skills: int,
) -> tuple[models.BehaviorLog, bool]:
    """Create or update the inmate's log for their active enrollment.

    Returns the log and whether it was newly created.
    """
    await get_inmate(session, inmate_id)
    validate_ratings(work_ethic, cooperation, incident_reports, social_skills)

    enrollment = await active_enrollment(session, inmate_id)
    if enrollment is None:
        raise DomainError("Inmate is not enrolled in an active work program.")

    stmt = select(models.BehaviorLog).where(
        models.BehaviorLog.inmate_id == inmate_id,
        models.BehaviorLog.enrollment_id == enrollment.id,
    )
    log = (await session.execute(stmt)).scalar_one_or_none()

    ratings = {
        "work_ethic": work_ethic,
        "cooperation": cooperation,
        "incident_reports": incident_reports,
        "social_skills": social_skills,
    }
    created = log is None
    if created:
        log = models.BehaviorLog(
            inmate_id=inmate_id, enrollment_id=enrollment.id, **ratings
        )
        session.add(log)
    else:
        log.update_from_kwargs(**ratings)

    await activity.record(session, "BEHAVIOR_LOGGED")
    await session.commit()
    await session.refresh(log)

    logger.debug(
        "%s behavior log for inmate #%d enrollment #%d",
        "Created" if created else "Updated",
        inmate_id,
        enrollment.id,
    )
    return log, created


async def behavior_logs(
    session: AsyncSession, inmate_id: Optional[int] = None
) -> list[models.BehaviorLog]:
    """Return behavior logs, newest first, optionally for one inmate."""
    stmt = select(models.BehaviorLog)
    if inmate_id is not None:
        stmt = stmt.where(models.BehaviorLog.inmate_id == inmate_id)
    stmt = stmt.order_by(models.BehaviorLog.updated_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def latest_behavior(
    session: AsyncSession, inmate_id: int
) -> Optional[models.BehaviorLog]:
    """Return the most recently touched behavior log of an inmate."""
    logs = await behavior_logs(session, inmate_id)
    return logs[0] if logs else None


def updated_ago(
    updated_at: datetime.datetime, now: Optional[datetime.datetime] = None
) -> str:
    """Describe how many days ago a log was updated."""
    now = now or datetime.datetime.now()
    days = (now.date() - updated_at.date()).days
    if days <= 0:
        return "Updated today"
    return f"Updated {days} day{'s' if days > 1 else ''} ago"


async def record_activity(
    session: AsyncSession, inmate_id: int, activity_type: str, description: str
) -> models.ActivityLog:
    """Append an activity log entry for an inmate."""
    if not activity_type or not description or not description.strip():
        raise DomainError("All fields are required.")

    await get_inmate(session, inmate_id)

    log = models.ActivityLog(
        inmate_id=inmate_id,
        activity_type=activity_type,
        description=description.strip(),
    )
    session.add(log)
    await activity.record(session, "ACTIVITY_LOGGED")
    await session.commit()
    await session.refresh(log)

    logger.debug("Logged %s activity for inmate #%d", activity_type, inmate_id)
    return log


async def activity_logs(
    session: AsyncSession,
    inmate_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[models.ActivityLog], int]:
    """Return one page of activity logs, newest first, with the total count."""
    filters = []
    if inmate_id is not None:
        filters.append(models.ActivityLog.inmate_id == inmate_id)

    count_stmt = select(func.count(models.ActivityLog.id)).where(*filters)
    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        select(models.ActivityLog)
        .where(*filters)
        .order_by(models.ActivityLog.log_date.desc(), models.ActivityLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total
