"""Count-coalescing recent activity feed."""

import datetime
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import models

logger = logging.getLogger(__name__)

COALESCE_WINDOW = datetime.timedelta(hours=1)
RETENTION = datetime.timedelta(hours=24)


def pluralize(word: str, count: int) -> str:
    """Render a count with its noun."""
    return f"{count} {word}s" if count > 1 else f"1 {word}"


def _verb(count: int) -> str:
    return "were" if count > 1 else "was"


MESSAGES = {
    "INMATE_ADDED": lambda n: f"{pluralize('inmate', n)} {_verb(n)} added to the system",
    "INMATE_UPDATED": lambda n: f"{pluralize('inmate record', n)} {_verb(n)} updated",
    "INMATE_RELEASED": lambda n: f"{pluralize('inmate', n)} {_verb(n)} released",
    "PAROLE_SUBMITTED": lambda n: (
        f"{pluralize('parole application', n)} {_verb(n)} submitted"
    ),
    "PAROLE_APPROVED": lambda n: (
        f"{pluralize('parole application', n)} {_verb(n)} approved"
    ),
    "PAROLE_DENIED": lambda n: f"{pluralize('parole application', n)} {_verb(n)} denied",
    "VISITOR_LOGGED": lambda n: (
        f"{pluralize('visitor log', n)} {_verb(n)} recorded for an inmate"
    ),
    "VISITOR_UPDATED": lambda n: f"{pluralize('visitor record', n)} {_verb(n)} updated",
    "WORK_PROGRAM_ENROLLED": lambda n: (
        f"{pluralize('inmate', n)} enrolled in a work program"
    ),
    "WORK_PROGRAM_COMPLETED": lambda n: (
        f"Expired work programs were completed {pluralize('time', n)}"
    ),
    "BEHAVIOR_LOGGED": lambda n: f"{pluralize('behavior log', n)} {_verb(n)} recorded",
    "ACTIVITY_LOGGED": lambda n: f"{pluralize('activity log', n)} {_verb(n)} recorded",
    "REPORT_GENERATED": lambda n: f"{pluralize('inmate report', n)} {_verb(n)} generated",
}


def message_for(activity_type: str, count: int) -> str:
    """Render the display message of an activity type at a given count."""
    render = MESSAGES.get(activity_type)
    if render is None:
        noun = "activities" if count > 1 else "activity"
        return f"{count} {noun} performed"
    return render(count)


def time_label(minutes: int) -> str:
    """Describe an elapsed number of minutes in words."""
    if minutes < 1:
        return "just now"
    if minutes < 5:
        return "a few moments ago"
    if minutes < 30:
        return "a few minutes ago"
    if minutes < 60:
        return f"{minutes} minutes ago"
    return f"{minutes // 60} hour(s) ago"


@dataclass(frozen=True)
class FeedEntry:
    """A feed row rendered for display."""

    activity_type: str
    count: int
    message: str
    time_label: str
    last_updated: datetime.datetime


async def record(
    session: AsyncSession,
    activity_type: str,
    now: Optional[datetime.datetime] = None,
) -> models.RecentActivityLog:
    """Count an occurrence of an activity, coalescing within the last hour.

    The change is added to the session but not committed, so it lands in
    the same transaction as the write it describes.
    """
    now = now or datetime.datetime.now()

    stmt = (
        select(models.RecentActivityLog)
        .where(
            models.RecentActivityLog.activity_type == activity_type,
            models.RecentActivityLog.last_updated >= now - COALESCE_WINDOW,
        )
        .order_by(models.RecentActivityLog.last_updated.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    entry = result.scalar_one_or_none()

    if entry is None:
        entry = models.RecentActivityLog(
            activity_type=activity_type,
            count=1,
            message=message_for(activity_type, 1),
            last_updated=now,
        )
        session.add(entry)
    else:
        entry.count += 1
        entry.last_updated = now
        entry.message = message_for(activity_type, entry.count)

    await session.flush()
    logger.debug("Recorded %s (count %d)", activity_type, entry.count)
    return entry


async def list_recent(
    session: AsyncSession, now: Optional[datetime.datetime] = None
) -> list[FeedEntry]:
    """Return feed rows touched in the last 24 hours, newest first."""
    now = now or datetime.datetime.now()

    stmt = (
        select(models.RecentActivityLog)
        .where(models.RecentActivityLog.last_updated >= now - RETENTION)
        .order_by(models.RecentActivityLog.last_updated.desc())
    )
    result = await session.execute(stmt)

    entries = []
    for row in result.scalars():
        minutes = int((now - row.last_updated).total_seconds() // 60)
        label = time_label(max(minutes, 0))
        message = message_for(row.activity_type, row.count)
        entries.append(
            FeedEntry(
                activity_type=row.activity_type,
                count=row.count,
                message=f"{message} ({label})",
                time_label=label,
                last_updated=row.last_updated,
            )
        )
    return entries


async def purge(session: AsyncSession, now: Optional[datetime.datetime] = None) -> int:
    """Delete feed rows older than 24 hours and return how many were removed."""
    now = now or datetime.datetime.now()

    stmt = delete(models.RecentActivityLog).where(
        models.RecentActivityLog.last_updated < now - RETENTION
    )
    result = await session.execute(stmt)
    await session.commit()

    logger.info("Purged %d stale activity feed entries", result.rowcount)
    return result.rowcount
