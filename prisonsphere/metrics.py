"""Dashboard statistics and analytics."""

# pylint: disable=not-callable

import datetime
from typing import Optional

from sqlalchemy import String, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import models, schemas

RECENT_REPORT_DAYS = 30
ANALYTICS_MONTHS = 6


def get_month_key(date_column, dialect: str):
    """Generate month key expression based on database dialect."""
    if dialect == "postgresql":
        return func.to_char(date_column, "YYYY-MM")
    if dialect == "sqlite":
        return func.strftime("%Y-%m", date_column)
    year = func.extract("year", date_column)
    month = func.extract("month", date_column)
    return func.concat(
        func.cast(year, String), "-", func.lpad(func.cast(month, String), 2, "0")
    )


def month_keys(end: datetime.date, months: int) -> list[str]:
    """Return YYYY-MM keys of the given number of months ending with end."""
    keys = []
    year, month = end.year, end.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


async def _count(session: AsyncSession, stmt) -> int:
    return (await session.execute(stmt)).scalar_one()


async def get_stats(
    session: AsyncSession, now: Optional[datetime.datetime] = None
) -> schemas.DashboardStats:
    """Headline counts: inmates, active rehabilitation, hearings, reports."""
    now = now or datetime.datetime.now()

    total_inmates = await _count(session, select(func.count(models.Inmate.id)))
    in_rehabilitation = await _count(
        session,
        select(func.count(func.distinct(models.WorkProgramEnrollment.inmate_id))).where(
            models.WorkProgramEnrollment.status == "Active"
        ),
    )
    upcoming_parole = await _count(
        session,
        select(func.count(models.Parole.id)).where(models.Parole.hearing_date >= now),
    )
    recent_reports = await _count(
        session,
        select(func.count(models.Report.id)).where(
            models.Report.created_at >= now - datetime.timedelta(days=RECENT_REPORT_DAYS)
        ),
    )

    return schemas.DashboardStats(
        total_inmates=total_inmates,
        in_rehabilitation=in_rehabilitation,
        upcoming_parole=upcoming_parole,
        recent_reports=recent_reports,
    )


async def _monthly_counts(session: AsyncSession, date_column, start, *filters):
    dialect = session.bind.dialect.name
    month_key = get_month_key(date_column, dialect)
    query = (
        select(month_key.label("month"), func.count().label("total"))
        .where(date_column >= start, *filters)
        .group_by(month_key)
    )
    result = await session.execute(query)
    return {row.month: row.total for row in result.all()}


async def get_analytics(
    session: AsyncSession, now: Optional[datetime.datetime] = None
) -> schemas.DashboardAnalytics:
    """Monthly admissions/releases for the last six months and status mix."""
    now = now or datetime.datetime.now()
    keys = month_keys(now.date(), ANALYTICS_MONTHS)
    year, month = (int(part) for part in keys[0].split("-"))
    start = datetime.date(year, month, 1)

    admitted = await _monthly_counts(session, models.Inmate.admission_date, start)
    # Release time is approximated by the last modification of released records.
    released = await _monthly_counts(
        session,
        models.Inmate.updated_at,
        datetime.datetime.combine(start, datetime.time.min),
        models.Inmate.status == "Released",
    )

    monthly = [
        schemas.MonthlyInmatePoint(
            month=key, admitted=admitted.get(key, 0), released=released.get(key, 0)
        )
        for key in keys
    ]

    status_stmt = select(models.Inmate.status, func.count(models.Inmate.id)).group_by(
        models.Inmate.status
    )
    by_status = dict((await session.execute(status_stmt)).all())

    return schemas.DashboardAnalytics(
        monthly_inmate_stats=monthly,
        inmate_distribution=schemas.InmateDistribution(
            incarcerated_count=by_status.get("Incarcerated", 0),
            released_count=by_status.get("Released", 0),
            parole_count=by_status.get("Parole", 0),
        ),
    )
