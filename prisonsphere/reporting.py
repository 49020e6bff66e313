"""Inmate report assembly and archiving."""

import dataclasses
import logging
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from . import activity, conduct, enrollment, models, schemas, scoring
from .registry import get_inmate

logger = logging.getLogger(__name__)

REPORT_TITLES = {
    "Inmate Info": "Inmate Information Report",
    "Rehabilitation Status": "Rehabilitation Status Report",
}


async def collect(session: AsyncSession, inmate_id: int) -> dict[str, Any]:
    """Gather the profile, programs, logs and evaluation of an inmate.

    The result only holds JSON-compatible values so it can be archived as-is.
    """
    inmate = await get_inmate(session, inmate_id)

    enrollments = await enrollment.enrollments_for_inmate(session, inmate_id, status=None)
    behavior = await conduct.behavior_logs(session, inmate_id)
    activities, _ = await conduct.activity_logs(session, inmate_id, page=1, limit=1000)
    evaluation = scoring.evaluate(behavior)

    programs = []
    for item in enrollments:
        logs = [log for log in behavior if log.enrollment_id == item.id]
        programs.append(
            {
                "name": item.work_program.name,
                "status": item.status,
                "startDate": item.start_date,
                "endDate": item.end_date,
                "completionDate": item.completion_date,
                "performanceRating": enrollment.current_rating(item, logs),
            }
        )

    profile = schemas.Inmate.model_validate(inmate).model_dump(by_alias=True)
    details = {
        "inmate": profile,
        "workPrograms": programs,
        "behaviorLogs": [
            schemas.BehaviorLog.model_validate(log).model_dump(by_alias=True)
            for log in behavior
        ],
        "activityLogs": [
            schemas.ActivityLog.model_validate(log).model_dump(by_alias=True)
            for log in activities
        ],
        "evaluation": schemas.RehabilitationEvaluation(
            **dataclasses.asdict(evaluation)
        ).model_dump(by_alias=True),
    }
    return jsonable_encoder(details)


async def generate(
    session: AsyncSession, inmate_id: int, report_type: str, user: models.User
) -> models.Report:
    """Archive a snapshot report of the given type for an inmate."""
    details = await collect(session, inmate_id)
    if report_type == "Inmate Info":
        details.pop("evaluation")

    report = models.Report(
        title=REPORT_TITLES[report_type],
        type=report_type,
        inmate_id=inmate_id,
        details=details,
        created_by_id=user.id,
    )
    session.add(report)
    await activity.record(session, "REPORT_GENERATED")
    await session.commit()
    await session.refresh(report)

    logger.info(
        "%s generated for inmate #%d by %s", report.title, inmate_id, user.username
    )
    return report


async def list_reports(session: AsyncSession) -> list[models.Report]:
    """Return archived reports, newest first."""
    result = await session.execute(
        select(models.Report).order_by(models.Report.created_at.desc())
    )
    return list(result.scalars().all())
