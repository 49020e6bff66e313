"""Tests for work program enrollment and behavior ratings."""

import datetime

import pytest
from sqlalchemy.future import select

from prisonsphere import conduct, enrollment, models, registry, sweeps
from prisonsphere.errors import DomainError, NotFound

from factories import inmate_fields

TODAY = datetime.date.today()


async def enroll(session, inmate, program, start=None, end=None):
    return await enrollment.enroll(
        session,
        inmate.id,
        program.id,
        start or TODAY,
        end or TODAY + datetime.timedelta(days=90),
    )


async def test_seed_is_idempotent(session):
    assert await enrollment.seed_programs(session) == 8
    assert await enrollment.seed_programs(session) == 0
    assert len(await enrollment.list_programs(session)) == 8


async def test_enroll(session, inmate, programs):
    item = await enroll(session, inmate, programs[0])

    assert item.status == "Active"
    assert item.work_program.name == programs[0].name
    assert (await enrollment.active_enrollment(session, inmate.id)).id == item.id


async def test_enroll_requires_known_program(session, inmate, programs):
    with pytest.raises(DomainError, match="Invalid work program selected."):
        await enrollment.enroll(
            session, inmate.id, 999, TODAY, TODAY + datetime.timedelta(days=1)
        )


async def test_enroll_requires_end_after_start(session, inmate, programs):
    with pytest.raises(DomainError, match="End date"):
        await enroll(session, inmate, programs[0], end=TODAY)


async def test_enroll_missing_inmate(session, programs):
    with pytest.raises(NotFound):
        await enrollment.enroll(
            session, 999, programs[0].id, TODAY, TODAY + datetime.timedelta(days=1)
        )


async def test_enroll_requires_incarceration(session, inmate, programs):
    await registry.release_inmate(session, inmate.id)
    with pytest.raises(DomainError, match="Only incarcerated inmates"):
        await enroll(session, inmate, programs[0])


async def test_single_active_enrollment(session, inmate, programs):
    await enroll(session, inmate, programs[0])
    with pytest.raises(DomainError, match="already enrolled"):
        await enroll(session, inmate, programs[1])


async def test_behavior_requires_active_enrollment(session, inmate):
    with pytest.raises(DomainError, match="not enrolled in an active work program"):
        await conduct.record_behavior(session, inmate.id, 4, 4, 0, 4)


@pytest.mark.parametrize(
    "ratings,message",
    [
        ((0, 4, 0, 4), "Ratings must be between 1 and 5."),
        ((4, 6, 0, 4), "Ratings must be between 1 and 5."),
        ((4, 4, 11, 4), "Incident severity must be between 0 and 10."),
        ((4, 4, -1, 4), "Incident severity must be between 0 and 10."),
    ],
)
async def test_behavior_rating_ranges(session, inmate, programs, ratings, message):
    await enroll(session, inmate, programs[0])
    with pytest.raises(DomainError, match=message):
        await conduct.record_behavior(session, inmate.id, *ratings)


async def test_behavior_log_is_upserted(session, inmate, programs):
    await enroll(session, inmate, programs[0])

    first, created = await conduct.record_behavior(session, inmate.id, 3, 3, 1, 3)
    assert created
    second, created = await conduct.record_behavior(session, inmate.id, 5, 4, 0, 5)
    assert not created

    assert second.id == first.id
    logs = await conduct.behavior_logs(session, inmate.id)
    assert len(logs) == 1
    assert (logs[0].work_ethic, logs[0].incident_label) == (5, "No Incident")


@pytest.mark.parametrize(
    "severity,label",
    [(0, "No Incident"), (3, "Minor Incident"), (6, "Moderate Incident"), (7, "Critical Incident")],
)
async def test_incident_labels(session, inmate, programs, severity, label):
    await enroll(session, inmate, programs[0])
    log, _ = await conduct.record_behavior(session, inmate.id, 3, 3, severity, 3)
    assert log.incident_label == label


def test_updated_ago():
    now = datetime.datetime(2025, 5, 10, 9, 0)
    assert conduct.updated_ago(datetime.datetime(2025, 5, 10, 8, 0), now) == (
        "Updated today"
    )
    assert conduct.updated_ago(datetime.datetime(2025, 5, 9, 23, 0), now) == (
        "Updated 1 day ago"
    )
    assert conduct.updated_ago(datetime.datetime(2025, 5, 1, 12, 0), now) == (
        "Updated 9 days ago"
    )


async def test_complete_expired_enrollments_freezes_rating(session, inmate, programs):
    item = await enroll(
        session,
        inmate,
        programs[0],
        start=TODAY - datetime.timedelta(days=60),
        end=TODAY - datetime.timedelta(days=1),
    )
    await conduct.record_behavior(session, inmate.id, 4, 5, 1, 3)

    completed = await enrollment.complete_expired_enrollments(session)

    assert completed == 1
    await session.refresh(item)
    assert item.status == "Completed"
    assert item.performance_rating == 4.0
    assert item.completion_date is not None

    latest = await enrollment.latest_completed(session, inmate.id)
    assert latest.id == item.id

    # The rating stays frozen even if logs change afterwards
    log = (await enrollment.logs_for_enrollment(session, item.id))[0]
    log.work_ethic = 1
    await session.commit()
    assert enrollment.current_rating(item, [log]) == 4.0


async def test_complete_leaves_running_enrollments(session, inmate, programs):
    await enroll(
        session,
        inmate,
        programs[0],
        start=TODAY - datetime.timedelta(days=5),
        end=TODAY,
    )

    assert await enrollment.complete_expired_enrollments(session) == 0
    assert await enrollment.active_enrollment(session, inmate.id) is not None


async def test_completion_without_logs_uses_default_rating(session, inmate, programs):
    item = await enroll(
        session,
        inmate,
        programs[0],
        start=TODAY - datetime.timedelta(days=10),
        end=TODAY - datetime.timedelta(days=2),
    )
    await enrollment.complete_expired_enrollments(session)
    await session.refresh(item)
    assert item.performance_rating == 3.0


async def test_inmate_can_reenroll_after_completion(session, inmate, programs):
    await enroll(
        session,
        inmate,
        programs[0],
        start=TODAY - datetime.timedelta(days=10),
        end=TODAY - datetime.timedelta(days=2),
    )
    await enrollment.complete_expired_enrollments(session)

    second = await enroll(session, inmate, programs[1])
    assert second.status == "Active"


async def test_sweep_runs_in_its_own_session(session, inmate, programs):
    await enroll(
        session,
        inmate,
        programs[0],
        start=TODAY - datetime.timedelta(days=10),
        end=TODAY - datetime.timedelta(days=2),
    )

    count = await sweeps.run_once(
        "complete-enrollments", enrollment.complete_expired_enrollments
    )

    assert count == 1
    rows = (
        await session.execute(
            select(models.RecentActivityLog).where(
                models.RecentActivityLog.activity_type == "WORK_PROGRAM_COMPLETED"
            )
        )
    ).scalars().all()
    assert len(rows) == 1


def test_sweeper_reads_config():
    class FakeConfig:
        def getfloat(self, section, option, fallback=None):
            return 0.5

        def getboolean(self, section, option, fallback=None):
            return False

    sweeper = sweeps.Sweeper.from_config(FakeConfig())
    assert sweeper.interval == 1800
    assert not sweeper.enabled
    assert set(sweeper.jobs) == {"complete-enrollments", "purge-activity-feed"}


async def test_disabled_sweeper_starts_nothing():
    sweeper = sweeps.Sweeper(interval=60, enabled=False)
    sweeper.start()
    assert sweeper.tasks == []
    await sweeper.stop()


async def test_activity_logs(session, inmate):
    await conduct.record_activity(session, inmate.id, "Counseling", "Weekly session")
    await conduct.record_activity(session, inmate.id, "Education", "  GED class  ")

    logs, total = await conduct.activity_logs(session, inmate.id, page=1, limit=1)

    assert total == 2
    assert len(logs) == 1
    assert logs[0].description == "GED class"


async def test_activity_requires_description(session, inmate):
    with pytest.raises(DomainError, match="All fields are required."):
        await conduct.record_activity(session, inmate.id, "Counseling", "   ")


async def test_activity_for_other_inmates_is_filtered(session, inmate):
    other = await registry.register_inmate(session, inmate_fields(first_name="Jane"))
    await conduct.record_activity(session, inmate.id, "Recreation", "Football")
    await conduct.record_activity(session, other.id, "Conflict", "Argument")

    logs, total = await conduct.activity_logs(session, other.id)
    assert total == 1
    assert logs[0].activity_type == "Conflict"
