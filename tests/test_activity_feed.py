"""Tests for the count-coalescing activity feed."""

import datetime

import pytest
from sqlalchemy.future import select

from prisonsphere import activity, models


NOW = datetime.datetime(2025, 3, 10, 12, 0, 0)


class TestMessages:
    """Rendering of feed messages."""

    def test_singular_message(self):
        assert activity.message_for("INMATE_ADDED", 1) == (
            "1 inmate was added to the system"
        )

    def test_plural_message(self):
        assert activity.message_for("INMATE_ADDED", 3) == (
            "3 inmates were added to the system"
        )

    def test_parole_messages(self):
        assert activity.message_for("PAROLE_APPROVED", 2) == (
            "2 parole applications were approved"
        )
        assert activity.message_for("PAROLE_DENIED", 1) == (
            "1 parole application was denied"
        )

    def test_unknown_type_falls_back(self):
        assert activity.message_for("SOMETHING_ELSE", 1) == "1 activity performed"
        assert activity.message_for("SOMETHING_ELSE", 4) == "4 activities performed"

    @pytest.mark.parametrize(
        "minutes,label",
        [
            (0, "just now"),
            (3, "a few moments ago"),
            (12, "a few minutes ago"),
            (45, "45 minutes ago"),
            (150, "2 hour(s) ago"),
        ],
    )
    def test_time_labels(self, minutes, label):
        assert activity.time_label(minutes) == label


async def test_record_coalesces_within_an_hour(session):
    await activity.record(session, "INMATE_ADDED", now=NOW)
    await activity.record(
        session, "INMATE_ADDED", now=NOW + datetime.timedelta(minutes=30)
    )
    await session.commit()

    rows = (await session.execute(select(models.RecentActivityLog))).scalars().all()
    assert len(rows) == 1
    assert rows[0].count == 2
    assert rows[0].message == "2 inmates were added to the system"
    assert rows[0].last_updated == NOW + datetime.timedelta(minutes=30)


async def test_record_starts_new_entry_after_an_hour(session):
    await activity.record(session, "INMATE_ADDED", now=NOW)
    await activity.record(session, "INMATE_ADDED", now=NOW + datetime.timedelta(hours=2))
    await session.commit()

    rows = (await session.execute(select(models.RecentActivityLog))).scalars().all()
    assert sorted(row.count for row in rows) == [1, 1]


async def test_record_keeps_types_apart(session):
    await activity.record(session, "INMATE_ADDED", now=NOW)
    await activity.record(session, "VISITOR_LOGGED", now=NOW)
    await session.commit()

    rows = (await session.execute(select(models.RecentActivityLog))).scalars().all()
    assert {row.activity_type for row in rows} == {"INMATE_ADDED", "VISITOR_LOGGED"}


async def test_list_recent_orders_newest_first_and_hides_stale(session):
    await activity.record(session, "INMATE_ADDED", now=NOW - datetime.timedelta(hours=30))
    await activity.record(session, "PAROLE_SUBMITTED", now=NOW - datetime.timedelta(hours=3))
    await activity.record(session, "VISITOR_LOGGED", now=NOW - datetime.timedelta(minutes=10))
    await session.commit()

    entries = await activity.list_recent(session, now=NOW)

    assert [entry.activity_type for entry in entries] == [
        "VISITOR_LOGGED",
        "PAROLE_SUBMITTED",
    ]
    assert entries[0].time_label == "a few minutes ago"
    assert entries[0].message == (
        "1 visitor log was recorded for an inmate (a few minutes ago)"
    )
    assert entries[1].time_label == "3 hour(s) ago"


async def test_purge_removes_entries_older_than_a_day(session):
    await activity.record(session, "INMATE_ADDED", now=NOW - datetime.timedelta(hours=25))
    await activity.record(session, "INMATE_UPDATED", now=NOW - datetime.timedelta(hours=1))
    await session.commit()

    removed = await activity.purge(session, now=NOW)

    assert removed == 1
    rows = (await session.execute(select(models.RecentActivityLog))).scalars().all()
    assert [row.activity_type for row in rows] == ["INMATE_UPDATED"]
