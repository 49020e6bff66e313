"""PrisonSphere sqlalchemy models."""

import calendar
import datetime
from typing import Any, Optional

from sqlalchemy import Enum  # type: ignore
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.ext.declarative import declared_attr
from sqlalchemy.orm import mapped_column  # pylint: disable=no-name-in-module
from sqlalchemy.orm import Mapped, relationship

from .db import Base

Role = Enum("warden", "admin", name="role_enum")
Gender = Enum("Male", "Female", "Other", name="gender_enum")
InmateStatus = Enum("Incarcerated", "Released", "Parole", name="inmate_status_enum")
ParoleStatus = Enum("Pending", "Approved", "Denied", name="parole_status_enum")
EnrollmentStatus = Enum("Active", "Completed", name="enrollment_status_enum")
ActivityType = Enum(
    "Counseling",
    "Education",
    "Conflict",
    "Recreation",
    "Health Session",
    name="activity_type_enum",
)
ReportType = Enum("Inmate Info", "Rehabilitation Status", name="report_type_enum")


def add_months(date: datetime.date, months: int) -> datetime.date:
    """Shift a date by whole months, clamping to the end of the target month."""
    month_index = date.month - 1 + months
    year = date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(date.day, calendar.monthrange(year, month)[1])
    return date.replace(year=year, month=month, day=day)


def to_naive_local(value: datetime.datetime) -> datetime.datetime:
    """Convert an aware datetime to naive local time, as stored."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class HasTimestamps:  # pylint: disable=too-few-public-methods
    """Mixin adding creation and modification timestamps."""

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.now
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.datetime.now,
        onupdate=datetime.datetime.now,
    )


class HasInmate:  # pylint: disable=too-few-public-methods
    """Mixin for models associated with an Inmate."""

    inmate_id: Mapped[int] = mapped_column(
        ForeignKey("inmates.id"), nullable=False, index=True
    )

    @declared_attr
    def inmate(cls) -> Mapped["Inmate"]:  # pylint: disable=no-self-argument
        """Declare the relationship to the Inmate model."""
        return relationship("Inmate", uselist=False, lazy="selectin")


class User(HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Staff account able to sign in to the API."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(Role, nullable=False, default="admin")


class Inmate(HasTimestamps, Base):  # pylint: disable=too-many-instance-attributes
    """Inmate sqlalchemy model."""

    __tablename__ = "inmates"

    __table_args__ = (
        CheckConstraint("sentence_duration > 0", name="sentence_duration_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Backs the INM### code; never reused after release.
    sequence: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    inmate_code: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    date_of_birth: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(Gender, nullable=False)
    admission_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    sentence_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    crime_details: Mapped[str] = mapped_column(Text, nullable=False)
    assigned_cell: Mapped[str] = mapped_column(String, nullable=False)
    profile_image: Mapped[str] = mapped_column(String, nullable=False, default="")

    status: Mapped[str] = mapped_column(
        InmateStatus, nullable=False, default="Incarcerated"
    )

    @property
    def release_date(self) -> datetime.date:
        """Return the expected release date from admission and sentence."""
        return add_months(self.admission_date, self.sentence_duration)


class Visitor(HasInmate, HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Sqlalchemy model for visits logged against an inmate."""

    __tablename__ = "visitors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    visitor_name: Mapped[str] = mapped_column(String, nullable=False)
    relationship_to_inmate: Mapped[str] = mapped_column(String, nullable=False)
    contact_number: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String)
    visit_timestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.now
    )
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    purpose_of_visit: Mapped[str] = mapped_column(String, nullable=False)
    staff_notes: Mapped[Optional[str]] = mapped_column(Text)


class Parole(HasInmate, HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Sqlalchemy model for parole applications."""

    __tablename__ = "paroles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    application_date: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.now
    )
    hearing_date: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(ParoleStatus, nullable=False, default="Pending")
    decision_notes: Mapped[Optional[str]] = mapped_column(Text)


class WorkProgram(HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Catalog entry for a work program."""

    __tablename__ = "work_programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class WorkProgramEnrollment(
    HasInmate, HasTimestamps, Base
):  # pylint: disable=too-few-public-methods
    """Sqlalchemy model for an inmate's assignment to a work program."""

    __tablename__ = "work_program_enrollments"

    __table_args__ = (
        Index(
            "ix_work_program_enrollments_one_active",
            "inmate_id",
            unique=True,
            sqlite_where=text("status = 'Active'"),
            postgresql_where=text("status = 'Active'"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    work_program_id: Mapped[int] = mapped_column(
        ForeignKey("work_programs.id"), nullable=False
    )
    work_program: Mapped[WorkProgram] = relationship(
        "WorkProgram", uselist=False, lazy="selectin"
    )

    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[Optional[datetime.datetime]] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(
        EnrollmentStatus, nullable=False, default="Active"
    )
    performance_rating: Mapped[Optional[float]] = mapped_column(Float)


class BehaviorLog(HasInmate, HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Rating snapshot for an inmate within one enrollment."""

    __tablename__ = "behavior_logs"

    __table_args__ = (
        UniqueConstraint("inmate_id", "enrollment_id"),
        CheckConstraint("work_ethic BETWEEN 1 AND 5", name="work_ethic_range"),
        CheckConstraint("cooperation BETWEEN 1 AND 5", name="cooperation_range"),
        CheckConstraint("social_skills BETWEEN 1 AND 5", name="social_skills_range"),
        CheckConstraint(
            "incident_reports BETWEEN 0 AND 10", name="incident_reports_range"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enrollment_id: Mapped[int] = mapped_column(
        ForeignKey("work_program_enrollments.id"), nullable=False
    )
    work_ethic: Mapped[int] = mapped_column(Integer, nullable=False)
    cooperation: Mapped[int] = mapped_column(Integer, nullable=False)
    incident_reports: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    social_skills: Mapped[int] = mapped_column(Integer, nullable=False)

    @property
    def incident_label(self) -> str:
        """Return the severity label of the incident score."""
        if self.incident_reports == 0:
            return "No Incident"
        if self.incident_reports <= 3:
            return "Minor Incident"
        if self.incident_reports <= 6:
            return "Moderate Incident"
        return "Critical Incident"


class ActivityLog(HasInmate, HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Append-only record of a rehabilitation activity."""

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    activity_type: Mapped[str] = mapped_column(ActivityType, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    log_date: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.now
    )


class RecentActivityLog(HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Count-coalesced dashboard feed entry."""

    __tablename__ = "recent_activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    activity_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    message: Mapped[str] = mapped_column(String, nullable=False)
    last_updated: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.now
    )


class Report(HasInmate, HasTimestamps, Base):  # pylint: disable=too-few-public-methods
    """Archived report snapshot."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(ReportType, nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_by: Mapped[User] = relationship("User", uselist=False, lazy="selectin")
