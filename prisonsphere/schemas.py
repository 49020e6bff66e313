"""PrisonSphere pydantic schemas."""

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class GenderEnum(str, Enum):
    """Enumeration for inmate genders."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class InmateStatusEnum(str, Enum):
    """Enumeration for inmate lifecycle states."""

    INCARCERATED = "Incarcerated"
    RELEASED = "Released"
    PAROLE = "Parole"


class ParoleStatusEnum(str, Enum):
    """Enumeration for parole application states."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class EnrollmentStatusEnum(str, Enum):
    """Enumeration for work program enrollment states."""

    ACTIVE = "Active"
    COMPLETED = "Completed"


class ActivityTypeEnum(str, Enum):
    """Enumeration for rehabilitation activity types."""

    COUNSELING = "Counseling"
    EDUCATION = "Education"
    CONFLICT = "Conflict"
    RECREATION = "Recreation"
    HEALTH_SESSION = "Health Session"


class RoleEnum(str, Enum):
    """Enumeration for staff roles."""

    WARDEN = "warden"
    ADMIN = "admin"


class CamelModel(BaseModel):
    """Base schema exchanging camelCase keys with clients."""

    class Config:  # pylint: disable=too-few-public-methods
        """Pydantic configuration for aliases and ORM mode."""

        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True


class InDB(CamelModel):
    """Fields shared by every stored record."""

    id: int
    created_at: datetime.datetime
    updated_at: datetime.datetime


# Auth


class LoginRequest(CamelModel):
    """Credentials submitted to the login endpoint."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserInDB(CamelModel):
    """Schema for a user as exposed by the API."""

    id: int
    username: str
    role: RoleEnum


class LoginResponse(CamelModel):
    """Schema returned on successful login."""

    message: str
    token: str
    role: RoleEnum


class AuthStatus(CamelModel):
    """Schema returned by the session status check."""

    message: str
    user: UserInDB


# Inmates


class InmateBase(CamelModel):
    """Base schema for Inmate model."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    date_of_birth: datetime.date
    gender: GenderEnum
    admission_date: datetime.date
    sentence_duration: int = Field(gt=0)
    crime_details: str = Field(min_length=1)
    assigned_cell: str = Field(min_length=1)
    profile_image: str = ""


class InmateCreate(InmateBase):
    """Schema for registering a new Inmate."""


class InmateUpdate(CamelModel):
    """Schema for updating an existing Inmate."""

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    date_of_birth: Optional[datetime.date] = None
    gender: Optional[GenderEnum] = None
    admission_date: Optional[datetime.date] = None
    sentence_duration: Optional[int] = Field(default=None, gt=0)
    crime_details: Optional[str] = None
    assigned_cell: Optional[str] = None
    profile_image: Optional[str] = None
    status: Optional[InmateStatusEnum] = None


class Inmate(InmateBase, InDB):
    """Schema for Inmate records as stored in the database."""

    inmate_code: str = Field(alias="inmateID")
    status: InmateStatusEnum
    release_date: datetime.date


class InmateSummary(CamelModel):
    """Compact inmate reference embedded in related records."""

    id: int
    inmate_code: str = Field(alias="inmateID")
    first_name: str
    last_name: str
    status: InmateStatusEnum
    profile_image: str = ""


class InmateRegistered(CamelModel):
    """Schema returned after registering an inmate."""

    message: str
    inmate: Inmate
    next_inmate_id: str = Field(alias="nextInmateID")


class InmateEnvelope(CamelModel):
    """Single inmate with a status message."""

    message: str
    inmate: Inmate


class InmatePage(CamelModel):
    """Paginated list of inmates."""

    inmates: list[Inmate]
    total_inmates: int
    total_pages: int
    current_page: int


class NextInmateId(CamelModel):
    """Schema for the identifier preview."""

    next_inmate_id: str = Field(alias="nextInmateID")


# Visitors


class VisitorBase(CamelModel):
    """Base schema for Visitor model."""

    visitor_name: str = Field(min_length=1)
    relationship_to_inmate: str = Field(min_length=1)
    contact_number: str = Field(min_length=1)
    email: Optional[str] = None
    visit_timestamp: Optional[datetime.datetime] = None
    duration_minutes: int = Field(gt=0)
    purpose_of_visit: str = Field(min_length=1)
    staff_notes: Optional[str] = None


class VisitorCreate(VisitorBase):
    """Schema for logging a new visit."""


class VisitorUpdate(CamelModel):
    """Schema for updating an existing visit."""

    visitor_name: Optional[str] = Field(default=None, min_length=1)
    relationship_to_inmate: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    visit_timestamp: Optional[datetime.datetime] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    purpose_of_visit: Optional[str] = None
    staff_notes: Optional[str] = None


class Visitor(VisitorBase, InDB):
    """Schema for Visitor records as stored in the database."""

    inmate_id: int
    visit_timestamp: datetime.datetime
    inmate: InmateSummary


class VisitorEnvelope(CamelModel):
    """Single visit with a status message."""

    message: str
    visitor: Visitor


# Paroles


class ParoleCreate(CamelModel):
    """Schema for submitting a parole application."""

    inmate_id: int = Field(alias="inmate")
    hearing_date: datetime.datetime


class ParoleDecision(CamelModel):
    """Schema for deciding a parole application."""

    status: str
    decision_notes: Optional[str] = None


class Parole(InDB):
    """Schema for Parole records as stored in the database."""

    inmate_id: int
    application_date: datetime.datetime
    hearing_date: datetime.datetime
    status: ParoleStatusEnum
    decision_notes: Optional[str] = None
    inmate: InmateSummary


class ParoleList(CamelModel):
    """List envelope for parole applications."""

    paroles: list[Parole]
    total_paroles: int
    total_pages: int
    current_page: int


class ParoleEnvelope(CamelModel):
    """Single parole application with a status message."""

    message: str
    parole: Parole


# Work programs


class WorkProgram(InDB):
    """Schema for catalog entries."""

    name: str
    description: str


class EnrollmentCreate(CamelModel):
    """Schema for assigning an inmate to a work program."""

    inmate_id: int
    work_program_id: int
    start_date: datetime.date
    end_date: datetime.date


class Enrollment(InDB):
    """Schema for enrollments as stored in the database."""

    inmate_id: int
    work_program_id: int
    start_date: datetime.date
    end_date: datetime.date
    completion_date: Optional[datetime.datetime] = None
    status: EnrollmentStatusEnum
    performance_rating: Optional[float] = None
    inmate: InmateSummary
    work_program: WorkProgram


class EnrollmentEnvelope(CamelModel):
    """Single enrollment with a status message."""

    success: bool = True
    message: str
    enrollment: Enrollment


class EnrollmentPage(CamelModel):
    """Paginated list of enrollments."""

    enrollments: list[Enrollment]
    total_enrollments: int
    total_pages: int
    current_page: int


# Behavior logs


class BehaviorLogCreate(CamelModel):
    """Schema for submitting behavior ratings."""

    inmate_id: int
    work_ethic: int
    cooperation: int
    incident_reports: int = 0
    social_skills: int


class BehaviorLog(InDB):
    """Schema for behavior logs as stored in the database."""

    inmate_id: int
    enrollment_id: int
    work_ethic: int
    cooperation: int
    incident_reports: int
    social_skills: int
    incident_label: str


class BehaviorLogEnvelope(CamelModel):
    """Single behavior log with a status message."""

    message: str
    behavior_log: BehaviorLog


class LatestBehavior(CamelModel):
    """Latest behavior ratings for an inmate, zeroed when none exist."""

    work_ethic: int = 0
    cooperation: int = 0
    incident_reports: int = 0
    social_skills: int = 0
    incident_label: str = "No Incident"
    updated_at: Optional[datetime.datetime] = None
    time_ago: str = "No updates yet"


# Activity logs


class ActivityLogCreate(CamelModel):
    """Schema for recording an activity."""

    inmate_id: int
    activity_type: ActivityTypeEnum
    description: str = Field(min_length=1)


class ActivityLog(InDB):
    """Schema for activity logs as stored in the database."""

    inmate_id: int
    activity_type: ActivityTypeEnum
    description: str
    log_date: datetime.datetime


class ActivityLogEnvelope(CamelModel):
    """Single activity log with a status message."""

    message: str
    log: ActivityLog


class ActivityLogPage(CamelModel):
    """Paginated list of activity logs."""

    logs: list[ActivityLog]
    total_logs: int
    total_pages: int
    current_page: int


# Dashboard


class RecentActivity(CamelModel):
    """Rendered entry of the recent activity feed."""

    activity_type: str
    count: int
    message: str
    time_label: str
    last_updated: datetime.datetime


class DashboardStats(CamelModel):
    """Headline counts shown on the dashboard."""

    total_inmates: int
    in_rehabilitation: int
    upcoming_parole: int
    recent_reports: int


class MonthlyInmatePoint(CamelModel):
    """Admissions and releases for one month."""

    month: str
    admitted: int
    released: int


class InmateDistribution(CamelModel):
    """Counts of inmates per status."""

    incarcerated_count: int
    released_count: int
    parole_count: int


class DashboardAnalytics(CamelModel):
    """Chart data shown on the dashboard."""

    monthly_inmate_stats: list[MonthlyInmatePoint]
    inmate_distribution: InmateDistribution


# Reports


class RehabilitationEvaluation(CamelModel):
    """Derived rehabilitation metrics for an inmate."""

    work_ethic_avg: float
    cooperation_avg: float
    social_skills_avg: float
    incident_count: int
    score: float
    status: str


class Report(InDB):
    """Schema for archived reports."""

    title: str
    type: str
    inmate_id: int
    details: dict[str, Any]
    created_by_id: int


class ReportEnvelope(CamelModel):
    """Single report with a status message."""

    message: str
    report: Report


class Message(CamelModel):
    """Plain message response."""

    message: str
