"""Job schemas for API requests and responses."""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.utils.constants import ExperienceLevel, JobStatus, JobType


class UserBrief(BaseModel):
    """Public summary of a user (company or applicant)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[List[str]] = None


class JobPayload(BaseModel):
    """Fields shared by create and update payloads."""

    salary: Optional[str] = Field(None, max_length=100, description="Legacy free-text salary, e.g. '50k - 80k'")
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    application_deadline: Optional[datetime] = None

    @field_validator("application_deadline")
    @classmethod
    def deadline_as_naive_utc(cls, v):
        """Store deadlines as naive UTC like every other timestamp column."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_salary_range(self):
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min must not be greater than salary_max")
        return self


class JobCreate(JobPayload):
    """Payload for posting a job."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    requirements: List[str] = Field(default_factory=list)
    location: str = Field(..., min_length=1, max_length=255)
    type: JobType
    status: JobStatus = JobStatus.PUBLISHED
    experience_level: Optional[ExperienceLevel] = None

    salary_currency: str = "USD"
    salary_period: str = "YEARLY"

    remote: bool = False
    hybrid: bool = False
    on_site: bool = True

    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)

    featured: bool = False
    urgent: bool = False


class JobUpdate(JobPayload):
    """Partial update; only fields that are sent are changed."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[List[str]] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None
    remote: Optional[bool] = None
    hybrid: Optional[bool] = None
    on_site: Optional[bool] = None
    required_skills: Optional[List[str]] = None
    preferred_skills: Optional[List[str]] = None
    technologies: Optional[List[str]] = None
    featured: Optional[bool] = None
    urgent: Optional[bool] = None


class JobFilters(BaseModel):
    """Query filters for the public job board."""

    type: Optional[JobType] = None
    remote: Optional[bool] = None
    experience_level: Optional[ExperienceLevel] = None
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    featured: Optional[bool] = None
    search: Optional[str] = None


class ApplicationBrief(BaseModel):
    """The requesting user's own application, shown on job cards."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    applied_at: datetime
    skills_match_score: Optional[float] = None


class JobResponse(BaseModel):
    """Job with owner summary and per-viewer annotations."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    requirements: List[str] = Field(default_factory=list)
    location: str
    type: str
    status: str
    experience_level: Optional[str] = None
    salary: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None
    remote: bool
    hybrid: bool
    on_site: bool
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    application_deadline: Optional[datetime] = None
    posted_at: datetime
    featured: bool
    urgent: bool
    views: int
    company_id: UUID
    company: Optional[UserBrief] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    applicants_count: int = 0
    bookmarks_count: int = 0
    is_bookmarked: bool = False
    user_application: Optional[ApplicationBrief] = None


class JobSummary(BaseModel):
    """Compact job reference embedded in application and bookmark views."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str
    type: str
    status: str
    company_id: UUID
    application_deadline: Optional[datetime] = None
    company: Optional[UserBrief] = None


class DailyCount(BaseModel):
    date: date
    count: int


class JobAnalytics(BaseModel):
    """Owner-facing statistics for one job."""

    job_id: UUID
    title: str
    total_applications: int
    total_bookmarks: int
    views: int
    status_breakdown: Dict[str, int]
    average_skills_match: float
    applications_over_time: List[DailyCount]
    conversion_rate: float
