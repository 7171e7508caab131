"""Admin schemas for moderation, listings and dashboard metrics."""
from datetime import datetime
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.application import ApplicationWithApplicant
from app.schemas.job import UserBrief
from app.utils.constants import ApplicationStatus, EventStatus, JobStatus, UserRole


# Listing
class ListParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None


class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    avatar: Optional[str] = None
    role: str
    company: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[List[str]] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class AdminUserDetail(AdminUserResponse):
    projects_count: int = 0
    jobs_count: int = 0
    events_count: int = 0
    applications_count: int = 0


class AdminProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    technologies: Optional[List[str]] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image_url: Optional[str] = None
    status: str
    author_id: UUID
    author: Optional[UserBrief] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class AdminJobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    location: str
    type: str
    status: str
    featured: bool
    urgent: bool
    views: int
    posted_at: datetime
    application_deadline: Optional[datetime] = None
    company_id: UUID
    company: Optional[UserBrief] = None
    created_at: datetime


class AdminEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    date: datetime
    location: str
    type: str
    status: str
    max_attendees: Optional[int] = None
    organizer_id: UUID
    organizer: Optional[UserBrief] = None
    created_at: datetime


class PaginatedUsers(BaseModel):
    items: List[AdminUserResponse]
    total: int
    page: int
    limit: int
    pages: int


class PaginatedProjects(BaseModel):
    items: List[AdminProjectResponse]
    total: int
    page: int
    limit: int
    pages: int


class PaginatedJobs(BaseModel):
    items: List[AdminJobResponse]
    total: int
    page: int
    limit: int
    pages: int


class PaginatedEvents(BaseModel):
    items: List[AdminEventResponse]
    total: int
    page: int
    limit: int
    pages: int


class PaginatedApplications(BaseModel):
    items: List[ApplicationWithApplicant]
    total: int
    page: int
    limit: int
    pages: int


# Moderation
class UserRoleUpdate(BaseModel):
    role: UserRole


class UserStatusUpdate(BaseModel):
    is_active: bool


class ApproveRequest(BaseModel):
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class JobStatusUpdate(BaseModel):
    status: JobStatus


class EventStatusUpdate(BaseModel):
    status: EventStatus


class AdminApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class BulkApproveRequest(BaseModel):
    type: Literal["projects", "jobs", "events"]
    ids: List[UUID] = Field(..., min_length=1)


class BulkDeleteRequest(BaseModel):
    type: Literal["projects", "jobs", "events", "users"]
    ids: List[UUID] = Field(..., min_length=1)


class BulkApproveResult(BaseModel):
    type: str
    approved: int


class BulkDeleteResult(BaseModel):
    type: str
    deleted: int


# Metrics
class UserMetrics(BaseModel):
    total: int
    active: int
    by_role: Dict[str, int]
    new_this_week: int
    new_this_month: int


class ProjectMetrics(BaseModel):
    total: int
    by_status: Dict[str, int]
    new_this_week: int


class JobMetrics(BaseModel):
    total: int
    by_status: Dict[str, int]
    applications: int
    new_this_week: int


class EventMetrics(BaseModel):
    total: int
    by_status: Dict[str, int]
    upcoming: int
    new_this_week: int


class DashboardMetrics(BaseModel):
    users: UserMetrics
    projects: ProjectMetrics
    jobs: JobMetrics
    events: EventMetrics
    generated_at: datetime


class ContentAnalytics(BaseModel):
    projects: int
    jobs: int
    events: int


class UserAnalytics(BaseModel):
    total_users: int
    users_by_role: Dict[str, int]
    recent_users: List[AdminUserResponse]


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    action: str
    item_title: str
    item_id: Optional[str] = None
    created_at: datetime


class SystemHealth(BaseModel):
    status: str
    database: bool
    cache: Dict
    timestamp: datetime
