"""Job application and bookmark schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.job import JobResponse, JobSummary, UserBrief
from app.utils.constants import ApplicationStatus


class ApplyJobRequest(BaseModel):
    """Body of POST /jobs/{id}/apply."""

    cover_letter: Optional[str] = Field(None, max_length=5000)
    resume_url: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = Field(None, max_length=500)
    expected_salary: Optional[str] = Field(None, max_length=100)
    availability: Optional[str] = Field(None, max_length=100)
    relocatable: bool = False


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    recruiter_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class BulkApplicationUpdate(BaseModel):
    application_ids: List[UUID] = Field(..., min_length=1)
    status: ApplicationStatus
    notes: Optional[str] = None


class BulkUpdateError(BaseModel):
    application_id: UUID
    error: str


class BulkUpdateResult(BaseModel):
    updated: int
    errors: List[BulkUpdateError] = Field(default_factory=list)


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    applicant_id: UUID
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    expected_salary: Optional[str] = None
    availability: Optional[str] = None
    relocatable: bool
    skills_match_score: Optional[float] = None
    status: str
    recruiter_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    rating: Optional[int] = None
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    shortlisted_at: Optional[datetime] = None
    interviewed_at: Optional[datetime] = None
    offered_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None


class ApplicationWithApplicant(ApplicationResponse):
    applicant: UserBrief


class ApplicationWithJob(ApplicationResponse):
    job: JobSummary


class CompanyApplicationResponse(ApplicationResponse):
    applicant: UserBrief
    job: JobSummary


class JobDetailResponse(JobResponse):
    """Single job view; applications are filled only for the posting company."""

    applications: List[ApplicationWithApplicant] = Field(default_factory=list)


class BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    user_id: UUID
    created_at: datetime
    job: Optional[JobSummary] = None


class ResumeUploadResponse(BaseModel):
    filename: str
    url: str
    size: int
