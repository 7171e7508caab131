"""Job, application and bookmark models."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import ApplicationStatus, JobStatus


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    title = Column(String(500), nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(JSON, default=list)
    location = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, index=True)  # JobType
    status = Column(String(20), nullable=False, default=JobStatus.PUBLISHED.value, index=True)
    experience_level = Column(String(20), nullable=True)  # ExperienceLevel

    # Salary: legacy free text plus structured range
    salary = Column(String(100), nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String(10), default="USD")
    salary_period = Column(String(20), default="YEARLY")

    # Work arrangement
    remote = Column(Boolean, default=False, nullable=False)
    hybrid = Column(Boolean, default=False, nullable=False)
    on_site = Column(Boolean, default=True, nullable=False)

    # Skills
    required_skills = Column(JSON, default=list)
    preferred_skills = Column(JSON, default=list)
    technologies = Column(JSON, default=list)

    # Lifecycle
    application_deadline = Column(DateTime, nullable=True)
    posted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    urgent = Column(Boolean, default=False, nullable=False)

    # Stats
    views = Column(Integer, default=0, nullable=False)

    # Owning COMPANY user
    company_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    company = relationship("User", lazy="raise")

    def __repr__(self):
        return f"<Job {self.title} ({self.status})>"


class JobApplication(Base):
    """One applicant's submission to one job."""

    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="unique_job_applicant"),
    )

    job_id = Column(
        Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    applicant_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Submission
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    expected_salary = Column(String(100), nullable=True)
    availability = Column(String(100), nullable=True)
    relocatable = Column(Boolean, default=False, nullable=False)

    # Matching
    skills_match_score = Column(Float, nullable=True)  # 0 - 100

    # Status tracking
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    recruiter_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1 - 5

    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)
    shortlisted_at = Column(DateTime, nullable=True)
    interviewed_at = Column(DateTime, nullable=True)
    offered_at = Column(DateTime, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    # Relationships
    job = relationship("Job", lazy="raise")
    applicant = relationship("User", lazy="raise")

    def __repr__(self):
        return f"<JobApplication {self.applicant_id} -> {self.job_id} ({self.status})>"


class JobBookmark(Base):
    """A user's saved job."""

    __tablename__ = "job_bookmarks"
    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="unique_job_bookmark"),
    )

    job_id = Column(
        Uuid(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    job = relationship("Job", lazy="raise")

    def __repr__(self):
        return f"<JobBookmark {self.user_id} -> {self.job_id}>"
