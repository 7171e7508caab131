"""
Jobs domain service.

Owns job postings, applications (with skills-match scoring and the
recruiter status workflow), bookmarks and per-job analytics. Every method
runs inside the caller's session; the request-scoped ``get_db`` dependency
commits or rolls back the whole unit of work.
"""

from collections import Counter
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Dict, List, Optional

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from app.config import settings
from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.models.job import Job, JobApplication, JobBookmark
from app.models.user import User
from app.schemas.application import (
    ApplicationStatusUpdate,
    ApplicationWithApplicant,
    ApplyJobRequest,
    BulkApplicationUpdate,
    JobDetailResponse,
)
from app.schemas.job import (
    ApplicationBrief,
    JobAnalytics,
    JobCreate,
    JobFilters,
    JobResponse,
    JobUpdate,
)
from app.services.activity_service import ActivityService
from app.services.notification_service import NotificationService
from app.services.skills_matching import calculate_skills_match, normalize_skills
from app.utils.constants import (
    APPLICATION_STATUS_NOTIFICATIONS,
    APPLICATION_STATUS_TIMESTAMPS,
    DEFAULT_STATUS_NOTIFICATION,
    ApplicationStatus,
    JobStatus,
    NotificationPriority,
    NotificationType,
    UserRole,
)
from app.utils.helpers import parse_salary_range

logger = structlog.get_logger(__name__)

# Columns that may not be cleared through a partial update
NON_NULLABLE_JOB_FIELDS = {
    "title", "description", "location", "type", "status", "requirements",
    "remote", "hybrid", "on_site", "featured", "urgent",
    "required_skills", "preferred_skills", "technologies",
}


def _column_values(data: dict) -> dict:
    """Unwrap enum members to their stored string values."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


class JobService:
    """Business logic behind the /jobs endpoints."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)
        self.notifications = NotificationService(db)

    # ==================== Lookups ====================

    async def _get_job(self, job_id) -> Job:
        result = await self.db.execute(
            select(Job)
            .options(selectinload(Job.company))
            .where(Job.id == job_id)
            .execution_options(populate_existing=True)
        )
        job = result.scalar_one_or_none()
        if job is None:
            raise NotFoundError(f"Job with ID {job_id} not found")
        return job

    @staticmethod
    def _ensure_owner(job: Job, user_id, action: str) -> None:
        if job.company_id != user_id:
            raise ForbiddenError(f"You can only {action} your own job postings")

    async def _count_by_job(self, model, job_ids: List) -> Dict:
        """Grouped row counts per job for applications or bookmarks."""
        if not job_ids:
            return {}
        result = await self.db.execute(
            select(model.job_id, func.count(model.id))
            .where(model.job_id.in_(job_ids))
            .group_by(model.job_id)
        )
        return {job_id: count for job_id, count in result.all()}

    async def _annotate(self, jobs: List[Job], user_id=None) -> List[JobResponse]:
        """Attach counts and the viewer's application/bookmark state to each job."""
        job_ids = [job.id for job in jobs]
        applicants = await self._count_by_job(JobApplication, job_ids)
        bookmarks = await self._count_by_job(JobBookmark, job_ids)

        own_applications: Dict = {}
        own_bookmarks = set()
        if user_id is not None and job_ids:
            result = await self.db.execute(
                select(JobApplication).where(
                    JobApplication.applicant_id == user_id,
                    JobApplication.job_id.in_(job_ids),
                )
            )
            own_applications = {a.job_id: a for a in result.scalars().all()}

            result = await self.db.execute(
                select(JobBookmark.job_id).where(
                    JobBookmark.user_id == user_id,
                    JobBookmark.job_id.in_(job_ids),
                )
            )
            own_bookmarks = set(result.scalars().all())

        annotated = []
        for job in jobs:
            own = own_applications.get(job.id)
            annotated.append(
                JobResponse.model_validate(job).model_copy(
                    update={
                        "applicants_count": applicants.get(job.id, 0),
                        "bookmarks_count": bookmarks.get(job.id, 0),
                        "is_bookmarked": job.id in own_bookmarks,
                        "user_application": ApplicationBrief.model_validate(own) if own else None,
                    }
                )
            )
        return annotated

    # ==================== Jobs ====================

    async def list_jobs(self, filters: JobFilters, user_id=None) -> List[JobResponse]:
        """
        Published jobs matching the filters.

        Ordered featured first, then urgent, then newest. Skills are
        OR-matched case-insensitively against required, preferred and
        technology lists.
        """
        query = (
            select(Job)
            .join(Job.company)
            .options(contains_eager(Job.company))
            .where(Job.status == JobStatus.PUBLISHED.value)
        )

        if filters.type:
            query = query.where(Job.type == filters.type.value)
        if filters.remote is not None:
            query = query.where(Job.remote == filters.remote)
        if filters.experience_level:
            query = query.where(Job.experience_level == filters.experience_level.value)
        if filters.location:
            query = query.where(Job.location.ilike(f"%{filters.location}%"))
        if filters.featured is not None:
            query = query.where(Job.featured == filters.featured)
        if filters.salary_min is not None:
            query = query.where(Job.salary_max >= filters.salary_min)
        if filters.salary_max is not None:
            query = query.where(Job.salary_min <= filters.salary_max)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    Job.title.ilike(pattern),
                    Job.description.ilike(pattern),
                    User.company.ilike(pattern),
                    User.name.ilike(pattern),
                )
            )

        query = query.order_by(Job.featured.desc(), Job.urgent.desc(), Job.posted_at.desc())
        result = await self.db.execute(query)
        jobs = list(result.scalars().unique().all())

        wanted = normalize_skills(filters.skills)
        if wanted:
            jobs = [
                job for job in jobs
                if wanted & normalize_skills(
                    (job.required_skills or [])
                    + (job.preferred_skills or [])
                    + (job.technologies or [])
                )
            ]

        return await self._annotate(jobs, user_id)

    async def get_job(self, job_id, viewer_id=None) -> JobDetailResponse:
        """
        Full job detail.

        Applications, newest first, are included only for the posting
        company. Views are counted for anonymous viewers and anyone but
        the owner.
        """
        job = await self._get_job(job_id)
        is_owner = viewer_id is not None and job.company_id == viewer_id

        if not is_owner:
            await self.db.execute(
                update(Job)
                .where(Job.id == job.id)
                .values(views=Job.views + 1)
                .execution_options(synchronize_session=False)
            )
            await self.db.refresh(job, ["views"])

        applications = []
        if is_owner:
            result = await self.db.execute(
                select(JobApplication)
                .options(selectinload(JobApplication.applicant))
                .where(JobApplication.job_id == job.id)
                .order_by(JobApplication.applied_at.desc())
            )
            applications = list(result.scalars().all())

        [summary] = await self._annotate([job], viewer_id)
        return JobDetailResponse(
            **summary.model_dump(),
            applications=[ApplicationWithApplicant.model_validate(a) for a in applications],
        )

    async def create_job(self, job_in: JobCreate, company: User) -> JobResponse:
        values = _column_values(job_in.model_dump())
        if values["salary_min"] is None and values["salary_max"] is None and values["salary"]:
            values["salary_min"], values["salary_max"] = parse_salary_range(values["salary"])

        job = Job(company_id=company.id, **values)
        self.db.add(job)
        await self.db.flush()
        logger.info("job_created", job_id=str(job.id), company_id=str(company.id), title=job.title)

        await self.activities.log_job_posted(company.id, job.title, job.id)
        await self._notify_admins_of_job(job, company)

        job = await self._get_job(job.id)
        [response] = await self._annotate([job], company.id)
        return response

    async def _notify_admins_of_job(self, job: Job, company: User):
        """Best-effort LOW priority notice to every active admin."""
        result = await self.db.execute(
            select(User.id).where(User.role == UserRole.ADMIN.value, User.is_active.is_(True))
        )
        admin_ids = list(result.scalars().all())

        poster = company.company or company.name
        results = await self.notifications.notify_many(
            admin_ids,
            type=NotificationType.JOB_POSTED,
            title="New job posted",
            message=f"{poster} posted a new job: {job.title}",
            item_id=job.id,
            item_type="job",
            priority=NotificationPriority.LOW,
        )

        failed = [r.recipient_id for r in results if not r.delivered]
        if failed:
            logger.warning("admin_notifications_incomplete", job_id=str(job.id), failed=failed)
        return results

    async def update_job(self, job_id, job_in: JobUpdate, user_id) -> JobResponse:
        job = await self._get_job(job_id)
        self._ensure_owner(job, user_id, "update")

        changes = job_in.model_dump(exclude_unset=True)
        if (
            changes.get("salary")
            and "salary_min" not in changes
            and "salary_max" not in changes
        ):
            changes["salary_min"], changes["salary_max"] = parse_salary_range(changes["salary"])

        for field, value in _column_values(changes).items():
            if value is None and field in NON_NULLABLE_JOB_FIELDS:
                continue
            setattr(job, field, value)

        await self.db.flush()
        logger.info("job_updated", job_id=str(job.id), fields=sorted(changes))

        [response] = await self._annotate([job], user_id)
        return response

    async def delete_job(self, job_id, user_id) -> None:
        """Delete an owned job together with its applications and bookmarks."""
        job = await self._get_job(job_id)
        self._ensure_owner(job, user_id, "delete")
        await self.remove_job_rows(job.id)
        logger.info("job_deleted", job_id=str(job_id), company_id=str(user_id))

    async def remove_job_rows(self, job_id) -> None:
        """Delete dependents first so no foreign key is left dangling."""
        await self.db.execute(delete(JobApplication).where(JobApplication.job_id == job_id))
        await self.db.execute(delete(JobBookmark).where(JobBookmark.job_id == job_id))
        await self.db.execute(delete(Job).where(Job.id == job_id))

    # ==================== Applications ====================

    async def apply_for_job(self, job_id, applicant_id, application_in: ApplyJobRequest) -> JobApplication:
        """
        Submit an application.

        Checked in order: job exists, job is published, deadline not passed,
        no earlier application by the same user.
        """
        job = await self._get_job(job_id)

        if job.status != JobStatus.PUBLISHED.value:
            raise BadRequestError("This job is not accepting applications")

        if job.application_deadline and job.application_deadline < datetime.utcnow():
            raise BadRequestError("The application deadline for this job has passed")

        existing = await self.db.execute(
            select(JobApplication.id).where(
                JobApplication.job_id == job.id,
                JobApplication.applicant_id == applicant_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("You have already applied for this job")

        applicant = await self.db.get(User, applicant_id)
        score = calculate_skills_match(
            applicant.skills if applicant else [],
            job.required_skills,
            job.preferred_skills,
        )

        application = JobApplication(
            job=job,
            applicant_id=applicant_id,
            status=ApplicationStatus.PENDING.value,
            skills_match_score=score,
            **application_in.model_dump(),
        )
        try:
            async with self.db.begin_nested():
                self.db.add(application)
        except IntegrityError:
            # Lost a race with a concurrent submission
            raise ConflictError("You have already applied for this job")

        logger.info(
            "application_submitted",
            application_id=str(application.id),
            job_id=str(job.id),
            applicant_id=str(applicant_id),
            skills_match_score=score,
        )

        await self.activities.log_job_application(applicant_id, job.title, job.id)

        await self.notifications.create_notification(
            user_id=applicant_id,
            type=NotificationType.JOB_APPLICATION,
            title="Application submitted",
            message=f"Your application for {job.title} has been submitted successfully.",
            item_id=job.id,
            item_type="job",
            priority=NotificationPriority.MEDIUM,
        )

        applicant_name = applicant.name if applicant else "A candidate"
        match_note = f" ({round(score)}% skills match)" if score is not None else ""
        await self.notifications.create_notification(
            user_id=job.company_id,
            type=NotificationType.JOB_APPLICATION,
            title="New application received",
            message=f"{applicant_name} applied for {job.title}{match_note}",
            item_id=application.id,
            item_type="application",
            priority=NotificationPriority.HIGH,
            extra_data={"job_id": str(job.id), "skills_match_score": score},
        )

        return application

    async def get_application(self, application_id) -> JobApplication:
        result = await self.db.execute(
            select(JobApplication)
            .options(selectinload(JobApplication.job))
            .where(JobApplication.id == application_id)
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise NotFoundError(f"Application with ID {application_id} not found")
        return application

    async def set_application_status(
        self,
        application: JobApplication,
        job: Job,
        status: ApplicationStatus,
        recruiter_notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        rating: Optional[int] = None,
    ) -> None:
        """Assign a status, stamp its timestamp column and notify the applicant."""
        # Any status may follow any other; only the timestamp and notice differ
        status = ApplicationStatus(status)
        application.status = status.value
        if recruiter_notes is not None:
            application.recruiter_notes = recruiter_notes
        if rejection_reason is not None:
            application.rejection_reason = rejection_reason
        if rating is not None:
            application.rating = rating

        stamp_field = APPLICATION_STATUS_TIMESTAMPS.get(status)
        if stamp_field:
            setattr(application, stamp_field, datetime.utcnow())
        await self.db.flush()

        title, template, priority = APPLICATION_STATUS_NOTIFICATIONS.get(
            status, DEFAULT_STATUS_NOTIFICATION
        )
        await self.notifications.create_notification(
            user_id=application.applicant_id,
            type=NotificationType.APPLICATION_STATUS,
            title=title,
            message=template.format(job_title=job.title, status=status.value),
            item_id=application.id,
            item_type="application",
            priority=priority,
            extra_data={"job_id": str(job.id), "status": status.value},
        )

        logger.info(
            "application_status_updated",
            application_id=str(application.id),
            status=status.value,
        )

    async def update_application_status(
        self, application_id, owner_id, status_in: ApplicationStatusUpdate
    ) -> JobApplication:
        application = await self.get_application(application_id)
        if application.job.company_id != owner_id:
            raise ForbiddenError("You can only update applications for your own job postings")

        await self.set_application_status(
            application,
            application.job,
            status_in.status,
            recruiter_notes=status_in.recruiter_notes,
            rejection_reason=status_in.rejection_reason,
            rating=status_in.rating,
        )
        return application

    async def bulk_update_applications(
        self, job_id, owner_id, bulk_in: BulkApplicationUpdate
    ) -> dict:
        """
        Apply one status to many applications of a job, one at a time.

        Each item runs in its own SAVEPOINT; failures are collected in
        ``errors`` and never abort the remaining items.
        """
        job = await self._get_job(job_id)
        self._ensure_owner(job, owner_id, "update applications for")

        updated = 0
        errors = []
        for application_id in bulk_in.application_ids:
            result = await self.db.execute(
                select(JobApplication).where(
                    JobApplication.id == application_id,
                    JobApplication.job_id == job.id,
                )
            )
            application = result.scalar_one_or_none()
            if application is None:
                errors.append(
                    {"application_id": application_id, "error": "Application not found for this job"}
                )
                continue

            try:
                async with self.db.begin_nested():
                    await self.set_application_status(
                        application, job, bulk_in.status, recruiter_notes=bulk_in.notes
                    )
            except SQLAlchemyError as e:
                logger.warning(
                    "bulk_application_update_failed",
                    application_id=str(application_id),
                    error=str(e),
                )
                errors.append({"application_id": application_id, "error": str(e)})
                continue
            updated += 1

        logger.info("bulk_application_update", job_id=str(job.id), updated=updated, errors=len(errors))
        return {"updated": updated, "errors": errors}

    async def get_user_applications(self, user_id) -> List[JobApplication]:
        """The user's own applications with job summaries, newest first."""
        result = await self.db.execute(
            select(JobApplication)
            .options(selectinload(JobApplication.job).selectinload(Job.company))
            .where(JobApplication.applicant_id == user_id)
            .order_by(JobApplication.applied_at.desc())
        )
        return list(result.scalars().all())

    async def get_company_applications(
        self,
        company_id,
        job_id=None,
        status: Optional[ApplicationStatus] = None,
        min_skills_match: Optional[float] = None,
    ) -> List[JobApplication]:
        """Applications received on the company's own jobs."""
        query = (
            select(JobApplication)
            .join(Job, JobApplication.job_id == Job.id)
            .options(
                selectinload(JobApplication.applicant),
                selectinload(JobApplication.job).selectinload(Job.company),
            )
            .where(Job.company_id == company_id)
        )
        if job_id is not None:
            query = query.where(JobApplication.job_id == job_id)
        if status is not None:
            query = query.where(JobApplication.status == ApplicationStatus(status).value)
        if min_skills_match is not None:
            query = query.where(JobApplication.skills_match_score >= min_skills_match)

        result = await self.db.execute(query.order_by(JobApplication.applied_at.desc()))
        return list(result.scalars().all())

    # ==================== Bookmarks ====================

    async def bookmark_job(self, job_id, user_id) -> JobBookmark:
        job = await self._get_job(job_id)

        existing = await self.db.execute(
            select(JobBookmark.id).where(
                JobBookmark.job_id == job.id,
                JobBookmark.user_id == user_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Job already bookmarked")

        bookmark = JobBookmark(job=job, user_id=user_id)
        try:
            async with self.db.begin_nested():
                self.db.add(bookmark)
        except IntegrityError:
            raise ConflictError("Job already bookmarked")

        logger.info("job_bookmarked", job_id=str(job.id), user_id=str(user_id))
        return bookmark

    async def remove_bookmark(self, job_id, user_id) -> None:
        result = await self.db.execute(
            select(JobBookmark).where(
                JobBookmark.job_id == job_id,
                JobBookmark.user_id == user_id,
            )
        )
        bookmark = result.scalar_one_or_none()
        if bookmark is None:
            raise NotFoundError("Bookmark not found")

        await self.db.delete(bookmark)
        await self.db.flush()
        logger.info("job_bookmark_removed", job_id=str(job_id), user_id=str(user_id))

    async def get_user_bookmarks(self, user_id) -> List[JobBookmark]:
        result = await self.db.execute(
            select(JobBookmark)
            .options(selectinload(JobBookmark.job).selectinload(Job.company))
            .where(JobBookmark.user_id == user_id)
            .order_by(JobBookmark.created_at.desc())
        )
        return list(result.scalars().all())

    # ==================== Analytics ====================

    async def get_job_analytics(self, job_id, owner_id, days: Optional[int] = None) -> JobAnalytics:
        """Applications, bookmarks, views and a daily application histogram."""
        job = await self._get_job(job_id)
        self._ensure_owner(job, owner_id, "view analytics for")
        days = days or settings.ANALYTICS_HISTORY_DAYS

        result = await self.db.execute(
            select(JobApplication.status, func.count(JobApplication.id))
            .where(JobApplication.job_id == job.id)
            .group_by(JobApplication.status)
        )
        status_breakdown = {status: count for status, count in result.all()}
        total_applications = sum(status_breakdown.values())

        bookmarks = await self._count_by_job(JobBookmark, [job.id])

        result = await self.db.execute(
            select(func.avg(JobApplication.skills_match_score)).where(
                JobApplication.job_id == job.id,
                JobApplication.skills_match_score.isnot(None),
            )
        )
        average = result.scalar()

        start_day = datetime.utcnow().date() - timedelta(days=days - 1)
        result = await self.db.execute(
            select(JobApplication.applied_at).where(
                JobApplication.job_id == job.id,
                JobApplication.applied_at >= datetime.combine(start_day, time.min),
            )
        )
        per_day = Counter(applied_at.date() for applied_at in result.scalars().all())
        applications_over_time = [
            {"date": day, "count": per_day.get(day, 0)}
            for day in (start_day + timedelta(days=offset) for offset in range(days))
        ]

        views = job.views or 0
        conversion_rate = round(total_applications / views * 100, 2) if views else 0.0

        return JobAnalytics(
            job_id=job.id,
            title=job.title,
            total_applications=total_applications,
            total_bookmarks=bookmarks.get(job.id, 0),
            views=views,
            status_breakdown=status_breakdown,
            average_skills_match=round(float(average), 2) if average is not None else 0.0,
            applications_over_time=applications_over_time,
            conversion_rate=conversion_rate,
        )
