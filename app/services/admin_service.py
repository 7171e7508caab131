"""
Admin domain service.

Paginated moderation listings, the approval workflows for projects, jobs
and events, application oversight, bulk operations, user management and
dashboard metrics. Metrics are grouped counts over stored rows.
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

import structlog
from sqlalchemy import delete, func, or_, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.core.cache import DASHBOARD_METRICS_KEY, CacheManager
from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.activity import Activity
from app.models.event import Event
from app.models.job import Job, JobApplication, JobBookmark
from app.models.notification import Notification
from app.models.project import Project
from app.models.user import User
from app.schemas.admin import DashboardMetrics, ListParams
from app.services.activity_service import ActivityService
from app.services.job_service import JobService
from app.services.notification_service import NotificationService
from app.utils.constants import (
    ActivityType,
    ApplicationStatus,
    EventStatus,
    JobStatus,
    NotificationPriority,
    NotificationType,
    ProjectStatus,
    UserRole,
)
from app.utils.helpers import total_pages

logger = structlog.get_logger(__name__)

# Status assigned by bulk approval, per content type
BULK_APPROVE_STATUS = {
    "projects": (Project, ProjectStatus.APPROVED),
    "jobs": (Job, JobStatus.PUBLISHED),
    "events": (Event, EventStatus.PUBLISHED),
}


class AdminService:
    """Business logic behind the /admin endpoints."""

    def __init__(self, db: AsyncSession, cache: Optional[CacheManager] = None):
        self.db = db
        self.cache = cache
        self.activities = ActivityService(db)
        self.notifications = NotificationService(db)

    # ==================== Helpers ====================

    async def _get_or_404(self, model, entity_id, label: str, *options):
        result = await self.db.execute(
            select(model).options(*options).where(model.id == entity_id)
        )
        entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(f"{label} not found")
        return entity

    async def _paginate(
        self,
        model,
        params: ListParams,
        conditions: Sequence,
        options: Iterable = (),
    ) -> Dict:
        """Run a filtered count plus a page query, newest first."""
        total = (
            await self.db.execute(select(func.count(model.id)).where(*conditions))
        ).scalar() or 0

        result = await self.db.execute(
            select(model)
            .options(*options)
            .where(*conditions)
            .order_by(model.created_at.desc())
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
        )
        return {
            "items": list(result.scalars().all()),
            "total": total,
            "page": params.page,
            "limit": params.limit,
            "pages": total_pages(total, params.limit),
        }

    @staticmethod
    def _search(params: ListParams, *columns) -> List:
        """Case-insensitive substring match OR'd across text columns."""
        if not params.search:
            return []
        pattern = f"%{params.search}%"
        return [or_(*[column.ilike(pattern) for column in columns])]

    def _invalidate_metrics(self) -> None:
        if self.cache:
            self.cache.delete(DASHBOARD_METRICS_KEY)

    async def _admin_count(self) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.role == UserRole.ADMIN.value)
        )
        return result.scalar() or 0

    # ==================== Listings ====================

    async def list_users(self, params: ListParams) -> Dict:
        conditions = self._search(params, User.name, User.email, User.company)
        if params.type:
            conditions.append(User.role == params.type.upper())
        if params.status:
            conditions.append(User.is_active == (params.status.lower() == "active"))
        return await self._paginate(User, params, conditions)

    async def list_projects(self, params: ListParams) -> Dict:
        conditions = self._search(params, Project.title, Project.description)
        if params.status:
            conditions.append(Project.status == params.status.upper())
        return await self._paginate(
            Project, params, conditions, [selectinload(Project.author)]
        )

    async def list_jobs(self, params: ListParams) -> Dict:
        conditions = self._search(params, Job.title, Job.description, Job.location)
        if params.status:
            conditions.append(Job.status == params.status.upper())
        if params.type:
            conditions.append(Job.type == params.type.upper())
        return await self._paginate(Job, params, conditions, [selectinload(Job.company)])

    async def list_events(self, params: ListParams) -> Dict:
        conditions = self._search(params, Event.title, Event.description, Event.location)
        if params.status:
            conditions.append(Event.status == params.status.upper())
        if params.type:
            conditions.append(Event.type == params.type.upper())
        return await self._paginate(
            Event, params, conditions, [selectinload(Event.organizer)]
        )

    # ==================== Users ====================

    async def get_user_details(self, user_id) -> Dict:
        user = await self._get_or_404(User, user_id, "User")

        async def count(column, value) -> int:
            return (await self.db.execute(select(func.count()).where(column == value))).scalar() or 0

        return {
            **{c.key: getattr(user, c.key) for c in User.__table__.columns},
            "projects_count": await count(Project.author_id, user.id),
            "jobs_count": await count(Job.company_id, user.id),
            "events_count": await count(Event.organizer_id, user.id),
            "applications_count": await count(JobApplication.applicant_id, user.id),
        }

    async def update_user_role(self, user_id, role: UserRole) -> User:
        user = await self._get_or_404(User, user_id, "User")
        role = UserRole(role)

        if user.role == UserRole.ADMIN.value and role != UserRole.ADMIN:
            if await self._admin_count() <= 1:
                raise ForbiddenError("Cannot change role of the last admin user")

        user.role = role.value
        await self.db.flush()
        self._invalidate_metrics()
        logger.info("user_role_updated", user_id=str(user.id), role=role.value)
        return user

    async def update_user_status(self, user_id, is_active: bool) -> User:
        user = await self._get_or_404(User, user_id, "User")

        if user.role == UserRole.ADMIN.value and not is_active:
            result = await self.db.execute(
                select(func.count(User.id)).where(
                    User.role == UserRole.ADMIN.value, User.is_active.is_(True)
                )
            )
            if (result.scalar() or 0) <= 1:
                raise ForbiddenError("Cannot deactivate the last active admin user")

        user.is_active = is_active
        await self.db.flush()
        self._invalidate_metrics()
        logger.info("user_status_updated", user_id=str(user.id), is_active=is_active)
        return user

    async def delete_user(self, user_id) -> None:
        user = await self._get_or_404(User, user_id, "User")

        if user.role == UserRole.ADMIN.value and await self._admin_count() <= 1:
            raise ForbiddenError("Cannot delete the last admin user")

        await self._remove_users([user.id])
        self._invalidate_metrics()
        logger.info("user_deleted", user_id=str(user_id))

    async def _remove_users(self, user_ids: List) -> int:
        """Delete users and everything that references them."""
        owned_jobs = select(Job.id).where(Job.company_id.in_(user_ids))
        await self.db.execute(delete(JobApplication).where(
            or_(JobApplication.applicant_id.in_(user_ids), JobApplication.job_id.in_(owned_jobs))
        ))
        await self.db.execute(delete(JobBookmark).where(
            or_(JobBookmark.user_id.in_(user_ids), JobBookmark.job_id.in_(owned_jobs))
        ))
        await self.db.execute(delete(Job).where(Job.company_id.in_(user_ids)))
        await self.db.execute(delete(Project).where(Project.author_id.in_(user_ids)))
        await self.db.execute(
            update(Project).where(Project.reviewed_by.in_(user_ids)).values(reviewed_by=None)
        )
        await self.db.execute(delete(Event).where(Event.organizer_id.in_(user_ids)))
        await self.db.execute(delete(Activity).where(Activity.user_id.in_(user_ids)))
        await self.db.execute(delete(Notification).where(Notification.user_id.in_(user_ids)))
        result = await self.db.execute(delete(User).where(User.id.in_(user_ids)))
        return result.rowcount or 0

    # ==================== Reviews ====================

    async def _record_review(
        self,
        item,
        owner_id,
        admin_id,
        label: str,
        activity_type: ActivityType,
        notification_type: NotificationType,
        approved: bool,
        notes: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        """Audit entry, owner notification and metrics invalidation after a review."""
        await self.activities.log_review(
            admin_id, activity_type, label, item.title, item.id, approved
        )

        if approved:
            title = f"{label.capitalize()} approved"
            message = f"Your {label} \"{item.title}\" has been approved."
            if notes:
                message += f" Notes: {notes}"
        else:
            title = f"{label.capitalize()} rejected"
            message = f"Your {label} \"{item.title}\" was rejected: {reason}"
        await self.notifications.notify_many(
            [owner_id],
            type=notification_type,
            title=title,
            message=message,
            item_id=item.id,
            item_type=label,
            priority=NotificationPriority.MEDIUM,
        )

        self._invalidate_metrics()
        logger.info(
            "content_reviewed",
            type=label,
            item_id=str(item.id),
            admin_id=str(admin_id),
            status=item.status,
        )

    # ==================== Projects ====================

    async def _review_project(
        self,
        project_id,
        admin_id,
        approved: bool,
        notes: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Project:
        project = await self._get_or_404(
            Project, project_id, "Project", selectinload(Project.author)
        )
        if project.status != ProjectStatus.PENDING_APPROVAL.value:
            raise BadRequestError(
                f"Only projects pending approval can be reviewed (current status: {project.status})"
            )

        project.status = (ProjectStatus.APPROVED if approved else ProjectStatus.REJECTED).value
        project.reviewed_by = admin_id
        project.reviewed_at = datetime.utcnow()
        if approved:
            project.review_notes = notes
        else:
            project.rejection_reason = reason
        await self.db.flush()

        await self._record_review(
            project,
            project.author_id,
            admin_id,
            "project",
            ActivityType.PROJECT_REVIEW,
            NotificationType.PROJECT_REVIEW,
            approved,
            reason=reason,
        )
        return project

    async def approve_project(self, project_id, admin_id, notes: Optional[str] = None) -> Project:
        return await self._review_project(project_id, admin_id, True, notes=notes)

    async def reject_project(self, project_id, admin_id, reason: str) -> Project:
        return await self._review_project(project_id, admin_id, False, reason=reason)

    async def delete_project(self, project_id) -> None:
        await self._get_or_404(Project, project_id, "Project")
        await self.db.execute(delete(Project).where(Project.id == project_id))
        self._invalidate_metrics()
        logger.info("project_deleted", project_id=str(project_id))

    # ==================== Jobs & events ====================

    async def _review_job(
        self,
        job_id,
        admin_id,
        approved: bool,
        notes: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Job:
        """Approval publishes a draft job; rejection closes any job still open."""
        job = await self._get_or_404(Job, job_id, "Job", selectinload(Job.company))
        if approved and job.status != JobStatus.DRAFT.value:
            raise BadRequestError(
                f"Only draft jobs can be approved (current status: {job.status})"
            )
        if not approved and job.status == JobStatus.CLOSED.value:
            raise BadRequestError("Job is already closed")

        job.status = (JobStatus.PUBLISHED if approved else JobStatus.CLOSED).value
        await self.db.flush()

        await self._record_review(
            job,
            job.company_id,
            admin_id,
            "job",
            ActivityType.JOB_REVIEW,
            NotificationType.JOB_REVIEW,
            approved,
            notes=notes,
            reason=reason,
        )
        return job

    async def approve_job(self, job_id, admin_id, notes: Optional[str] = None) -> Job:
        return await self._review_job(job_id, admin_id, True, notes=notes)

    async def reject_job(self, job_id, admin_id, reason: str) -> Job:
        return await self._review_job(job_id, admin_id, False, reason=reason)

    async def update_job_status(self, job_id, status: JobStatus) -> Job:
        job = await self._get_or_404(Job, job_id, "Job", selectinload(Job.company))
        job.status = JobStatus(status).value
        await self.db.flush()
        self._invalidate_metrics()
        return job

    async def delete_job(self, job_id) -> None:
        await self._get_or_404(Job, job_id, "Job")
        await self._remove_jobs([job_id])
        self._invalidate_metrics()
        logger.info("job_deleted_by_admin", job_id=str(job_id))

    async def _remove_jobs(self, job_ids: List) -> int:
        await self.db.execute(delete(JobApplication).where(JobApplication.job_id.in_(job_ids)))
        await self.db.execute(delete(JobBookmark).where(JobBookmark.job_id.in_(job_ids)))
        result = await self.db.execute(delete(Job).where(Job.id.in_(job_ids)))
        return result.rowcount or 0

    async def get_job_applications(self, job_id, params: ListParams) -> Dict:
        """Paginated applications of any job, optionally filtered by status."""
        await self._get_or_404(Job, job_id, "Job")
        conditions = [JobApplication.job_id == job_id]
        if params.status:
            conditions.append(JobApplication.status == params.status.upper())
        return await self._paginate(
            JobApplication, params, conditions, [selectinload(JobApplication.applicant)]
        )

    async def update_application_status(
        self,
        job_id,
        application_id,
        status: ApplicationStatus,
        admin_id,
        notes: Optional[str] = None,
    ) -> JobApplication:
        """Override an application's status with the same stamping and notice as the owner's."""
        jobs = JobService(self.db)
        application = await jobs.get_application(application_id)
        if application.job_id != job_id:
            raise NotFoundError("Application not found for this job")

        await jobs.set_application_status(
            application, application.job, status, recruiter_notes=notes
        )
        logger.info(
            "application_status_overridden",
            application_id=str(application.id),
            admin_id=str(admin_id),
            status=application.status,
        )
        return application

    async def _review_event(
        self,
        event_id,
        admin_id,
        approved: bool,
        notes: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Event:
        """Approval publishes a draft event; rejection cancels a draft or published one."""
        event = await self._get_or_404(Event, event_id, "Event", selectinload(Event.organizer))
        if approved and event.status != EventStatus.DRAFT.value:
            raise BadRequestError(
                f"Only draft events can be approved (current status: {event.status})"
            )
        if not approved and event.status not in (
            EventStatus.DRAFT.value, EventStatus.PUBLISHED.value
        ):
            raise BadRequestError(
                f"Only draft or published events can be rejected (current status: {event.status})"
            )

        event.status = (EventStatus.PUBLISHED if approved else EventStatus.CANCELLED).value
        await self.db.flush()

        await self._record_review(
            event,
            event.organizer_id,
            admin_id,
            "event",
            ActivityType.EVENT_REVIEW,
            NotificationType.EVENT_REVIEW,
            approved,
            notes=notes,
            reason=reason,
        )
        return event

    async def approve_event(self, event_id, admin_id, notes: Optional[str] = None) -> Event:
        return await self._review_event(event_id, admin_id, True, notes=notes)

    async def reject_event(self, event_id, admin_id, reason: str) -> Event:
        return await self._review_event(event_id, admin_id, False, reason=reason)

    async def update_event_status(self, event_id, status: EventStatus) -> Event:
        event = await self._get_or_404(Event, event_id, "Event", selectinload(Event.organizer))
        event.status = EventStatus(status).value
        await self.db.flush()
        self._invalidate_metrics()
        return event

    async def delete_event(self, event_id) -> None:
        await self._get_or_404(Event, event_id, "Event")
        await self.db.execute(delete(Event).where(Event.id == event_id))
        self._invalidate_metrics()
        logger.info("event_deleted", event_id=str(event_id))

    # ==================== Bulk operations ====================

    async def bulk_approve(self, content_type: str, ids: List, admin_id=None) -> Dict:
        """Approve many items with one UPDATE inside the request transaction."""
        if content_type not in BULK_APPROVE_STATUS:
            raise BadRequestError(f"Unsupported content type: {content_type}")

        model, status = BULK_APPROVE_STATUS[content_type]
        values = {"status": status.value}
        if model is Project:
            values.update(reviewed_by=admin_id, reviewed_at=datetime.utcnow())

        result = await self.db.execute(
            update(model)
            .where(model.id.in_(ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        approved = result.rowcount or 0

        self._invalidate_metrics()
        logger.info("bulk_approve", type=content_type, requested=len(ids), approved=approved)
        return {"type": content_type, "approved": approved}

    async def bulk_delete(self, content_type: str, ids: List, admin_id=None) -> Dict:
        if content_type == "jobs":
            deleted = await self._remove_jobs(ids)
        elif content_type == "users":
            if admin_id is not None and admin_id in ids:
                raise ForbiddenError("You cannot delete your own account")
            remaining_admins = await self.db.execute(
                select(func.count(User.id)).where(
                    User.role == UserRole.ADMIN.value, User.id.notin_(ids)
                )
            )
            if (remaining_admins.scalar() or 0) == 0:
                raise ForbiddenError("Cannot delete the last admin user")
            deleted = await self._remove_users(ids)
        elif content_type == "projects":
            deleted = (await self.db.execute(delete(Project).where(Project.id.in_(ids)))).rowcount or 0
        elif content_type == "events":
            deleted = (await self.db.execute(delete(Event).where(Event.id.in_(ids)))).rowcount or 0
        else:
            raise BadRequestError(f"Unsupported content type: {content_type}")

        self._invalidate_metrics()
        logger.info("bulk_delete", type=content_type, requested=len(ids), deleted=deleted)
        return {"type": content_type, "deleted": deleted}

    # ==================== Metrics ====================

    async def _count(self, model, *conditions) -> int:
        result = await self.db.execute(select(func.count(model.id)).where(*conditions))
        return result.scalar() or 0

    async def _grouped(self, column) -> Dict[str, int]:
        result = await self.db.execute(select(column, func.count()).group_by(column))
        return {key: count for key, count in result.all()}

    async def get_dashboard_metrics(self) -> Dict:
        """Counts by role/status and rolling 7/30-day growth, cached briefly."""
        if self.cache:
            cached = self.cache.get(DASHBOARD_METRICS_KEY)
            if cached is not None:
                return cached

        now = datetime.utcnow()
        week_ago = now - timedelta(days=7)
        month_ago = now - timedelta(days=30)

        metrics = DashboardMetrics(
            users={
                "total": await self._count(User),
                "active": await self._count(User, User.is_active.is_(True)),
                "by_role": await self._grouped(User.role),
                "new_this_week": await self._count(User, User.created_at >= week_ago),
                "new_this_month": await self._count(User, User.created_at >= month_ago),
            },
            projects={
                "total": await self._count(Project),
                "by_status": await self._grouped(Project.status),
                "new_this_week": await self._count(Project, Project.created_at >= week_ago),
            },
            jobs={
                "total": await self._count(Job),
                "by_status": await self._grouped(Job.status),
                "applications": await self._count(JobApplication),
                "new_this_week": await self._count(Job, Job.created_at >= week_ago),
            },
            events={
                "total": await self._count(Event),
                "by_status": await self._grouped(Event.status),
                "upcoming": await self._count(
                    Event, Event.date >= now, Event.status == EventStatus.PUBLISHED.value
                ),
                "new_this_week": await self._count(Event, Event.created_at >= week_ago),
            },
            generated_at=now,
        ).model_dump(mode="json")

        if self.cache:
            self.cache.set(DASHBOARD_METRICS_KEY, metrics, ttl=settings.CACHE_STATS_TTL)
        return metrics

    async def get_user_analytics(self) -> Dict:
        result = await self.db.execute(select(User).order_by(User.created_at.desc()).limit(5))
        return {
            "total_users": await self._count(User),
            "users_by_role": await self._grouped(User.role),
            "recent_users": list(result.scalars().all()),
        }

    async def get_content_analytics(self) -> Dict:
        return {
            "projects": await self._count(Project),
            "jobs": await self._count(Job),
            "events": await self._count(Event),
        }

    async def get_recent_activity(self, limit: int = 10) -> List[Activity]:
        return await self.activities.get_recent(limit)

    async def get_system_health(self) -> Dict:
        """Real liveness probes only: a database round-trip and the cache ping."""
        try:
            await self.db.execute(text("SELECT 1"))
            database = True
        except SQLAlchemyError as e:
            logger.error("database_health_check_failed", error=str(e))
            database = False

        cache = self.cache.get_stats() if self.cache else {"enabled": False}
        if self.cache and self.cache.enabled:
            cache["healthy"] = self.cache.is_healthy()

        return {
            "status": "healthy" if database else "unhealthy",
            "database": database,
            "cache": cache,
            "timestamp": datetime.utcnow(),
        }
