"""Append-only activity log used for dashboards and the admin audit trail."""

from typing import List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity import Activity
from app.utils.constants import ActivityType

logger = structlog.get_logger(__name__)


class ActivityService:
    """Writes and reads Activity rows inside the caller's transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_activity(
        self,
        user_id,
        type: ActivityType,
        action: str,
        item_title: str,
        item_id: Optional[str] = None,
    ) -> Activity:
        activity = Activity(
            user_id=user_id,
            type=ActivityType(type).value,
            action=action,
            item_title=item_title,
            item_id=str(item_id) if item_id is not None else None,
        )
        self.db.add(activity)
        await self.db.flush()

        logger.info("activity_logged", user_id=str(user_id), type=activity.type, action=action)
        return activity

    async def log_job_application(self, user_id, job_title: str, job_id) -> Activity:
        return await self.log_activity(
            user_id, ActivityType.JOB_APPLICATION, "Applied to job", job_title, job_id
        )

    async def log_job_posted(self, user_id, job_title: str, job_id) -> Activity:
        return await self.log_activity(
            user_id, ActivityType.JOB_POSTED, "Posted new job", job_title, job_id
        )

    async def log_review(
        self, admin_id, type: ActivityType, label: str, title: str, item_id, approved: bool
    ) -> Activity:
        """Record an admin moderation decision, e.g. "Approved project"."""
        action = f"{'Approved' if approved else 'Rejected'} {label}"
        return await self.log_activity(admin_id, type, action, title, item_id)

    async def get_user_activities(self, user_id, limit: int = 5) -> List[Activity]:
        """Most recent activities of one user, newest first."""
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_recent(self, limit: int = 10) -> List[Activity]:
        """Most recent activities across all users."""
        result = await self.db.execute(
            select(Activity).order_by(Activity.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())
