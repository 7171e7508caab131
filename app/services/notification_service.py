"""
Notification service.

Single notifications are written inside the caller's transaction and their
failures propagate. Fan-out to many recipients (``notify_many``) is
best-effort: each recipient is written in its own SAVEPOINT and a failure is
logged and reported in the returned results instead of being raised.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.notification import Notification
from app.utils.constants import NotificationPriority, NotificationType

logger = structlog.get_logger(__name__)


@dataclass
class DeliveryResult:
    """Outcome of delivering one notification in a fan-out."""

    recipient_id: str
    delivered: bool
    error: Optional[str] = None


class NotificationService:
    """Creates and reads persisted user notifications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_notification(
        self,
        user_id,
        type: NotificationType,
        title: str,
        message: str,
        item_id: Optional[str] = None,
        item_type: Optional[str] = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        extra_data: Optional[dict] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            item_id=str(item_id) if item_id is not None else None,
            item_type=item_type,
            priority=NotificationPriority(priority).value,
            extra_data=extra_data or {},
        )
        self.db.add(notification)
        await self.db.flush()

        logger.info(
            "notification_created",
            user_id=str(user_id),
            type=notification.type,
            priority=notification.priority,
        )
        return notification

    async def notify_many(self, recipient_ids: Iterable, **fields) -> List[DeliveryResult]:
        """
        Send the same notification to every recipient, sequentially.

        Returns:
            One DeliveryResult per recipient, in order. Never raises for a
            per-recipient failure.
        """
        results: List[DeliveryResult] = []
        for recipient_id in recipient_ids:
            try:
                async with self.db.begin_nested():
                    await self.create_notification(user_id=recipient_id, **fields)
            except (SQLAlchemyError, ValueError) as e:
                logger.warning(
                    "notification_failed",
                    recipient_id=str(recipient_id),
                    title=fields.get("title"),
                    error=str(e),
                )
                results.append(DeliveryResult(str(recipient_id), False, str(e)))
            else:
                results.append(DeliveryResult(str(recipient_id), True))
        return results

    async def get_user_notifications(
        self, user_id, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """Notifications for one user, newest first."""
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.db.execute(
            query.order_by(Notification.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def mark_as_read(self, notification_id, user_id) -> Notification:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.utcnow()
            await self.db.flush()
        return notification

    async def mark_all_as_read(self, user_id) -> int:
        """Mark every unread notification of the user as read; returns the count."""
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=datetime.utcnow())
        )
        return result.rowcount or 0
