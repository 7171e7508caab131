"""Notification model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text, Uuid

from app.db.base import Base
from app.utils.constants import NotificationPriority


class Notification(Base):
    """Persisted notification for a single user."""

    __tablename__ = "notifications"

    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(30), nullable=False)  # NotificationType
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    item_id = Column(String(64), nullable=True)
    item_type = Column(String(30), nullable=True)
    priority = Column(String(10), nullable=False, default=NotificationPriority.MEDIUM.value)
    extra_data = Column(JSON, default=dict)  # Any additional context (renamed from 'metadata' to avoid SQLAlchemy conflict)

    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Notification {self.type} -> {self.user_id}>"
