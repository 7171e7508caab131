"""Activity log model (append-only)."""

from sqlalchemy import Column, ForeignKey, String, Uuid

from app.db.base import Base


class Activity(Base):
    """Audit entry shown on user dashboards."""

    __tablename__ = "activities"

    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(30), nullable=False)  # ActivityType
    action = Column(String(255), nullable=False)
    item_title = Column(String(500), nullable=False)
    item_id = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<Activity {self.type} by {self.user_id}>"
