"""Project showcase model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import ProjectStatus


class Project(Base):
    """Project submitted by a member and moderated by admins."""

    __tablename__ = "projects"

    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    technologies = Column(JSON, default=list)
    github_url = Column(String(500), nullable=True)
    live_url = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=ProjectStatus.DRAFT.value, index=True)

    author_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Moderation
    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    author = relationship("User", foreign_keys=[author_id], lazy="raise")

    def __repr__(self):
        return f"<Project {self.title} ({self.status})>"
