"""Community event model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import EventStatus


class Event(Base):
    """Workshop, meetup, hackathon or seminar."""

    __tablename__ = "events"

    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    location = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # EventType
    status = Column(String(20), nullable=False, default=EventStatus.DRAFT.value, index=True)
    max_attendees = Column(Integer, nullable=True)

    organizer_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    organizer = relationship("User", lazy="raise")

    def __repr__(self):
        return f"<Event {self.title} ({self.status})>"
