"""User model."""

from sqlalchemy import JSON, Boolean, Column, String, Text

from app.db.base import Base
from app.utils.constants import UserRole


class User(Base):
    """Community member: student, professional, company or admin."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value, index=True)

    # Profile
    company = Column(String(255), nullable=True)  # Company name for COMPANY users
    location = Column(String(255), nullable=True)
    skills = Column(JSON, default=list)  # ["Python", "React", ...]

    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
