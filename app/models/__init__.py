"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from app.models.user import User

# Models with foreign keys to users
from app.models.job import Job, JobApplication, JobBookmark
from app.models.project import Project
from app.models.event import Event
from app.models.activity import Activity
from app.models.notification import Notification

# Export all models
__all__ = [
    "User",
    "Job",
    "JobApplication",
    "JobBookmark",
    "Project",
    "Event",
    "Activity",
    "Notification",
]
