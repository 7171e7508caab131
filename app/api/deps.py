"""
API Dependencies
Common dependencies for API endpoints (database, authentication, services)
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheManager, get_cache_manager
from app.core.security import get_current_user, get_current_user_optional, require_role
from app.db.session import get_db
from app.services.admin_service import AdminService
from app.services.job_service import JobService

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_user_optional",
    "require_role",
    "get_cache",
    "get_job_service",
    "get_admin_service",
]


def get_cache() -> Optional[CacheManager]:
    """Process-wide cache manager (None before startup)."""
    return get_cache_manager()


def get_job_service(db: AsyncSession = Depends(get_db)) -> JobService:
    return JobService(db)


def get_admin_service(
    db: AsyncSession = Depends(get_db),
    cache: Optional[CacheManager] = Depends(get_cache),
) -> AdminService:
    return AdminService(db, cache)
