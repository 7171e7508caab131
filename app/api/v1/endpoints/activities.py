"""
Activity API
Recent activity feed of the authenticated user
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.models.user import User
from app.schemas.admin import ActivityResponse
from app.services.activity_service import ActivityService

router = APIRouter()


@router.get("/me", response_model=List[ActivityResponse])
async def my_activity(
    limit: int = Query(5, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Most recent activities of the caller."""
    return await ActivityService(db).get_user_activities(current_user.id, limit=limit)
