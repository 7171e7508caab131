"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, jobs
from app.api.v1.endpoints import activities, notifications

api_router = APIRouter()

# Include all route modules
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(activities.router, prefix="/activities", tags=["Activities"])
