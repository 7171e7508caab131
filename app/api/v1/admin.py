"""Admin API endpoints for moderation, user management and platform metrics."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_admin_service, require_role
from app.config import settings
from app.models.user import User
from app.schemas.admin import (
    ActivityResponse,
    AdminApplicationStatusUpdate,
    AdminEventResponse,
    AdminJobResponse,
    AdminProjectResponse,
    AdminUserDetail,
    AdminUserResponse,
    ApproveRequest,
    BulkApproveRequest,
    BulkApproveResult,
    BulkDeleteRequest,
    BulkDeleteResult,
    ContentAnalytics,
    DashboardMetrics,
    EventStatusUpdate,
    JobStatusUpdate,
    ListParams,
    PaginatedApplications,
    PaginatedEvents,
    PaginatedJobs,
    PaginatedProjects,
    PaginatedUsers,
    RejectRequest,
    SystemHealth,
    UserAnalytics,
    UserRoleUpdate,
    UserStatusUpdate,
)
from app.schemas.application import ApplicationResponse
from app.services.admin_service import AdminService
from app.utils.constants import ApplicationStatus, UserRole

router = APIRouter()

admin_only = require_role(UserRole.ADMIN)


def list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Case-insensitive text search"),
    status: Optional[str] = Query(None, description="Filter by status"),
    type: Optional[str] = Query(None, description="Filter by type or role"),
) -> ListParams:
    return ListParams(page=page, limit=limit, search=search, status=status, type=type)


# ==================== Dashboard ====================

@router.get("/dashboard/metrics", response_model=DashboardMetrics)
async def dashboard_metrics(
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Platform counts by role and status plus 7/30-day growth."""
    return await service.get_dashboard_metrics()


@router.get("/analytics/users", response_model=UserAnalytics)
async def user_analytics(
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.get_user_analytics()


@router.get("/analytics/content", response_model=ContentAnalytics)
async def content_analytics(
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.get_content_analytics()


@router.get("/activity/recent", response_model=List[ActivityResponse])
async def recent_activity(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Most recent activity across all users."""
    return await service.get_recent_activity(limit)


@router.get("/system/health", response_model=SystemHealth)
async def system_health(
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Database round-trip and cache status."""
    return await service.get_system_health()


# ==================== Users ====================

@router.get("/users", response_model=PaginatedUsers)
async def list_users(
    params: ListParams = Depends(list_params),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """
    Paginated user list.

    **Filters:**
    - `type`: role (STUDENT, PROFESSIONAL, COMPANY, ADMIN)
    - `status`: `active` or `inactive`
    - `search`: name, email or company
    """
    return await service.list_users(params)


@router.get("/users/{user_id}", response_model=AdminUserDetail)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.get_user_details(user_id)


@router.patch("/users/{user_id}/role", response_model=AdminUserResponse)
async def update_user_role(
    user_id: UUID,
    role_in: UserRoleUpdate,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Change a user's role. The last admin cannot be demoted."""
    return await service.update_user_role(user_id, role_in.role)


@router.patch("/users/{user_id}/status", response_model=AdminUserResponse)
async def update_user_status(
    user_id: UUID,
    status_in: UserStatusUpdate,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Activate or deactivate a user."""
    return await service.update_user_status(user_id, status_in.is_active)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Delete a user together with the content they own."""
    await service.delete_user(user_id)
    return {"message": "User deleted successfully"}


# ==================== Projects ====================

@router.get("/projects", response_model=PaginatedProjects)
async def list_projects(
    params: ListParams = Depends(list_params),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """
    Paginated project list for moderation.

    **Filters:**
    - `status`: PENDING_APPROVAL, APPROVED, REJECTED, ...
    - `search`: title or description
    """
    return await service.list_projects(params)


@router.post("/projects/{project_id}/approve", response_model=AdminProjectResponse)
async def approve_project(
    project_id: UUID,
    approve_in: Optional[ApproveRequest] = None,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Approve a pending project and notify its author."""
    notes = approve_in.notes if approve_in else None
    return await service.approve_project(project_id, current_user.id, notes)


@router.post("/projects/{project_id}/reject", response_model=AdminProjectResponse)
async def reject_project(
    project_id: UUID,
    reject_in: RejectRequest,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Reject a pending project with a reason and notify its author."""
    return await service.reject_project(project_id, current_user.id, reject_in.reason)


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: UUID,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    await service.delete_project(project_id)
    return {"message": "Project deleted successfully"}


# ==================== Jobs ====================

@router.get("/jobs", response_model=PaginatedJobs)
async def list_jobs(
    params: ListParams = Depends(list_params),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """
    Paginated job list across every status.

    **Filters:**
    - `status`: DRAFT, PUBLISHED, CLOSED, ...
    - `type`: FULL_TIME, PART_TIME, INTERNSHIP, CONTRACT
    - `search`: title, description or location
    """
    return await service.list_jobs(params)


@router.post("/jobs/{job_id}/approve", response_model=AdminJobResponse)
async def approve_job(
    job_id: UUID,
    approve_in: Optional[ApproveRequest] = None,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Publish a draft job and notify the posting company."""
    notes = approve_in.notes if approve_in else None
    return await service.approve_job(job_id, current_user.id, notes)


@router.post("/jobs/{job_id}/reject", response_model=AdminJobResponse)
async def reject_job(
    job_id: UUID,
    reject_in: RejectRequest,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Close a job with a reason and notify the posting company."""
    return await service.reject_job(job_id, current_user.id, reject_in.reason)


@router.get("/jobs/{job_id}/applications", response_model=PaginatedApplications)
async def list_job_applications(
    job_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[ApplicationStatus] = Query(None, description="Filter by application status"),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Paginated applications of one job, newest first."""
    params = ListParams(page=page, limit=limit, status=status.value if status else None)
    return await service.get_job_applications(job_id, params)


@router.patch(
    "/jobs/{job_id}/applications/{application_id}/status",
    response_model=ApplicationResponse,
)
async def update_application_status(
    job_id: UUID,
    application_id: UUID,
    status_in: AdminApplicationStatusUpdate,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Override an application's status; the applicant is notified as usual."""
    return await service.update_application_status(
        job_id, application_id, status_in.status, current_user.id, status_in.notes
    )


@router.patch("/jobs/{job_id}/status", response_model=AdminJobResponse)
async def update_job_status(
    job_id: UUID,
    status_in: JobStatusUpdate,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.update_job_status(job_id, status_in.status)


@router.delete("/jobs/{job_id}")
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    await service.delete_job(job_id)
    return {"message": "Job deleted successfully"}


# ==================== Events ====================

@router.get("/events", response_model=PaginatedEvents)
async def list_events(
    params: ListParams = Depends(list_params),
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.list_events(params)


@router.post("/events/{event_id}/approve", response_model=AdminEventResponse)
async def approve_event(
    event_id: UUID,
    approve_in: Optional[ApproveRequest] = None,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Publish a draft event and notify its organizer."""
    notes = approve_in.notes if approve_in else None
    return await service.approve_event(event_id, current_user.id, notes)


@router.post("/events/{event_id}/reject", response_model=AdminEventResponse)
async def reject_event(
    event_id: UUID,
    reject_in: RejectRequest,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Cancel an event with a reason and notify its organizer."""
    return await service.reject_event(event_id, current_user.id, reject_in.reason)


@router.patch("/events/{event_id}/status", response_model=AdminEventResponse)
async def update_event_status(
    event_id: UUID,
    status_in: EventStatusUpdate,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    return await service.update_event_status(event_id, status_in.status)


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: UUID,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    await service.delete_event(event_id)
    return {"message": "Event deleted successfully"}


# ==================== Bulk operations ====================

@router.post("/bulk/approve", response_model=BulkApproveResult)
async def bulk_approve(
    bulk_in: BulkApproveRequest,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Approve (or publish) many projects, jobs or events at once."""
    return await service.bulk_approve(bulk_in.type, bulk_in.ids, current_user.id)


@router.delete("/bulk/delete", response_model=BulkDeleteResult)
async def bulk_delete(
    bulk_in: BulkDeleteRequest,
    current_user: User = Depends(admin_only),
    service: AdminService = Depends(get_admin_service),
):
    """Delete many projects, jobs, events or users at once."""
    return await service.bulk_delete(bulk_in.type, bulk_in.ids, current_user.id)
