"""Job endpoints - job board, applications, bookmarks, analytics and resumes."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import FileResponse

from app.api.deps import (
    get_current_user,
    get_current_user_optional,
    get_job_service,
    require_role,
)
from app.models.user import User
from app.schemas.application import (
    ApplicationResponse,
    ApplicationStatusUpdate,
    ApplicationWithJob,
    ApplyJobRequest,
    BookmarkResponse,
    BulkApplicationUpdate,
    BulkUpdateResult,
    CompanyApplicationResponse,
    JobDetailResponse,
    ResumeUploadResponse,
)
from app.schemas.job import JobAnalytics, JobCreate, JobFilters, JobResponse, JobUpdate
from app.services.job_service import JobService
from app.services.resume_storage_service import ResumeStorageService, get_resume_storage
from app.utils.constants import (
    APPLICANT_ROLES,
    JOB_POSTER_ROLES,
    RESUME_READER_ROLES,
    ApplicationStatus,
    ExperienceLevel,
    JobType,
)

router = APIRouter()


@router.get("/", response_model=List[JobResponse])
async def list_jobs(
    type: Optional[JobType] = Query(None, description="FULL_TIME, PART_TIME, INTERNSHIP, CONTRACT"),
    remote: Optional[bool] = Query(None, description="Only remote (true) or non-remote (false) jobs"),
    experience_level: Optional[ExperienceLevel] = Query(None),
    location: Optional[str] = Query(None, description="Case-insensitive partial match"),
    skills: Optional[str] = Query(None, description="Comma-separated skills (matches any)"),
    salary_min: Optional[int] = Query(None, ge=0, description="Jobs paying at least this much"),
    salary_max: Optional[int] = Query(None, ge=0, description="Jobs starting at or below this"),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search title, description and company"),
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: JobService = Depends(get_job_service),
):
    """
    List published jobs.

    **Auth**: Public. When a token is sent each job is annotated with the
    caller's own application and bookmark state.

    **Ordering**: featured first, then urgent, then most recently posted.

    **Examples:**
    ```
    GET /api/v1/jobs/?type=FULL_TIME&remote=true
    GET /api/v1/jobs/?skills=React,Node&salary_min=50000
    ```
    """
    filters = JobFilters(
        type=type,
        remote=remote,
        experience_level=experience_level,
        location=location,
        skills=[s.strip() for s in skills.split(",") if s.strip()] if skills else [],
        salary_min=salary_min,
        salary_max=salary_max,
        featured=featured,
        search=search,
    )
    return await service.list_jobs(filters, current_user.id if current_user else None)


@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_in: JobCreate,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Post a new job.

    **Auth**: Company

    A legacy `salary` string such as "50k - 80k" fills `salary_min` and
    `salary_max` when neither is sent. All admins get a low-priority notice.
    """
    return await service.create_job(job_in, current_user)


@router.get("/me/applications", response_model=List[ApplicationWithJob])
async def my_applications(
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    List the caller's applications, newest first.

    **Auth**: Any authenticated user
    """
    return await service.get_user_applications(current_user.id)


@router.get("/me/bookmarks", response_model=List[BookmarkResponse])
async def my_bookmarks(
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    List the caller's bookmarked jobs, newest first.

    **Auth**: Any authenticated user
    """
    return await service.get_user_bookmarks(current_user.id)


@router.get("/company/applications", response_model=List[CompanyApplicationResponse])
async def company_applications(
    job_id: Optional[UUID] = Query(None, description="Only applications to this job"),
    status: Optional[ApplicationStatus] = Query(None),
    min_skills_match: Optional[float] = Query(None, ge=0, le=100),
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    List applications received on the caller's job postings.

    **Auth**: Company
    """
    return await service.get_company_applications(
        current_user.id, job_id=job_id, status=status, min_skills_match=min_skills_match
    )


@router.post("/upload-resume", response_model=ResumeUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: UploadFile = File(...),
    current_user: User = Depends(require_role(*APPLICANT_ROLES)),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    """
    Upload a resume to attach to applications.

    **Auth**: Student or Professional

    **Validation**:
    - File type: PDF, DOC or DOCX
    - File size: Maximum 5MB
    """
    # One byte past the limit is enough to reject an oversized upload
    content = await file.read(storage.max_size + 1)
    return storage.save(content, file.filename, file.content_type, current_user.id)


@router.get("/download-resume/{filename}")
async def download_resume(
    filename: str,
    current_user: User = Depends(require_role(*RESUME_READER_ROLES)),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    """
    Download a stored resume.

    **Auth**: Company, Professional or Admin
    """
    file_path = storage.resolve(filename)
    return FileResponse(path=str(file_path), filename=filename)


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: UUID,
    status_in: ApplicationStatusUpdate,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Move an application to a new status and notify the applicant.

    **Auth**: Company (owner of the job)
    """
    return await service.update_application_status(application_id, current_user.id, status_in)


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(
    job_id: UUID,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: JobService = Depends(get_job_service),
):
    """
    Get job details.

    **Auth**: Public. Applications are listed only for the posting company,
    and views are counted unless the owner is looking.
    """
    return await service.get_job(job_id, current_user.id if current_user else None)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    job_in: JobUpdate,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Update a job posting (partial).

    **Auth**: Company (owner of the job)
    """
    return await service.update_job(job_id, job_in, current_user.id)


@router.delete("/{job_id}")
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Delete a job posting together with its applications and bookmarks.

    **Auth**: Company (owner of the job)
    """
    await service.delete_job(job_id, current_user.id)
    return {"message": "Job deleted successfully"}


@router.post("/{job_id}/apply", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_job(
    job_id: UUID,
    application_in: Optional[ApplyJobRequest] = None,
    current_user: User = Depends(require_role(*APPLICANT_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Apply for a job.

    **Auth**: Student or Professional

    Fails with 400 when the job is not published or its deadline passed,
    and with 409 when the caller already applied.
    """
    return await service.apply_for_job(job_id, current_user.id, application_in or ApplyJobRequest())


@router.post("/{job_id}/applications/bulk-update", response_model=BulkUpdateResult)
async def bulk_update_applications(
    job_id: UUID,
    bulk_in: BulkApplicationUpdate,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Set one status on many applications of a job.

    **Auth**: Company (owner of the job)

    Items are processed one by one; unknown ids are reported in `errors`
    and never fail the whole request.
    """
    return await service.bulk_update_applications(job_id, current_user.id, bulk_in)


@router.get("/{job_id}/analytics", response_model=JobAnalytics)
async def job_analytics(
    job_id: UUID,
    current_user: User = Depends(require_role(*JOB_POSTER_ROLES)),
    service: JobService = Depends(get_job_service),
):
    """
    Per-job statistics for the owner.

    **Auth**: Company (owner of the job)
    """
    return await service.get_job_analytics(job_id, current_user.id)


@router.post("/{job_id}/bookmark", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def bookmark_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    Bookmark a job.

    **Auth**: Any authenticated user
    """
    return await service.bookmark_job(job_id, current_user.id)


@router.delete("/{job_id}/bookmark")
async def remove_bookmark(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    Remove a bookmark.

    **Auth**: Any authenticated user
    """
    await service.remove_bookmark(job_id, current_user.id)
    return {"message": "Bookmark removed successfully"}
