"""
Tests for the Admin API.

Tests cover:
- Role gating
- Paginated listings with filters
- Project, job and event approval workflows
- Admin view and override of job applications
- User management guards
- Bulk approve / delete
- Dashboard metrics and system health
"""
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.job import Job, JobApplication
from app.models.notification import Notification
from app.models.project import Project
from app.models.user import User
from app.utils.constants import EventStatus, JobStatus, ProjectStatus, UserRole
from tests.conftest import auth_headers, create_event, create_job, create_project, create_user


async def count_rows(session_factory, model, *conditions) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(model.id)).where(*conditions))).scalar()


# ============================================================
# ACCESS TESTS
# ============================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/users", "/projects", "/jobs", "/events", "/dashboard/metrics"])
async def test_admin_routes_reject_other_roles(client: AsyncClient, company, path):
    response = await client.get(f"/api/v1/admin{path}", headers=auth_headers(company))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_role_claim_must_match_exactly(client: AsyncClient, db, admin):
    # A token minted while the user was a student keeps its role claim
    student = await create_user(db, UserRole.STUDENT, "future-admin@itc.test")
    headers = auth_headers(student)
    student.role = UserRole.ADMIN.value
    await db.commit()

    response = await client.get("/api/v1/admin/users", headers=headers)

    assert response.status_code == 403


# ============================================================
# LISTING TESTS
# ============================================================

@pytest.mark.asyncio
async def test_list_users_paginates_and_filters(client: AsyncClient, db, admin, company, student, professional):
    headers = auth_headers(admin)

    page = await client.get("/api/v1/admin/users", params={"limit": 3}, headers=headers)
    assert page.status_code == 200
    data = page.json()
    assert data["total"] == 4
    assert data["pages"] == 2
    assert len(data["items"]) == 3

    second = await client.get("/api/v1/admin/users", params={"limit": 3, "page": 2}, headers=headers)
    assert len(second.json()["items"]) == 1

    students = await client.get("/api/v1/admin/users", params={"type": "student"}, headers=headers)
    assert [u["email"] for u in students.json()["items"]] == ["student@uni.test"]

    search = await client.get("/api/v1/admin/users", params={"search": "acme"}, headers=headers)
    assert [u["email"] for u in search.json()["items"]] == ["hr@acme.test"]

    student.is_active = False
    await db.commit()
    inactive = await client.get("/api/v1/admin/users", params={"status": "inactive"}, headers=headers)
    assert [u["email"] for u in inactive.json()["items"]] == ["student@uni.test"]


@pytest.mark.asyncio
async def test_list_projects_jobs_events(client: AsyncClient, db, admin, company, student):
    await create_project(db, student, title="Pending one")
    await create_project(db, student, title="Approved one", status=ProjectStatus.APPROVED.value)
    await create_job(db, company, title="Draft job", status=JobStatus.DRAFT.value)
    await create_event(db, company, title="Hack night")
    headers = auth_headers(admin)

    projects = await client.get(
        "/api/v1/admin/projects", params={"status": "PENDING_APPROVAL"}, headers=headers
    )
    assert [p["title"] for p in projects.json()["items"]] == ["Pending one"]
    assert projects.json()["items"][0]["author"]["name"] == "Sam Student"

    jobs = await client.get("/api/v1/admin/jobs", headers=headers)
    assert [j["title"] for j in jobs.json()["items"]] == ["Draft job"]
    assert jobs.json()["items"][0]["company"]["company"] == "Acme Corp"

    events = await client.get("/api/v1/admin/events", params={"search": "hack"}, headers=headers)
    assert events.json()["total"] == 1
    assert events.json()["items"][0]["organizer"]["name"] == "Acme HR"


@pytest.mark.asyncio
async def test_list_rejects_oversized_page(client: AsyncClient, admin):
    response = await client.get(
        "/api/v1/admin/users", params={"limit": 500}, headers=auth_headers(admin)
    )

    assert response.status_code == 422


# ============================================================
# PROJECT REVIEW TESTS
# ============================================================

@pytest.mark.asyncio
async def test_approve_project_notifies_author(
    client: AsyncClient, session_factory, db, admin, student
):
    project = await create_project(db, student)

    response = await client.post(
        f"/api/v1/admin/projects/{project.id}/approve",
        json={"notes": "Nice work"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "APPROVED"
    assert data["reviewed_by"] == str(admin.id)
    assert data["reviewed_at"] is not None
    assert data["review_notes"] == "Nice work"

    async with session_factory() as session:
        notice = (
            await session.execute(select(Notification).where(Notification.user_id == student.id))
        ).scalar_one()
    assert notice.title == "Project approved"
    assert notice.type == "PROJECT_REVIEW"

    again = await client.post(
        f"/api/v1/admin/projects/{project.id}/approve", headers=auth_headers(admin)
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_reject_project_requires_reason(client: AsyncClient, db, admin, student):
    project = await create_project(db, student)
    headers = auth_headers(admin)

    missing = await client.post(
        f"/api/v1/admin/projects/{project.id}/reject", json={"reason": ""}, headers=headers
    )
    assert missing.status_code == 422

    response = await client.post(
        f"/api/v1/admin/projects/{project.id}/reject",
        json={"reason": "Missing README"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"
    assert response.json()["rejection_reason"] == "Missing README"


@pytest.mark.asyncio
async def test_review_missing_project(client: AsyncClient, admin):
    response = await client.post(
        f"/api/v1/admin/projects/{uuid.uuid4()}/approve", headers=auth_headers(admin)
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"


# ============================================================
# USER MANAGEMENT TESTS
# ============================================================

@pytest.mark.asyncio
async def test_user_detail_includes_counts(client: AsyncClient, db, admin, company):
    await create_job(db, company)
    await create_job(db, company, title="Second")

    response = await client.get(f"/api/v1/admin/users/{company.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["jobs_count"] == 2
    assert response.json()["projects_count"] == 0


@pytest.mark.asyncio
async def test_cannot_demote_last_admin(client: AsyncClient, admin):
    response = await client.patch(
        f"/api/v1/admin/users/{admin.id}/role",
        json={"role": "STUDENT"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot change role of the last admin user"


@pytest.mark.asyncio
async def test_update_role_and_status(client: AsyncClient, admin, student):
    headers = auth_headers(admin)

    role = await client.patch(
        f"/api/v1/admin/users/{student.id}/role", json={"role": "PROFESSIONAL"}, headers=headers
    )
    assert role.json()["role"] == "PROFESSIONAL"

    status = await client.patch(
        f"/api/v1/admin/users/{student.id}/status", json={"is_active": False}, headers=headers
    )
    assert status.json()["is_active"] is False

    # Deactivated users can no longer authenticate
    blocked = await client.get("/api/v1/jobs/me/applications", headers=auth_headers(student))
    assert blocked.status_code == 403


@pytest.mark.asyncio
async def test_delete_user_removes_owned_content(
    client: AsyncClient, session_factory, db, admin, company, student
):
    job = await create_job(db, company)
    await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(student))

    response = await client.delete(f"/api/v1/admin/users/{company.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert await count_rows(session_factory, User, User.id == company.id) == 0
    assert await count_rows(session_factory, Job) == 0
    assert await count_rows(session_factory, JobApplication) == 0


@pytest.mark.asyncio
async def test_cannot_delete_last_admin(client: AsyncClient, admin):
    response = await client.delete(f"/api/v1/admin/users/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 403


# ============================================================
# JOB / EVENT MODERATION TESTS
# ============================================================

@pytest.mark.asyncio
async def test_update_job_and_event_status(client: AsyncClient, db, admin, company):
    job = await create_job(db, company)
    event_row = await create_event(db, company)
    headers = auth_headers(admin)

    job_response = await client.patch(
        f"/api/v1/admin/jobs/{job.id}/status", json={"status": "CLOSED"}, headers=headers
    )
    assert job_response.json()["status"] == "CLOSED"

    event_response = await client.patch(
        f"/api/v1/admin/events/{event_row.id}/status", json={"status": "PUBLISHED"}, headers=headers
    )
    assert event_response.json()["status"] == "PUBLISHED"

    invalid = await client.patch(
        f"/api/v1/admin/events/{event_row.id}/status", json={"status": "UNKNOWN"}, headers=headers
    )
    assert invalid.status_code == 422


@pytest.mark.asyncio
async def test_admin_deletes_job_and_event(client: AsyncClient, session_factory, db, admin, company):
    job = await create_job(db, company)
    event_row = await create_event(db, company)
    headers = auth_headers(admin)

    assert (await client.delete(f"/api/v1/admin/jobs/{job.id}", headers=headers)).status_code == 200
    assert (await client.delete(f"/api/v1/admin/events/{event_row.id}", headers=headers)).status_code == 200
    assert (await client.delete(f"/api/v1/admin/events/{event_row.id}", headers=headers)).status_code == 404
    assert await count_rows(session_factory, Job) == 0


# ============================================================
# JOB / EVENT REVIEW TESTS
# ============================================================

async def notices_for(session_factory, user):
    async with session_factory() as session:
        result = await session.execute(select(Notification).where(Notification.user_id == user.id))
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_approve_draft_job_publishes_and_notifies_company(
    client: AsyncClient, session_factory, db, admin, company
):
    draft = await create_job(db, company, status=JobStatus.DRAFT.value)
    headers = auth_headers(admin)

    response = await client.post(
        f"/api/v1/admin/jobs/{draft.id}/approve", json={"notes": "Looks good"}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["status"] == "PUBLISHED"
    [notice] = await notices_for(session_factory, company)
    assert notice.type == "JOB_REVIEW"
    assert notice.title == "Job approved"
    assert notice.message.endswith("Notes: Looks good")

    again = await client.post(f"/api/v1/admin/jobs/{draft.id}/approve", headers=headers)
    assert again.status_code == 400

    activity = await client.get("/api/v1/admin/activity/recent", headers=headers)
    assert activity.json()[0]["action"] == "Approved job"


@pytest.mark.asyncio
async def test_reject_job_closes_it(client: AsyncClient, session_factory, db, admin, company):
    job = await create_job(db, company)
    headers = auth_headers(admin)

    missing_reason = await client.post(f"/api/v1/admin/jobs/{job.id}/reject", json={}, headers=headers)
    assert missing_reason.status_code == 422

    response = await client.post(
        f"/api/v1/admin/jobs/{job.id}/reject", json={"reason": "Spam"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "CLOSED"
    [notice] = await notices_for(session_factory, company)
    assert notice.message == 'Your job "Backend Engineer" was rejected: Spam'

    again = await client.post(
        f"/api/v1/admin/jobs/{job.id}/reject", json={"reason": "Spam"}, headers=headers
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Job is already closed"


@pytest.mark.asyncio
async def test_review_missing_job(client: AsyncClient, admin):
    response = await client.post(
        f"/api/v1/admin/jobs/{uuid.uuid4()}/approve", headers=auth_headers(admin)
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Job not found"


@pytest.mark.asyncio
async def test_approve_and_reject_events(client: AsyncClient, session_factory, db, admin, company):
    pending = await create_event(db, company, title="Hack night")
    published = await create_event(db, company, title="Talk", status=EventStatus.PUBLISHED.value)
    headers = auth_headers(admin)

    approved = await client.post(f"/api/v1/admin/events/{pending.id}/approve", headers=headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "PUBLISHED"

    not_draft = await client.post(f"/api/v1/admin/events/{published.id}/approve", headers=headers)
    assert not_draft.status_code == 400

    rejected = await client.post(
        f"/api/v1/admin/events/{published.id}/reject",
        json={"reason": "Venue unavailable"},
        headers=headers,
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "CANCELLED"

    cancelled_again = await client.post(
        f"/api/v1/admin/events/{published.id}/reject", json={"reason": "Again"}, headers=headers
    )
    assert cancelled_again.status_code == 400

    titles = sorted(n.title for n in await notices_for(session_factory, company))
    assert titles == ["Event approved", "Event rejected"]


# ============================================================
# APPLICATION OVERSIGHT TESTS
# ============================================================

@pytest.mark.asyncio
async def test_list_job_applications_paginates_and_filters(
    client: AsyncClient, db, admin, company, student, professional
):
    job = await create_job(db, company)
    await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(student))
    second = await client.post(
        f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(professional)
    )
    await client.patch(
        f"/api/v1/jobs/applications/{second.json()['id']}/status",
        json={"status": "REVIEWING"},
        headers=auth_headers(company),
    )
    headers = auth_headers(admin)

    page = await client.get(
        f"/api/v1/admin/jobs/{job.id}/applications", params={"limit": 1}, headers=headers
    )
    assert page.status_code == 200
    assert page.json()["total"] == 2
    assert page.json()["pages"] == 2
    assert len(page.json()["items"]) == 1

    reviewing = await client.get(
        f"/api/v1/admin/jobs/{job.id}/applications", params={"status": "REVIEWING"}, headers=headers
    )
    assert [a["applicant"]["name"] for a in reviewing.json()["items"]] == ["Pat Pro"]

    missing = await client.get(f"/api/v1/admin/jobs/{uuid.uuid4()}/applications", headers=headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_overrides_application_status(
    client: AsyncClient, session_factory, db, admin, company, student
):
    job = await create_job(db, company)
    application_id = (
        await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(student))
    ).json()["id"]

    response = await client.patch(
        f"/api/v1/admin/jobs/{job.id}/applications/{application_id}/status",
        json={"status": "OFFERED", "notes": "Fast-tracked"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OFFERED"
    assert data["offered_at"] is not None
    assert data["recruiter_notes"] == "Fast-tracked"

    titles = [n.title for n in await notices_for(session_factory, student)]
    assert len(titles) == 2
    assert "Application submitted" in titles


@pytest.mark.asyncio
async def test_application_status_override_checks_job(
    client: AsyncClient, session_factory, db, admin, company, student
):
    job = await create_job(db, company)
    other = await create_job(db, company, title="Other role")
    application_id = (
        await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(student))
    ).json()["id"]

    response = await client.patch(
        f"/api/v1/admin/jobs/{other.id}/applications/{application_id}/status",
        json={"status": "REJECTED"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Application not found for this job"
    assert await count_rows(
        session_factory, JobApplication, JobApplication.status == "PENDING"
    ) == 1


# ============================================================
# BULK OPERATION TESTS
# ============================================================

@pytest.mark.asyncio
async def test_bulk_approve_projects(client: AsyncClient, session_factory, db, admin, student):
    first = await create_project(db, student, title="One")
    second = await create_project(db, student, title="Two")

    response = await client.post(
        "/api/v1/admin/bulk/approve",
        json={"type": "projects", "ids": [str(first.id), str(second.id), str(uuid.uuid4())]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json() == {"type": "projects", "approved": 2}
    assert await count_rows(
        session_factory, Project,
        Project.status == ProjectStatus.APPROVED.value,
        Project.reviewed_by == admin.id,
    ) == 2


@pytest.mark.asyncio
async def test_bulk_approve_events_publishes(client: AsyncClient, session_factory, db, admin, company):
    event_row = await create_event(db, company)

    response = await client.post(
        "/api/v1/admin/bulk/approve",
        json={"type": "events", "ids": [str(event_row.id)]},
        headers=auth_headers(admin),
    )

    assert response.json()["approved"] == 1


@pytest.mark.asyncio
async def test_bulk_approve_rejects_users(client: AsyncClient, admin, student):
    response = await client.post(
        "/api/v1/admin/bulk/approve",
        json={"type": "users", "ids": [str(student.id)]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_bulk_delete_jobs(client: AsyncClient, session_factory, db, admin, company, student):
    first = await create_job(db, company, title="One")
    second = await create_job(db, company, title="Two")
    await client.post(f"/api/v1/jobs/{first.id}/apply", json={}, headers=auth_headers(student))

    response = await client.request(
        "DELETE",
        "/api/v1/admin/bulk/delete",
        json={"type": "jobs", "ids": [str(first.id), str(second.id)]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json() == {"type": "jobs", "deleted": 2}
    assert await count_rows(session_factory, JobApplication) == 0


@pytest.mark.asyncio
async def test_bulk_delete_users_refuses_self(client: AsyncClient, admin, student):
    response = await client.request(
        "DELETE",
        "/api/v1/admin/bulk/delete",
        json={"type": "users", "ids": [str(student.id), str(admin.id)]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_bulk_delete_users(client: AsyncClient, session_factory, admin, student, professional):
    response = await client.request(
        "DELETE",
        "/api/v1/admin/bulk/delete",
        json={"type": "users", "ids": [str(student.id), str(professional.id)]},
        headers=auth_headers(admin),
    )

    assert response.json() == {"type": "users", "deleted": 2}
    assert await count_rows(session_factory, User) == 1


# ============================================================
# METRICS TESTS
# ============================================================

@pytest.mark.asyncio
async def test_dashboard_metrics(client: AsyncClient, db, admin, company, student, professional):
    await create_job(db, company)
    await create_job(db, company, status=JobStatus.DRAFT.value)
    await create_project(db, student)
    await create_event(db, company, status=EventStatus.PUBLISHED.value)

    response = await client.get("/api/v1/admin/dashboard/metrics", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["users"]["total"] == 4
    assert data["users"]["active"] == 4
    assert data["users"]["by_role"] == {"ADMIN": 1, "COMPANY": 1, "STUDENT": 1, "PROFESSIONAL": 1}
    assert data["users"]["new_this_week"] == 4
    assert data["jobs"]["total"] == 2
    assert data["jobs"]["by_status"] == {"PUBLISHED": 1, "DRAFT": 1}
    assert data["jobs"]["applications"] == 0
    assert data["projects"]["by_status"] == {"PENDING_APPROVAL": 1}
    assert data["events"]["upcoming"] == 1
    assert data["generated_at"]


@pytest.mark.asyncio
async def test_analytics_and_recent_activity(client: AsyncClient, db, admin, company, student):
    job = await create_job(db, company)
    await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(student))
    headers = auth_headers(admin)

    content = await client.get("/api/v1/admin/analytics/content", headers=headers)
    assert content.json() == {"projects": 0, "jobs": 1, "events": 0}

    users = await client.get("/api/v1/admin/analytics/users", headers=headers)
    assert users.json()["total_users"] == 3
    assert len(users.json()["recent_users"]) == 3

    activity = await client.get("/api/v1/admin/activity/recent", headers=headers)
    assert [a["action"] for a in activity.json()] == ["Applied to job"]


@pytest.mark.asyncio
async def test_system_health(client: AsyncClient, admin):
    response = await client.get("/api/v1/admin/system/health", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] is True
    assert data["cache"]["enabled"] is False
