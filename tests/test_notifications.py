"""
Tests for the notifications and activity feed APIs.
"""
import uuid

import pytest
from httpx import AsyncClient

from app.services.notification_service import NotificationService
from app.utils.constants import NotificationPriority, NotificationType
from tests.conftest import auth_headers


async def submit_application(client: AsyncClient, job, user):
    response = await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(user))
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_list_and_mark_notifications(client: AsyncClient, job, company, student, professional):
    await submit_application(client, job, student)
    await submit_application(client, job, professional)
    headers = auth_headers(company)

    inbox = await client.get("/api/v1/notifications/", headers=headers)
    assert inbox.status_code == 200
    notices = inbox.json()
    assert len(notices) == 2
    assert all(n["title"] == "New application received" for n in notices)
    assert all(n["is_read"] is False for n in notices)

    marked = await client.patch(f"/api/v1/notifications/{notices[0]['id']}/read", headers=headers)
    assert marked.status_code == 200
    assert marked.json()["is_read"] is True
    assert marked.json()["read_at"] is not None

    unread = await client.get("/api/v1/notifications/", params={"unread_only": "true"}, headers=headers)
    assert [n["id"] for n in unread.json()] == [notices[1]["id"]]

    read_all = await client.post("/api/v1/notifications/read-all", headers=headers)
    assert read_all.json() == {"updated": 1}

    unread = await client.get("/api/v1/notifications/", params={"unread_only": "true"}, headers=headers)
    assert unread.json() == []


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses_notification(client: AsyncClient, job, student, other_company):
    await submit_application(client, job, student)
    [notice] = (await client.get("/api/v1/notifications/", headers=auth_headers(student))).json()

    response = await client.patch(
        f"/api/v1/notifications/{notice['id']}/read", headers=auth_headers(other_company)
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Notification not found"


@pytest.mark.asyncio
async def test_mark_unknown_notification(client: AsyncClient, student):
    response = await client.patch(
        f"/api/v1/notifications/{uuid.uuid4()}/read", headers=auth_headers(student)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_my_activity_feed(client: AsyncClient, job, student):
    await submit_application(client, job, student)

    response = await client.get("/api/v1/activities/me", headers=auth_headers(student))

    assert response.status_code == 200
    [activity] = response.json()
    assert activity["type"] == "JOB_APPLICATION"
    assert activity["item_id"] == str(job.id)


# ============================================================
# FAN-OUT TESTS
# ============================================================

@pytest.mark.asyncio
async def test_notify_many_is_best_effort(db, student, professional):
    service = NotificationService(db)

    results = await service.notify_many(
        [student.id, None, professional.id],
        type=NotificationType.SYSTEM_MESSAGE,
        title="Maintenance",
        message="Scheduled downtime tonight",
        priority=NotificationPriority.LOW,
    )
    await db.commit()

    assert [r.delivered for r in results] == [True, False, True]
    assert results[1].error
    assert len(await service.get_user_notifications(student.id)) == 1
    assert len(await service.get_user_notifications(professional.id)) == 1
    await db.commit()
