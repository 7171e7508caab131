"""
Tests for the Redis cache manager when Redis goes away after startup.
"""
import pytest
from redis.exceptions import ConnectionError

from app.config import settings
from app.core.cache import DASHBOARD_METRICS_KEY, CacheManager
from app.services.admin_service import AdminService
from app.utils.constants import ProjectStatus
from tests.conftest import create_project


class UnreachableRedis:
    """Client whose every command fails like a dropped connection."""

    def __init__(self):
        self.calls = 0

    def _fail(self, *args):
        self.calls += 1
        raise ConnectionError("redis down")

    get = setex = delete = _fail


@pytest.fixture
def broken_cache() -> CacheManager:
    cache = CacheManager(settings)
    cache.enabled = True
    cache._client = UnreachableRedis()
    return cache


def test_cache_operations_degrade_after_retries(broken_cache):
    assert broken_cache.get(DASHBOARD_METRICS_KEY) is None
    assert broken_cache.set(DASHBOARD_METRICS_KEY, {"users": 1}) is False
    assert broken_cache.delete(DASHBOARD_METRICS_KEY) is False
    # Two attempts per command
    assert broken_cache._client.calls == 6


def test_disabled_cache_never_touches_client():
    cache = CacheManager(settings)
    cache.enabled = False
    cache._client = UnreachableRedis()

    assert cache.get("key") is None
    assert cache.set("key", 1) is False
    assert cache.delete("key") is False
    assert cache._client.calls == 0


@pytest.mark.asyncio
async def test_admin_writes_survive_redis_outage(db, broken_cache, student, admin):
    project = await create_project(db, student)
    service = AdminService(db, broken_cache)

    reviewed = await service.approve_project(project.id, admin.id, "Nice work")
    await db.commit()

    assert reviewed.status == ProjectStatus.APPROVED.value
    assert reviewed.review_notes == "Nice work"


@pytest.mark.asyncio
async def test_dashboard_metrics_computed_without_redis(db, broken_cache, student, admin):
    metrics = await AdminService(db, broken_cache).get_dashboard_metrics()
    await db.commit()

    assert metrics["users"]["total"] == 2
