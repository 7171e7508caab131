"""
Pytest fixtures for testing.
"""
import os

# Configure the app for tests BEFORE anything imports app.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_ENABLED"] = "false"
os.environ["DEBUG"] = "false"
os.environ["LOG_FORMAT"] = "console"
os.environ["SENTRY_DSN"] = ""

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import create_user_token
from app.db.base import Base
from app.db.session import get_db
import app.models  # noqa: F401  (register every table on Base.metadata)
from app.models.event import Event
from app.models.job import Job
from app.models.project import Project
from app.models.user import User
from app.services.resume_storage_service import ResumeStorageService, get_resume_storage
from app.utils.constants import EventStatus, EventType, JobStatus, JobType, ProjectStatus, UserRole

# Now import app (after the environment is configured)
from app.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh in-memory database per test.

    StaticPool keeps one connection alive so every session sees the same
    database. pysqlite's implicit transaction handling is disabled so that
    SAVEPOINTs used by the services behave like they do on PostgreSQL.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        yield factory
    finally:
        fastapi_app.dependency_overrides.pop(get_db, None)
        await test_engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for direct test use.

    Tests commit after writing so the shared connection is free again
    before the next request runs.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def resume_dir(tmp_path):
    """Point resume storage at a temporary directory."""
    storage = ResumeStorageService(storage_dir=str(tmp_path))
    fastapi_app.dependency_overrides[get_resume_storage] = lambda: storage
    yield tmp_path
    fastapi_app.dependency_overrides.pop(get_resume_storage, None)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the ASGI app."""
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,  # Follow 307 redirects for trailing slashes
    ) as async_client:
        yield async_client


# ============================================================
# DATA HELPERS
# ============================================================

async def create_user(db: AsyncSession, role: UserRole, email: str, **fields) -> User:
    user = User(
        email=email,
        name=fields.pop("name", email.split("@")[0].title()),
        role=role.value,
        skills=fields.pop("skills", []),
        **fields,
    )
    db.add(user)
    await db.commit()
    return user


async def create_job(db: AsyncSession, company: User, **fields) -> Job:
    values = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "location": "Remote",
        "type": JobType.FULL_TIME.value,
        "status": JobStatus.PUBLISHED.value,
        "required_skills": ["Python", "SQL"],
        "preferred_skills": ["Docker"],
        "technologies": [],
        "requirements": [],
    }
    values.update(fields)
    job = Job(company_id=company.id, **values)
    db.add(job)
    await db.commit()
    return job


async def create_project(db: AsyncSession, author: User, **fields) -> Project:
    values = {
        "title": "Portfolio site",
        "description": "A personal portfolio",
        "status": ProjectStatus.PENDING_APPROVAL.value,
        "technologies": ["React"],
    }
    values.update(fields)
    project = Project(author_id=author.id, **values)
    db.add(project)
    await db.commit()
    return project


async def create_event(db: AsyncSession, organizer: User, **fields) -> Event:
    values = {
        "title": "Python meetup",
        "description": "Monthly meetup",
        "date": datetime.utcnow() + timedelta(days=7),
        "location": "Berlin",
        "type": EventType.NETWORKING.value,
        "status": EventStatus.DRAFT.value,
    }
    values.update(fields)
    event_row = Event(organizer_id=organizer.id, **values)
    db.add(event_row)
    await db.commit()
    return event_row


def auth_headers(user: User) -> dict:
    """Bearer header with the user's id and role claims."""
    return {"Authorization": f"Bearer {create_user_token(user)}"}


# ============================================================
# USER FIXTURES
# ============================================================

@pytest_asyncio.fixture
async def company(db: AsyncSession) -> User:
    return await create_user(
        db, UserRole.COMPANY, "hr@acme.test", name="Acme HR", company="Acme Corp"
    )


@pytest_asyncio.fixture
async def other_company(db: AsyncSession) -> User:
    return await create_user(
        db, UserRole.COMPANY, "jobs@globex.test", name="Globex Hiring", company="Globex"
    )


@pytest_asyncio.fixture
async def student(db: AsyncSession) -> User:
    return await create_user(
        db, UserRole.STUDENT, "student@uni.test", name="Sam Student", skills=["Python", "SQL"]
    )


@pytest_asyncio.fixture
async def professional(db: AsyncSession) -> User:
    return await create_user(
        db, UserRole.PROFESSIONAL, "pro@dev.test", name="Pat Pro", skills=["Python", "Docker"]
    )


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    return await create_user(db, UserRole.ADMIN, "admin@itc.test", name="Ada Admin")


@pytest_asyncio.fixture
async def job(db: AsyncSession, company: User) -> Job:
    return await create_job(db, company)
