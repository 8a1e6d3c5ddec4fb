"""
Pytest fixtures for testing.
"""
import os
import tempfile
import uuid
from typing import AsyncGenerator

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("STORAGE_DIR", os.path.join(tempfile.gettempdir(), "jobboard_test_storage"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import jobboard.database
import jobboard.services.security
from jobboard.database import Base
# Import ALL models so Base.metadata knows about all tables
from jobboard.models import (
    Company,
    CompanySize,
    ExperienceLevel,
    JobPost,
    JobPosterProfile,
    JobSeekerProfile,
    JobType,
    User,
    UserRole,
    WorkMode,
)
from jobboard.services.security import create_access_token, hash_password
from jobboard.services.storage import LocalObjectStorage, get_storage

# Now import app (after we can override database)
from jobboard.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"

# Cheap hashes keep the suite fast; production uses 12 rounds
jobboard.services.security.BCRYPT_ROUNDS = 4


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # Use StaticPool to keep single connection alive and reuse it
    # This ensures all sessions see the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables FIRST
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # THEN replace the app's engine and sessionmaker
    # This ensures get_db() uses sessions connected to DB with tables
    original_engine = jobboard.database.engine
    original_sessionmaker = jobboard.database.AsyncSessionLocal

    jobboard.database.engine = test_engine
    jobboard.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    # Create session for direct test use
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = async_session()

    try:
        yield session
    finally:
        await session.close()

        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        jobboard.database.engine = original_engine
        jobboard.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced jobboard.database.engine with the test
    engine, so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True
    ) as client:
        yield client


@pytest.fixture
def storage(tmp_path) -> LocalObjectStorage:
    """Object store rooted in a per-test temp dir, wired into the app."""
    store = LocalObjectStorage(str(tmp_path / "media"), "/media")
    fastapi_app.dependency_overrides[get_storage] = lambda: store
    yield store
    fastapi_app.dependency_overrides.pop(get_storage, None)


def auth_headers(user: User) -> dict:
    """Bearer header for a user, as issued at sign-in."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}


async def make_seeker(db: AsyncSession, email: str = "seeker@example.com", first_name: str = "Sam") -> User:
    user = User(
        email=email,
        password=hash_password(TEST_PASSWORD),
        role=UserRole.JOB_SEEKER,
        first_name=first_name,
        last_name="Seeker",
    )
    db.add(user)
    await db.flush()
    db.add(JobSeekerProfile(user_id=user.id))
    await db.commit()
    return user


async def make_poster(
    db: AsyncSession,
    email: str = "poster@example.com",
    company_name: str = "Acme",
    company_slug: str = "acme"
) -> User:
    """Job poster with a company and a poster profile linked to it."""
    user = User(
        email=email,
        password=hash_password(TEST_PASSWORD),
        role=UserRole.JOB_POSTER,
        first_name="Pat",
        last_name="Poster",
    )
    db.add(user)
    await db.flush()
    company = Company(owner_id=user.id, name=company_name, slug=company_slug, size=CompanySize.SMALL)
    db.add(company)
    await db.flush()
    db.add(JobPosterProfile(user_id=user.id, company_id=company.id, can_post_jobs=True))
    await db.commit()
    return user


async def make_job(db: AsyncSession, poster: User, company_id, title: str = "Backend Engineer", **fields) -> JobPost:
    job = JobPost(
        title=title,
        slug=f"{title.lower().replace(' ', '-')}-{uuid.uuid4().hex[:8]}",
        description=fields.pop("description", f"{title} wanted"),
        requirements=fields.pop("requirements", "Python"),
        job_type=fields.pop("job_type", JobType.FULL_TIME),
        work_mode=fields.pop("work_mode", WorkMode.REMOTE),
        experience_level=fields.pop("experience_level", ExperienceLevel.MID_LEVEL),
        poster_id=poster.id,
        company_id=company_id,
        **fields
    )
    db.add(job)
    await db.commit()
    return job


@pytest_asyncio.fixture
async def seeker(db: AsyncSession) -> User:
    return await make_seeker(db)


@pytest_asyncio.fixture
async def poster(db: AsyncSession) -> User:
    return await make_poster(db)


@pytest_asyncio.fixture
async def company(db: AsyncSession, poster: User) -> Company:
    result = await db.execute(select(Company).where(Company.owner_id == poster.id))
    return result.scalar_one()


@pytest_asyncio.fixture
async def job(db: AsyncSession, poster: User, company: Company) -> JobPost:
    return await make_job(db, poster, company.id, location="Berlin", salary_min=60000, salary_max=80000)
