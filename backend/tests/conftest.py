"""
Pytest fixtures for testing.
"""
from types import SimpleNamespace
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import ats_service.database
from ats_service.database import Base
# Import ALL models so Base.metadata knows about all tables
from ats_service.models import Company, Job
from ats_service.services.access import AccessContext, AccessContextResolver
from ats_service.services.events import EventPublisher, get_event_publisher
from ats_service.api.dependencies import get_access_resolver

# Now import app (after we can override database)
from ats_service.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StubAccessResolver(AccessContextResolver):
    """Resolves clerk ids to fabricated contexts; unknown ids get an empty context."""

    def __init__(self, contexts: dict):
        self.contexts = contexts

    async def resolve(self, clerk_user_id: str) -> AccessContext:
        return self.contexts.get(clerk_user_id, AccessContext())


class RecordingPublisher(EventPublisher):
    """Keeps published events in memory."""

    def __init__(self):
        super().__init__(mode="log")
        self.events = []

    async def publish(self, event_name, payload) -> bool:
        self.events.append((event_name, payload))
        return True

    def names(self) -> list:
        return [name for name, _ in self.events]


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps one connection so every session sees the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test database
    original_engine = ats_service.database.engine
    original_sessionmaker = ats_service.database.AsyncSessionLocal

    ats_service.database.engine = test_engine
    ats_service.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = ats_service.database.AsyncSessionLocal()

    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        ats_service.database.engine = original_engine
        ats_service.database.AsyncSessionLocal = original_sessionmaker


@pytest.fixture
def contexts() -> dict:
    """clerk_user_id -> AccessContext, filled by the seed fixture."""
    return {}


@pytest.fixture
def resolver(contexts: dict) -> StubAccessResolver:
    return StubAccessResolver(contexts)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest_asyncio.fixture
async def async_client(
    db: AsyncSession,
    resolver: StubAccessResolver,
    publisher: RecordingPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing endpoints.

    The db fixture already replaced the engine; access resolution and event
    publishing are swapped for the in-memory stubs.
    """
    fastapi_app.dependency_overrides[get_access_resolver] = lambda: resolver
    fastapi_app.dependency_overrides[get_event_publisher] = lambda: publisher

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seed(db: AsyncSession, contexts: dict) -> SimpleNamespace:
    """
    Two companies in two organizations plus one caller per role:

    user_admin, user_recruiter, user_company_admin (org A),
    user_hiring_manager (org A), user_company_admin_b (org B), user_candidate.
    Any other clerk id resolves to a context with no role.
    """
    org_a, org_b = uuid4(), uuid4()
    company_a = Company(name="Acme Robotics", identity_organization_id=org_a)
    company_b = Company(name="Globex", identity_organization_id=org_b)
    db.add_all([company_a, company_b])
    await db.commit()

    recruiter_id = uuid4()
    company_admin_user_id = uuid4()

    contexts.update({
        "user_admin": AccessContext(
            identity_user_id=uuid4(),
            organization_ids=[uuid4()],
            roles=["platform_admin"],
            is_platform_admin=True,
        ),
        "user_recruiter": AccessContext(
            identity_user_id=uuid4(),
            recruiter_id=recruiter_id,
            roles=["recruiter"],
        ),
        "user_company_admin": AccessContext(
            identity_user_id=company_admin_user_id,
            organization_ids=[org_a],
            roles=["company_admin"],
        ),
        "user_hiring_manager": AccessContext(
            identity_user_id=uuid4(),
            organization_ids=[org_a],
            roles=["hiring_manager"],
        ),
        "user_company_admin_b": AccessContext(
            identity_user_id=uuid4(),
            organization_ids=[org_b],
            roles=["company_admin"],
        ),
        "user_candidate": AccessContext(
            identity_user_id=uuid4(),
            candidate_id=uuid4(),
            roles=["candidate"],
        ),
    })

    return SimpleNamespace(
        org_a=org_a,
        org_b=org_b,
        company_a=company_a,
        company_b=company_b,
        recruiter_id=recruiter_id,
        company_admin_user_id=company_admin_user_id,
    )


@pytest.fixture
def make_job(db: AsyncSession):
    """Factory inserting a job row directly."""
    async def _make_job(company: Company, title: str = "Software Engineer", **fields) -> Job:
        job = Job(company_id=company.id, title=title, **fields)
        db.add(job)
        await db.commit()
        await db.refresh(job)
        return job

    return _make_job
