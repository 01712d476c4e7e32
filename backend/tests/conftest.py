"""
Hospeda Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (in-memory database, actors,
       mocked repositories, API client).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: in-memory SQLite (aiosqlite) with every table created
    ├── db_session: AsyncSession bound to db_engine
    ├── *_actor: super admin, admin, editor, host, plain user, guest
    ├── mock_db_session / mock_repository: no database at all
    ├── destination_payload: builder for valid destination input
    └── test_client: HTTPX AsyncClient talking to a fresh app
"""

import os
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import hospeda.models  # noqa: E402,F401
from hospeda.database import Base, get_db_session  # noqa: E402
from hospeda.enums import PermissionEnum as P  # noqa: E402
from hospeda.enums import RoleEnum  # noqa: E402
from hospeda.models import Destination  # noqa: E402
from hospeda.permissions import GUEST_ACTOR, Actor  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared by every connection of the test (StaticPool),
    so rows written through one session are visible to the next request.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Actors
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def super_admin_actor():
    return Actor.build(uuid4(), RoleEnum.SUPER_ADMIN)


@pytest.fixture
def admin_actor():
    return Actor.build(uuid4(), RoleEnum.ADMIN)


@pytest.fixture
def editor_actor():
    """Manages destinations and tags but holds no elevated role."""
    return Actor.build(
        uuid4(),
        RoleEnum.EDITOR,
        [
            P.DESTINATION_CREATE,
            P.DESTINATION_UPDATE,
            P.DESTINATION_DELETE,
            P.DESTINATION_RESTORE,
            P.TAG_CREATE,
            P.TAG_UPDATE,
        ],
    )


@pytest.fixture
def host_actor():
    """Owns accommodations: create plus the *.own permissions."""
    return Actor.build(
        uuid4(),
        RoleEnum.HOST,
        [
            P.ACCOMMODATION_CREATE,
            P.ACCOMMODATION_UPDATE_OWN,
            P.ACCOMMODATION_DELETE_OWN,
            P.ACCOMMODATION_RESTORE_OWN,
        ],
    )


@pytest.fixture
def user_actor():
    return Actor.build(uuid4(), RoleEnum.USER)


@pytest.fixture
def guest_actor():
    return GUEST_ACTOR


# ══════════════════════════════════════════════════════════════════════════
# Mocks
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock standing in for AsyncSession.
    Why:     Service unit tests should not require a real database.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_repository():
    """
    Destination repository double. Lookups find nothing unless a test says
    otherwise, so slug generation terminates on the first candidate.
    """
    repository = MagicMock()
    repository.model = Destination
    repository.find_by_id = AsyncMock(return_value=None)
    repository.find_one = AsyncMock(return_value=None)
    repository.find_all = AsyncMock(return_value=([], 0))
    repository.count = AsyncMock(return_value=0)
    repository.create = AsyncMock()
    repository.update = AsyncMock()
    repository.soft_delete = AsyncMock(return_value=1)
    repository.restore = AsyncMock(return_value=1)
    repository.hard_delete = AsyncMock(return_value=1)
    return repository


# ══════════════════════════════════════════════════════════════════════════
# Payload builders
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def destination_payload():
    """Returns a builder for a valid destination create payload."""

    def build(**overrides):
        payload = {
            "name": "Colón",
            "summary": "Thermal springs on the Uruguay river.",
            "description": "Colón is a riverside town in Entre Ríos known for its beaches and hot springs.",
            "city": "Colón",
            "state": "Entre Ríos",
            "country": "Argentina",
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def sample_entity_fields():
    """Attributes every stored row carries, for SimpleNamespace stand-ins."""
    now = datetime.now(timezone.utc)
    return {
        "id": uuid4(),
        "created_at": now,
        "updated_at": now,
        "created_by_id": None,
        "updated_by_id": None,
        "deleted_at": None,
        "deleted_by_id": None,
        "lifecycle_state": "ACTIVE",
        "visibility": "PUBLIC",
        "moderation_state": "APPROVED",
    }


# ══════════════════════════════════════════════════════════════════════════
# HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to a fresh FastAPI app.
    How:     ASGITransport routes requests directly to the app; the session
             dependency is overridden to use the in-memory test database.
             The lifespan does not run under ASGITransport, so no startup
             database check happens.
    """
    from hospeda.main import create_app

    app = create_app()
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
