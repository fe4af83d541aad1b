"""Shared test fixtures for the CRM API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_ADMIN_PASSWORD", "")
os.environ.setdefault("APP_ENV", "test")

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.company import Company  # noqa: F401
from app.models.lead import Lead  # noqa: F401
from app.models.user import User, UserRole
from app.services.auth import create_user_token, hash_password
from app.services.broadcaster import LEADS_CHANNEL, broadcaster


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test, with all tables created."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    """Async HTTP test client bound to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def db(session_factory):
    """Direct DB session for test setup/assertions."""
    async with session_factory() as session:
        yield session


async def _create_user(db, email: str, role: UserRole, name: str) -> dict:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("testpass123"),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    token = create_user_token(user)
    return {
        "token": token,
        "user_id": str(user.id),
        "email": email,
        "name": name,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest_asyncio.fixture
async def admin_user(db):
    """An ADMIN user and their auth headers."""
    return await _create_user(db, "admin@example.com", UserRole.ADMIN, "Admin User")


@pytest_asyncio.fixture
async def sales_user(db):
    """A SALES user and their auth headers."""
    return await _create_user(db, "sales@example.com", UserRole.SALES, "Sales User")


@pytest.fixture
def lead_payload():
    """A valid create-lead body, camelCase as the web client sends it."""
    return {
        "companyName": "Acme",
        "email": "a@acme.com",
        "contactNo": "123",
        "country": "US",
        "subject": "Hi",
        "body": "Need bolts",
        "messageId": "m1",
        "threadId": "t1",
        "marketingUser": "sys",
        "date": datetime.now(timezone.utc).date().isoformat() + "T00:00:00Z",
    }


@pytest.fixture
def leads_subscription():
    """A live subscription to the leads channel, removed after the test."""
    subscription = broadcaster.join(LEADS_CHANNEL, owner="test")
    yield subscription
    broadcaster.leave(LEADS_CHANNEL, subscription)


@pytest.fixture
def drain():
    """Return a helper that pops everything queued for a subscription so far."""
    def _drain(subscription) -> list:
        messages = []
        while not subscription.queue.empty():
            messages.append(subscription.queue.get_nowait())
        return messages
    return _drain
