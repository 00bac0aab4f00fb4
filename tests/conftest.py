# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from datetime import timedelta
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from calchub.auth.auth import AuthService
from calchub.core.translations import clear_translation_cache
from calchub.db.database import get_db
from calchub.main import app
from calchub.models.models import Base


# Test database configuration
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def fresh_translations():
    """Drop cached translations so settings patched by a test take effect."""
    clear_translation_cache()
    yield
    clear_translation_cache()


@pytest.fixture
async def db_engine():
    """In-memory database shared by every session of a single test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_engine):
    """Create an HTTP client for testing, backed by the in-memory database."""
    session_factory = async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def user_token():
    """Bearer token for test_user_123."""
    return AuthService.create_access_token({"sub": "test_user_123"})


@pytest.fixture
def auth_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def other_auth_headers():
    token = AuthService.create_access_token({"sub": "other_user_456"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_auth_headers():
    token = AuthService.create_access_token({"sub": "test_user_123"}, expires_delta=timedelta(minutes=-5))
    return {"Authorization": f"Bearer {token}"}
