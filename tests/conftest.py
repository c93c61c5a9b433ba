"""
Pytest configuration and fixtures for testing
"""
import os
import tempfile

# Keep logs, update artifacts and the default database out of the working tree
_TMP_DIR = tempfile.mkdtemp(prefix="license-api-tests-")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP_DIR, "logs"))
os.environ.setdefault("UPDATES_DIR", os.path.join(_TMP_DIR, "updates"))
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import Settings
from database import Base, build_engine

# Create in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API_KEY = "Bearer test-key-0123456789"
USER_AGENT = "TestClient/1.0"
APP_VERSION = "2.5"
DEFAULT_ENTITLEMENT = "Basic"


@pytest.fixture
def test_settings(tmp_path):
    """Settings with known credentials and a private updates directory."""
    return Settings(
        api_key=API_KEY,
        user_agent=USER_AGENT,
        app_version=APP_VERSION,
        default_entitlement_type=DEFAULT_ENTITLEMENT,
        default_subscription_days=30,
        updates_dir=tmp_path / "updates",
        public_base_url="http://updates.test",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
async def test_engine():
    """
    Fresh in-memory engine per test.
    StaticPool keeps every session on the same connection, so they all see
    the same in-memory database.
    """
    # Import models to ensure they're registered with Base
    import database_models  # noqa: F401

    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """
    Fixture that provides an isolated, in-memory SQLite session for each test.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
def auth_headers():
    return {"Authorization": API_KEY, "User-Agent": f"{USER_AGENT} (Windows NT 10.0)"}


@pytest.fixture
async def async_client(session_factory, test_settings):
    """
    Async HTTP client fixture with test database and settings overrides.
    """
    from main import app
    from access_guard import get_settings
    from database import get_db

    # Override get_db dependency to use test database
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Cleanup: remove dependency override
    app.dependency_overrides.clear()
