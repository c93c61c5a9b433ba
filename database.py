import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from config.settings import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

# Create declarative base for models
Base = declarative_base()


def build_engine(url: str, **engine_kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.
    SQLite connections get foreign key enforcement switched on.
    """
    async_engine = create_async_engine(
        url,
        echo=False,
        future=True,
        **engine_kwargs,
    )

    if async_engine.dialect.name == "sqlite":
        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return async_engine


# Create async engine
engine = build_engine(DATABASE_URL)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db(seed_demo_user: bool = False):
    """
    Initialize the database by creating all tables.
    This should be called on application startup.
    """
    async with engine.begin() as conn:
        # Import models here to ensure they're registered with Base
        from database_models import User, Subscription  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)

    if seed_demo_user:
        from services.admin_service import AdminService

        async with AsyncSessionLocal() as session:
            await AdminService(session).seed_demo_user()


async def close_db():
    """
    Dispose of the process engine's connection pool.
    Awaited on shutdown so in-flight writes complete before the process exits.
    """
    await engine.dispose()
    logger.info("Database connection closed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that yields a database session.
    Use this in FastAPI route dependencies to get a database session.

    Example:
        @router.get("/users")
        async def list_users(db: AsyncSession = Depends(get_db)):
            # Use db here
            pass
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
