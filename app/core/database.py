from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from app.core.config import settings
from app.db.base_class import Base
import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


def _async_url(db_url: str) -> str:
    # If using postgresql:// or postgres://, convert to postgresql+asyncpg://
    if db_url.startswith('postgresql://'):
        return db_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
    if db_url.startswith('postgres://'):
        return db_url.replace('postgres://', 'postgresql+asyncpg://', 1)
    return db_url


def _engine_options(db_url: str) -> dict:
    if db_url.startswith('sqlite'):
        # In-memory databases must share one connection
        options = {"connect_args": {"check_same_thread": False}}
        if ':memory:' in db_url or db_url.endswith('sqlite+aiosqlite://'):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        # asyncpg-specific connect args
        "connect_args": {
            "command_timeout": settings.DB_COMMAND_TIMEOUT,
        },
    }


try:
    db_url = _async_url(settings.DATABASE_URL)
    logger.info(f"Using async database connection: {db_url.split('://')[0]}")

    engine = create_async_engine(
        db_url,
        echo=settings.SQL_ECHO,
        **_engine_options(db_url),
    )

    if db_url.startswith('sqlite'):
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    AsyncSessionLocal = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autocommit=False,
        autoflush=False
    )
except OperationalError as e:
    logger.error(f"Failed to connect to database: {e}")
    raise

# Dependency to use in FastAPI endpoints
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides an async database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

# Context manager for use in scripts and tests
@asynccontextmanager
async def get_db_context():
    """
    Context manager for database sessions outside of request handlers.
    """
    session = AsyncSessionLocal()
    try:
        yield session
    finally:
        await session.close()

async def initialize_db():
    """
    Verify the database is reachable and optionally create the tables.
    """
    # Register every model on the metadata
    import app.db.base  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if settings.AUTO_CREATE_TABLES:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")
    logger.info("Database connection initialized successfully")
    return True

async def close_db_connection():
    """
    Close database connection pool.
    """
    await engine.dispose()
    logger.info("Database connection pool closed")
