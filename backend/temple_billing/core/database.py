"""
Temple Billing - Database and Redis connections
SQLAlchemy async session, Redis session store pool and the declarative Base
"""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
import redis.asyncio as redis

from temple_billing.core.config import settings


def _engine_options() -> dict:
    """Pool options; SQLite runs on a single file and takes none"""
    if settings.is_sqlite:
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # SQL logging in DEBUG only
    **_engine_options(),
)

_redis_pool: Optional[redis.ConnectionPool] = None

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base"""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped database session
    Commits when the request succeeds, rolls back otherwise
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


async def init_db() -> None:
    """Create tables (development; production uses alembic)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ============================================================================
# Redis
# ============================================================================

async def get_redis_pool() -> redis.ConnectionPool:
    """Redis connection pool (singleton)"""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(settings.REDIS_URL)
    return _redis_pool


async def get_redis() -> AsyncGenerator[redis.Redis, None]:
    """Redis client dependency"""
    pool = await get_redis_pool()
    client = redis.Redis(connection_pool=pool)
    try:
        yield client
    finally:
        await client.aclose()


async def close_redis_pool() -> None:
    """Close the Redis pool on shutdown"""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None
