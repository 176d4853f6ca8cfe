"""Connections: PostgreSQL for the stores, Redis for form sessions and toast feeds."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.db.database_url,
    echo=settings.log_level == "DEBUG",
    pool_pre_ping=True,
)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)

redis_client: aioredis.Redis = aioredis.from_url(settings.db.redis_url, decode_responses=True)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: one transaction per API call, rolled back on any error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Hold the connection pools for the app's lifetime.

    Outside production the tables are created on startup; production runs
    the Alembic migration instead.
    """
    if not settings.is_production:
        from src.models import Base

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables ensured for %s", settings.environment)
    try:
        yield
    finally:
        await engine.dispose()
        await redis_client.aclose()
