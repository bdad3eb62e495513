"""Async engine and session factory."""

from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings


def _connect_args(database_url: str) -> dict:
    # Supavisor in transaction mode breaks asyncpg's prepared statement cache.
    host = make_url(database_url).host or ""
    if host.endswith("pooler.supabase.com"):
        return {"statement_cache_size": 0}
    return {}


engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    connect_args=_connect_args(settings.async_database_url),
)

# Sessions outlive commit inside a unit of work, so entities stay readable.
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a bare session for infrastructure checks such as /health/detailed."""
    async with async_session_factory() as session:
        yield session
