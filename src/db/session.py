"""Async SQLAlchemy engine and per-request session dependency."""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import get_settings


def build_engine(database_url: str) -> AsyncEngine:
    """Create the engine; SQLite URLs (local runs, tests) skip pool health checks."""
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url, connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session for one request.

    Services only flush(); the single commit happens here once the handler
    returns, so a failure anywhere in the request rolls back all of its writes.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
