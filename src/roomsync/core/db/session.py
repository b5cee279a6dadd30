"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.roomsync.core.db.engine import get_engine

SessionFactory = async_sessionmaker[AsyncSession]


def get_session_factory(engine: AsyncEngine | None = None) -> SessionFactory:
    """Build a session factory bound to ``engine`` (default: the app engine).

    Services that fan work out concurrently open one session per branch
    from this factory, since an AsyncSession must not be shared between
    concurrent tasks.
    """
    return async_sessionmaker(
        bind=engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def get_session(engine: AsyncEngine | None = None) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        engine: Optional engine override for testing.

    Yields:
        AsyncSession. Callers own the transaction and must commit explicitly.
    """
    session_factory = get_session_factory(engine)
    async with session_factory() as session:
        yield session
