"""Database engine management."""

import ssl
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from src.roomsync.core.config import get_settings

_engine: AsyncEngine | None = None


def _ssl_context(ssl_mode: str) -> ssl.SSLContext | None:
    """Map a libpq style sslmode onto an SSL context for asyncpg."""
    if ssl_mode == "disable":
        return None
    context = ssl.create_default_context()
    if ssl_mode in ("verify-ca", "verify-full"):
        context.check_hostname = ssl_mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    else:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def build_engine(database_url: str) -> AsyncEngine:
    """Create an engine for PostgreSQL (asyncpg) or SQLite (aiosqlite).

    SQLite is used for local runs and tests. Each connection is opened per
    checkout so concurrent room purges do not share one connection.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_async_engine(database_url, poolclass=NullPool)

    settings = get_settings()

    connect_args: dict[str, Any] = {}
    context = _ssl_context(settings.database_ssl_mode)
    if context is not None:
        connect_args["ssl"] = context
    return create_async_engine(
        database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings().database_url)
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
