"""Database session dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.db import SessionFactory, get_session, get_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """Get database session for the request."""
    async with get_session() as session:
        yield session


def get_db_session_factory() -> SessionFactory:
    """Session factory for work that fans out over several sessions."""
    return get_session_factory()


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
DBSessionFactory = Annotated[SessionFactory, Depends(get_db_session_factory)]
