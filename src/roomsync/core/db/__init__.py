"""Database utilities - engine and sessions."""

from src.roomsync.core.db.engine import build_engine, dispose_engine, get_engine
from src.roomsync.core.db.session import SessionFactory, get_session, get_session_factory

__all__ = [
    # Engine
    "build_engine",
    "dispose_engine",
    "get_engine",
    # Session
    "SessionFactory",
    "get_session",
    "get_session_factory",
]
