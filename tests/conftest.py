"""Root test fixtures shared across all test types.

Services and the HTTP API run against a throwaway SQLite database (via
aiosqlite) created from the model metadata. Each concurrent branch of a
room purge opens its own connection, so the database lives in a file
rather than in memory.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./roomsync-test.db")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
os.environ.setdefault("IDENTITY_JWT_KEY", "test-identity-key-that-is-long-enough-123")
os.environ.setdefault("SUPER_ADMIN_CODES", "OPEN-SESAME,backup-code")
os.environ.setdefault("RESUME_GRACE_ON_STARTUP", "false")
os.environ.setdefault("GRACE_RECHECK_DELAY_SECONDS", "0")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import SQLModel

import src.roomsync.models  # noqa: F401 - register tables on the metadata
from src.roomsync.core.config import get_settings
from src.roomsync.core.db import SessionFactory, build_engine, get_session_factory
from src.roomsync.core.exceptions import EntitlementLookupError
from tests.fakes import (
    FakeEntitlements,
    FakeIdentityProvider,
    FakeScheduler,
    RecordingEventBus,
)

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Database ---


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Fresh database per test with every table created."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'roomsync.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> SessionFactory:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Session for arranging test data. Tests commit explicitly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def check_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Independent session for asserting on committed state."""
    async with session_factory() as session:
        yield session


# --- Collaborators ---


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def entitlements() -> FakeEntitlements:
    return FakeEntitlements()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def lookup_error() -> EntitlementLookupError:
    return EntitlementLookupError("Could not reach billing provider: timeout")
