"""Pytest fixtures for employee management tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, time
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from employee_mgmt.clock import FixedClock
from employee_mgmt.config import Settings
from employee_mgmt.database import create_engine_for, create_session_factory, create_tables
from employee_mgmt.security import ROLE_ADMIN
from employee_mgmt.services.auth_service import AuthService
from employee_mgmt.services.document_service import DocumentStorage

# Use in-memory SQLite for tests; every test gets its own database
TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_SECRET = "test-signing-secret-0123456789abcdef"

# Monday morning, before the late cutoff
DEFAULT_NOW = datetime(2024, 6, 3, 8, 30, 0)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at DEFAULT_NOW; tests move it with ``clock.set``."""
    return FixedClock(DEFAULT_NOW)


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir: Path) -> DocumentStorage:
    return DocumentStorage(upload_dir)


@pytest.fixture
def settings(upload_dir: Path) -> Settings:
    """Settings pointing at an in-memory database and a temporary upload dir."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_SECRET,
        token_ttl_hours=24,
        upload_dir=upload_dir,
        max_upload_bytes=10 * 1024 * 1024,
        late_cutoff=time(9, 0, 0),
        host="127.0.0.1",
        port=5000,
        debug=False,
        log_level="INFO",
        cors_origins=["*"],
    )


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_engine_for(TEST_DATABASE_URL)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with create_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def auth(session: AsyncSession) -> AuthService:
    return AuthService(session, TEST_SECRET)


@pytest_asyncio.fixture
async def admin_user(auth: AuthService):
    """Admin account (no employee profile)."""
    return await auth.create_account("Ada", "Admin", "admin@example.com", "admin-pass", ROLE_ADMIN)


@pytest_asyncio.fixture
async def employee_user(auth: AuthService):
    """Employee account with its auto-provisioned profile."""
    return await auth.create_account("Eve", "Worker", "eve@example.com", "eve-pass")
