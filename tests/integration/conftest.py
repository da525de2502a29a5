"""Integration test fixtures: the real app over an in-memory database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from employee_mgmt.api.app import create_app
from employee_mgmt.clock import FixedClock
from employee_mgmt.config import Settings
from employee_mgmt.database import create_tables


@pytest_asyncio.fixture
async def app(settings: Settings, clock: FixedClock) -> AsyncGenerator[FastAPI, None]:
    """Application with tables created up front (ASGITransport skips lifespan)."""
    app = create_app(settings, clock=clock)
    await create_tables(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def signup(
    client: AsyncClient,
    email: str,
    role: str = "employee",
    first_name: str = "Test",
    last_name: str = "User",
    password: str = "secret-pass",
) -> dict[str, Any]:
    """Sign up an account and return the response body (user + token)."""
    response = await client.post(
        "/api/auth/signup",
        json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def admin(client: AsyncClient) -> dict[str, Any]:
    return await signup(client, "admin@example.com", role="admin", first_name="Ada", last_name="Admin")


@pytest_asyncio.fixture
async def admin_headers(admin: dict[str, Any]) -> dict[str, str]:
    return bearer(admin["token"])


@pytest_asyncio.fixture
async def employee(client: AsyncClient) -> dict[str, Any]:
    return await signup(client, "eve@example.com", first_name="Eve", last_name="Worker")


@pytest_asyncio.fixture
async def employee_headers(employee: dict[str, Any]) -> dict[str, str]:
    return bearer(employee["token"])
