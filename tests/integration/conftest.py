"""Integration-test fixtures.

All integration tests share a single event loop so the module-level
SQLAlchemy async engine pool (created at import time) stays valid across the
whole session. Requires a PostgreSQL database migrated with ``alembic upgrade head``.
"""

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app


def unique_merchant() -> dict[str, str]:
    """Fresh registration payload so repeated runs never collide."""
    digits = f"{uuid.uuid4().int % 10**10:010d}"
    return {
        "phone": digits,
        "password": "Boutique2026",
        "business_name": f"Boutique {digits[-4:]}",
    }


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: AsyncClient) -> dict[str, str]:
    """Register a merchant and return Authorization headers for it."""
    merchant = unique_merchant()
    resp = await client.post("/api/v1/auth/register", json=merchant)
    assert resp.status_code == 201, resp.text
    login = await client.post(
        "/api/v1/auth/login",
        json={"phone": merchant["phone"], "password": merchant["password"]},
    )
    token = login.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}
