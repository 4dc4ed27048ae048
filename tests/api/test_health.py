"""Tests for health endpoints."""

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from renewals.api.main import app
from renewals.infrastructure.catalog import CATALOG_VERSION


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_root_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


async def test_api_health_check(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["catalog_version"] == CATALOG_VERSION
    assert data["scheduler_enabled"] is False
    assert data["next_tick_at"] is None
    assert "uptime_seconds" in data


async def test_db_health(client: AsyncClient, db: Path):
    response = await client.get("/api/health/db")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"]["available"] is True
    assert data["pending_migrations"] == []


async def test_request_id_echoed(client: AsyncClient):
    response = await client.get("/api/health", headers={"X-Request-ID": "probe-1"})
    assert response.headers["X-Request-ID"] == "probe-1"
    assert response.headers["X-Response-Time"].endswith("ms")


async def test_db_health_degraded_before_migrations(client: AsyncClient):
    from renewals.infrastructure.storage.sqlite import close_pool

    # Pool opens an empty database file; no migrations have run
    try:
        response = await client.get("/api/health/db")
    finally:
        await close_pool()

    data = response.json()
    assert data["status"] == "degraded"
    assert data["pending_migrations"] == ["001"]
