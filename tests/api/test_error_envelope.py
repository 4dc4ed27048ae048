"""Tests for the error envelope produced by the API error handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from renewals.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from renewals.api.middleware.error_handler import setup_exception_handlers
from renewals.core.exceptions import NotifierError


@pytest.fixture
async def envelope_client():
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    setup_exception_handlers(app)

    @app.get("/notify")
    async def notify():
        raise NotifierError("email", "provider returned 502", item_id=7)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("disk on fire")

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_notifier_error_is_service_unavailable(envelope_client: AsyncClient):
    response = await envelope_client.get("/notify")

    assert response.status_code == 503
    data = response.json()
    assert data["error_code"] == "NOTIFIER_FAILURE"
    assert "next tick" in data["hint"]
    assert "item_id" in data["detail"]


async def test_unexpected_error_is_internal(envelope_client: AsyncClient):
    response = await envelope_client.get("/boom", headers={"X-Request-ID": "boom-1"})

    assert response.status_code == 500
    data = response.json()
    assert data["error_code"] == "INTERNAL_ERROR"
    assert data["path"] == "/boom"


async def test_unknown_route_uses_envelope(envelope_client: AsyncClient):
    response = await envelope_client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"
