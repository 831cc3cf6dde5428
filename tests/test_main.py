"""Application wiring: health, request ids and error envelopes."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from tourism.boot import ServiceStatus


@pytest.mark.asyncio
async def test_health_when_all_services_healthy(public_client: AsyncClient) -> None:
    response = await public_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"] == {"database": True, "redis": True}
    assert "timestamp" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_health_returns_503_on_database_failure(public_client: AsyncClient) -> None:
    from tourism.database import get_db
    from tourism.main import app

    async def failing_db():
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("DB Down")))
        yield session

    app.dependency_overrides[get_db] = failing_db
    try:
        response = await public_client.get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["checks"]["database"] is False


@pytest.mark.asyncio
async def test_health_returns_503_on_redis_failure(public_client: AsyncClient) -> None:
    with patch(
        "tourism.main.Bootloader._check_redis",
        new_callable=AsyncMock,
        return_value=ServiceStatus("redis", "error", "Connection refused"),
    ):
        response = await public_client.get("/health")

    assert response.status_code == 503
    assert response.json()["checks"]["redis"] is False


@pytest.mark.asyncio
async def test_request_id_is_echoed(public_client: AsyncClient) -> None:
    response = await public_client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated_when_missing(public_client: AsyncClient) -> None:
    response = await public_client.get("/health")
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_unknown_route_uses_failure_envelope(public_client: AsyncClient) -> None:
    response = await public_client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


@pytest.mark.asyncio
async def test_malformed_json_is_a_validation_failure(public_client: AsyncClient) -> None:
    response = await public_client.post(
        "/auth/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_unhandled_exception_becomes_generic_500(session_maker) -> None:
    from tourism.main import app

    router = APIRouter()

    @router.get("/_boom")
    async def boom() -> None:
        raise RuntimeError("secret internals")

    app.include_router(router)
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/_boom")
    finally:
        app.router.routes[:] = [route for route in app.router.routes if getattr(route, "path", None) != "/_boom"]

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert "secret internals" not in response.text
