"""Tests for the global error handling middleware."""

from __future__ import annotations

import pytest
from fastapi import APIRouter, HTTPException
from httpx import ASGITransport, AsyncClient

from barrelcoach.core.errors import NotFoundError, UpstreamError
from barrelcoach.main import app

# Register test-only routes once
_TEST_ROUTER = APIRouter()


@_TEST_ROUTER.get("/__test__/upstream-error")
async def trigger_upstream_error() -> None:
    raise UpstreamError("Scoring engine error: 503", details={"status": 503})


@_TEST_ROUTER.get("/__test__/not-found")
async def trigger_not_found() -> None:
    raise NotFoundError("Session not found")


@_TEST_ROUTER.get("/__test__/http-error")
async def trigger_http_error() -> None:
    raise HTTPException(status_code=409, detail="conflict")


@_TEST_ROUTER.get("/__test__/crash")
async def trigger_crash() -> None:
    raise RuntimeError("boom")


@_TEST_ROUTER.get("/__test__/requires-param")
async def requires_param(limit: int) -> dict[str, int]:
    return {"limit": limit}


if not any(getattr(route, "path", None) == "/__test__/upstream-error" for route in app.router.routes):
    app.include_router(_TEST_ROUTER)


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_upstream_error_response(client) -> None:
    response = await client.get("/__test__/upstream-error")

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == {
        "code": "upstream_error",
        "message": "Scoring engine error: 503",
        "details": {"status": 503},
    }
    assert response.headers["X-Correlation-ID"] == payload["correlation_id"]


@pytest.mark.asyncio
async def test_correlation_id_passthrough(client) -> None:
    response = await client.get("/__test__/not-found", headers={"X-Correlation-ID": "corr-123"})

    assert response.status_code == 404
    assert response.headers["X-Correlation-ID"] == "corr-123"
    assert response.json()["correlation_id"] == "corr-123"
    assert response.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_http_exception_shape(client) -> None:
    response = await client.get("/__test__/http-error")

    assert response.status_code == 409
    assert response.json()["error"] == {"code": "http_error", "message": "conflict"}


@pytest.mark.asyncio
async def test_validation_error_is_invalid_argument(client) -> None:
    response = await client.get("/__test__/requires-param", params={"limit": "many"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "invalid_argument"
    assert error["details"]["errors"][0]["loc"] == ["query", "limit"]


@pytest.mark.asyncio
async def test_unexpected_error_is_internal(client) -> None:
    response = await client.get("/__test__/crash")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "internal_server_error"
    assert error["details"] == {"type": "RuntimeError"}
