# tests/integration/test_app.py
"""Health checks, middleware and the error envelope for unexpected failures."""

import uuid

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from pydantic import SecretStr
from sqlalchemy import text

from agent_chat.api.app import create_app
from agent_chat.api.dependencies import get_conversation_service
from agent_chat.infrastructure.database.connection import DatabaseManager


@pytest.mark.integration
class TestHealth:

    async def test_liveness(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["database"] is True

    async def test_not_ready_without_database(self, async_client: AsyncClient, db_manager):
        await db_manager.disconnect()

        response = await async_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"


@pytest.mark.integration
class TestMiddleware:

    async def test_request_id_generated(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert uuid.UUID(response.headers["x-request-id"]).version == 4

    async def test_request_id_echoed(self, async_client: AsyncClient):
        request_id = str(uuid.uuid4())

        response = await async_client.get("/health", headers={"X-Request-ID": request_id})

        assert response.headers["x-request-id"] == request_id

    async def test_error_envelope_carries_request_id(self, async_client: AsyncClient):
        request_id = str(uuid.uuid4())

        response = await async_client.get("/api/v1/users/me", headers={"X-Request-ID": request_id})

        assert response.json()["requestId"] == request_id

    async def test_process_time_header(self, async_client: AsyncClient, auth_headers):
        response = await async_client.get("/api/v1/users/me", headers=auth_headers)
        assert float(response.headers["x-process-time-ms"]) >= 0

    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.integration
async def test_unexpected_error_envelope(app: FastAPI, async_client: AsyncClient, auth_headers):
    def broken_service():
        raise RuntimeError("connection pool exhausted")

    app.dependency_overrides[get_conversation_service] = broken_service

    response = await async_client.get("/api/v1/chats", headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["error"]["context"]["exception_type"] == "RuntimeError"


@pytest.mark.integration
async def test_lifespan_owns_its_connection(tmp_path, test_settings):
    settings = test_settings.model_copy(update={
        "database_url": SecretStr(f"sqlite+aiosqlite:///{tmp_path / 'lifespan.db'}"),
        "db_create_tables": True,
    })
    database = DatabaseManager()
    application = create_app(settings=settings, database=database)

    async with application.router.lifespan_context(application):
        assert await database.health_check() is True
        async with database.session() as session:
            result = await session.execute(text("SELECT count(*) FROM chats"))
            assert result.scalar_one() == 0

    assert database.is_connected is False
