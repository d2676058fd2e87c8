from __future__ import annotations

import pytest
from competency_hub.api.main import app
from fastapi.testclient import TestClient
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def test_health_endpoint_returns_service_metadata() -> None:
    with TestClient(app) as client:
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-42"
    payload = response.json()
    assert payload["service"]
    # Status can be "ok" or "degraded" depending on database availability
    assert payload["status"] in ["ok", "degraded"]
    assert "database" in payload["datastores"]


async def test_health_reports_ok_when_database_answers(
    async_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        "competency_hub.api.routes.health.get_session_factory", lambda: session_factory
    )

    response = await async_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["datastores"]["database"] == {"status": "ok"}
