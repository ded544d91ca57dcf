"""Tests for the liveness and readiness probes."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from cardmarket.db.database import get_session
from cardmarket.main import app


def _unreachable_store(error: Exception):
    async def override_get_session():
        mock_session = AsyncMock()
        mock_session.execute.side_effect = error
        yield mock_session

    return override_get_session


class TestLiveness:
    async def test_reports_healthy_without_database(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "service": "CardMarket",
            "status": "healthy",
            "database": None,
        }


class TestReadiness:
    async def test_ready_with_store(self, client: AsyncClient, make_card) -> None:
        """A store holding catalog rows answers the readiness query."""
        await make_card("Kuriboh")

        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["database"] == "connected"

    @pytest.mark.parametrize(
        "error",
        [
            OperationalError("SELECT 1", {}, Exception("database is locked")),
            ConnectionRefusedError("Connect call failed"),
        ],
        ids=["driver-error", "connection-refused"],
    )
    async def test_not_ready_when_store_unreachable(self, error: Exception) -> None:
        app.dependency_overrides[get_session] = _unreachable_store(error)
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/ready")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json()["status"] == "not ready"
        assert response.json()["database"] == "disconnected"
