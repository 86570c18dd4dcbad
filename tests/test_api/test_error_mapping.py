"""Tests for infrastructure failures surfacing through the API."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from plm.infra.database import Database


def _pool_exhausted() -> AsyncMock:
    return AsyncMock(side_effect=PoolTimeoutError("QueuePool limit of size 20 overflow 0 reached"))


class TestPoolExhaustion:
    """No connection available within the pool timeout means 503."""

    @pytest.mark.asyncio
    async def test_read_returns_503(self, client: AsyncClient):
        with patch.object(Database, "run", _pool_exhausted()):
            response = await client.get("/garments")

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "unavailable"
        assert body["error"] == "Database busy, retry later"

    @pytest.mark.asyncio
    async def test_write_returns_503_and_nothing_is_stored(self, client: AsyncClient):
        with patch.object(Database, "run", _pool_exhausted()):
            response = await client.post("/materials", json={"name": "Cotton"})

        assert response.status_code == 503
        assert response.json()["error_type"] == "unavailable"
        assert (await client.get("/materials")).json() == []
