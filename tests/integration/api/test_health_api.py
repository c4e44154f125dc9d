import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_healthcheck(client: AsyncClient):
    res = await client.get("/api/v1/healthcheck")

    assert res.status_code == 200
    assert res.content == b""


@pytest.mark.asyncio
async def test_correlation_id_generated(client: AsyncClient):
    res = await client.get("/api/v1/healthcheck")

    assert res.headers["X-Correlation-ID"].startswith("cid_")


@pytest.mark.asyncio
async def test_correlation_id_echoed(client: AsyncClient):
    res = await client.get(
        "/api/v1/healthcheck", headers={"X-Correlation-ID": "cid_from_caller"}
    )

    assert res.headers["X-Correlation-ID"] == "cid_from_caller"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(client: AsyncClient):
    res = await client.get("/api/v1/nope")

    assert res.status_code == 404
    assert res.json() == {"error": "Not Found"}
