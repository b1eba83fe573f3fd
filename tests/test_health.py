import pytest

pytestmark = pytest.mark.asyncio


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers["X-Request-ID"]


async def test_request_id_is_echoed(client):
    r = await client.get("/health", headers={"X-Request-ID": "req-42"})
    assert r.headers["X-Request-ID"] == "req-42"
