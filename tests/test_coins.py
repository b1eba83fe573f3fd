import pytest

from vortex.core.config import get_settings
from vortex.services import coin_packages

pytestmark = pytest.mark.asyncio


async def test_list_packages(client):
    r = await client.get("/v1/coins/packages")
    assert r.status_code == 200
    assert r.json() == {
        "packages": [
            {"id": "basic", "coins": 40},
            {"id": "standard", "coins": 80},
            {"id": "premium", "coins": 120},
            {"id": "pro", "coins": 300},
        ]
    }


async def test_get_package(client):
    r = await client.get("/v1/coins/packages/pro")
    assert r.status_code == 200
    assert r.json() == {"id": "pro", "coins": 300}


async def test_unknown_package_is_404(client):
    r = await client.get("/v1/coins/packages/doesnotexist")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


async def test_catalog_from_env(monkeypatch):
    monkeypatch.setenv("COIN_PACKAGES", '{"mini": 5, "mega": 1000}')
    get_settings.cache_clear()
    assert [p.id for p in coin_packages.list_packages()] == ["mini", "mega"]
    assert coin_packages.get_package("basic") is None
    assert coin_packages.get_package("mega").coins == 1000
    assert coin_packages.get_package(None) is None
