import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("ENV", "test")
os.environ.setdefault("MONGODB_DB_NAME", "vortex_test")
os.environ.pop("WHATSAPP_WEBHOOK_SECRET", None)
os.environ.pop("COIN_PACKAGES", None)


@pytest.fixture(autouse=True)
def fresh_settings():
    from vortex.core.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db():
    """Beanie bound to an in-memory MongoDB; empty for every test."""
    from beanie import init_beanie
    from mongomock_motor import AsyncMongoMockClient

    from vortex.db.init import DOCUMENT_MODELS
    database = AsyncMongoMockClient()["vortex_test"]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    yield database


@pytest_asyncio.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    from vortex.main import app
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def user(db):
    from vortex.models.user import User
    u = User(id="uid123", display_name="Ana", coin_balance=100)
    await u.insert()
    return u


@pytest_asyncio.fixture
async def pending(user):
    from vortex.models.purchase_verification import PurchaseVerification
    v = PurchaseVerification(id="abc123", user_id=user.id, package_id="standard")
    await v.insert()
    return v
