import pytest
import pytest_asyncio
from tortoise import Tortoise

from app.core.db import MODELS_MODULES
from app.schemas.settings import SyncSettings
from tests.factories import ENDPOINT_BASE_URL, WEBHOOK_SECRET, FakeEndpoint


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite database per test."""
    await Tortoise.init(db_url="sqlite://:memory:", modules={"models": MODELS_MODULES})
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def settings():
    return SyncSettings(endpoint_base_url=ENDPOINT_BASE_URL, webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def unconfigured_settings():
    return SyncSettings()


@pytest.fixture
def endpoint():
    return FakeEndpoint()
