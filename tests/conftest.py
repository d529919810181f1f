import pytest
from httpx import ASGITransport, AsyncClient

from telemetry_service.config import Settings
from telemetry_service.main import create_app
from telemetry_service.metrics import Metrics
from telemetry_service.store import StoreRegistry

from .helpers import sqlite_store


@pytest.fixture
async def mainnet_store(tmp_path):
    store = sqlite_store("mainnet", tmp_path / "mainnet.db")
    await store.create_schema()
    yield store
    await store.dispose()


@pytest.fixture
async def testnet_store(tmp_path):
    store = sqlite_store("testnet", tmp_path / "testnet.db")
    await store.create_schema()
    yield store
    await store.dispose()


@pytest.fixture
def stores(mainnet_store, testnet_store) -> StoreRegistry:
    return StoreRegistry({"mainnet": mainnet_store, "testnet": testnet_store})


@pytest.fixture
def metrics() -> Metrics:
    return Metrics()


@pytest.fixture
def settings() -> Settings:
    return Settings(request_timeout_seconds=10.0)


@pytest.fixture
def app(settings, stores, metrics):
    return create_app(settings, stores=stores, metrics=metrics)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
