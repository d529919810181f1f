"""Tests for the application factory and its lifespan."""

from httpx import ASGITransport, AsyncClient

from telemetry_service.config import Settings
from telemetry_service.main import create_app
from telemetry_service.store import StoreRegistry


class TestLifespan:

    async def test_opens_warms_and_closes_pools_from_settings(self, tmp_path) -> None:
        cfg = Settings(_env_file=None, database_url=f"sqlite+aiosqlite:///{tmp_path}", min_connections=2)
        app = create_app(cfg)
        assert app.state.stores is None

        async with app.router.lifespan_context(app):
            stores = app.state.stores
            assert isinstance(stores, StoreRegistry)
            assert sorted(store.network for store in stores) == ["mainnet", "testnet"]
            for store in stores:
                assert store.engine.pool.checkedin() >= 2

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                resp = await client.get("/healthz")
            assert resp.status_code == 200

        for store in stores:
            assert store.engine.pool.checkedin() == 0
        assert (tmp_path / "mainnet").exists()
        assert (tmp_path / "testnet").exists()

    async def test_supplied_stores_are_left_open(self, stores) -> None:
        app = create_app(Settings(_env_file=None), stores=stores)
        async with app.router.lifespan_context(app):
            assert app.state.stores is stores
        assert await stores.ping_all() == {"mainnet": None, "testnet": None}
