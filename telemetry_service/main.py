from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import Settings, settings as default_settings
from .metrics import Metrics
from .routers import health_router, metrics_router, nodes_router
from .store import StoreRegistry


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: open the per-network pools unless the caller supplied stores
    owned = app.state.stores is None
    if owned:
        stores = StoreRegistry.from_settings(app.state.settings)
        await stores.warm_up()
        app.state.stores = stores
    yield
    # Shutdown: uvicorn has drained in-flight requests by now
    if owned:
        await app.state.stores.close()


def create_app(
    settings: Settings | None = None,
    stores: StoreRegistry | None = None,
    metrics: Metrics | None = None,
) -> FastAPI:
    """
    Build the telemetry API.

    The metrics registry is created once here and shared by every request.
    Passing stores skips opening pools from settings, which tests rely on.
    """
    app = FastAPI(
        title="Telemetry Service",
        description="Collects telemetry reports from blockchain nodes",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings or default_settings
    app.state.stores = stores
    app.state.metrics = metrics or Metrics()

    app.include_router(nodes_router)
    app.include_router(health_router)
    app.include_router(metrics_router)
    return app
