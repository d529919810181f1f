import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import Settings
from ..dependencies import get_settings, get_stores
from ..store import StoreRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check(
    stores: StoreRegistry = Depends(get_stores),
    settings: Settings = Depends(get_settings),
):
    """Healthy only if every configured database answers a trivial query."""
    try:
        results = await asyncio.wait_for(stores.ping_all(), timeout=settings.request_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error("health check timed out after %.1fs", settings.request_timeout_seconds)
        return JSONResponse({"status": "unhealthy", "failed": sorted(s.network for s in stores)}, status_code=500)

    failed = []
    for network, error in results.items():
        if error is not None:
            logger.error("%s database error: %s", network, error)
            failed.append(network)

    if failed:
        return JSONResponse({"status": "unhealthy", "failed": sorted(failed)}, status_code=500)

    logger.debug("health check: success")
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
