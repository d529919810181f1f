import asyncio
import logging
import time

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from ..config import Settings
from ..dependencies import get_metrics, get_settings, get_stores
from ..errors import DecodeError, StoreError
from ..metrics import Metrics
from ..networks import MAINNET, TESTNET, NetworkId, resolve
from ..schemas import decode_telemetry
from ..store import StoreRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nodes", tags=["nodes"])


@router.post("", status_code=204)
async def push_telemetry(
    request: Request,
    stores: StoreRegistry = Depends(get_stores),
    metrics: Metrics = Depends(get_metrics),
    settings: Settings = Depends(get_settings),
):
    """Push telemetry from a node. The network is taken from the report's chain id."""
    return await handle_telemetry(request, None, stores, metrics, settings.request_timeout_seconds)


@router.post("/mainnet", status_code=204)
async def push_telemetry_mainnet(
    request: Request,
    stores: StoreRegistry = Depends(get_stores),
    metrics: Metrics = Depends(get_metrics),
    settings: Settings = Depends(get_settings),
):
    """Push telemetry from a node, defaulting to mainnet when the report has no chain id."""
    return await handle_telemetry(request, MAINNET, stores, metrics, settings.request_timeout_seconds)


@router.post("/testnet", status_code=204)
async def push_telemetry_testnet(
    request: Request,
    stores: StoreRegistry = Depends(get_stores),
    metrics: Metrics = Depends(get_metrics),
    settings: Settings = Depends(get_settings),
):
    """Push telemetry from a node, defaulting to testnet when the report has no chain id."""
    return await handle_telemetry(request, TESTNET, stores, metrics, settings.request_timeout_seconds)


class _Ingestion:
    """Progress of one request, so a timeout can be accounted to the right network."""

    def __init__(self, path_hint: NetworkId | None):
        # Until the report is decoded only the path can tell the network.
        self.network = resolve(path_hint, None)
        self.counted = False
        self.started = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self.started


async def handle_telemetry(
    request: Request,
    path_hint: NetworkId | None,
    stores: StoreRegistry,
    metrics: Metrics,
    timeout: float,
) -> Response:
    """
    Decode, resolve and store one report, recording request metrics.

    Reading the body, decoding and storing share one deadline. Reports
    resolved to a network without a store are acknowledged with 204 and
    dropped. Store failures are not retried: nodes report periodically, so
    the next report replaces whatever was lost.
    """
    ingestion = _Ingestion(path_hint)
    try:
        return await asyncio.wait_for(
            _ingest(request, path_hint, stores, metrics, ingestion), timeout=timeout,
        )
    except asyncio.TimeoutError:
        if not ingestion.counted:
            metrics.request_received(ingestion.network)
        metrics.request_failed(ingestion.network, ingestion.elapsed())
        logger.error("%s telemetry request timed out after %.1fs", ingestion.network, timeout)
        return PlainTextResponse("request timed out", status_code=408)


async def _ingest(
    request: Request,
    path_hint: NetworkId | None,
    stores: StoreRegistry,
    metrics: Metrics,
    ingestion: _Ingestion,
) -> Response:
    body = await request.body()
    ingestion.started = time.perf_counter()
    logger.debug("received node telemetry (path hint: %s)", path_hint)

    try:
        report = decode_telemetry(body)
    except DecodeError as e:
        metrics.request_received(ingestion.network)
        ingestion.counted = True
        metrics.request_failed(ingestion.network, ingestion.elapsed())
        logger.warning("rejected %s telemetry: %s", ingestion.network, e.message)
        return PlainTextResponse(f"{e.message}\n{e.body_excerpt()}", status_code=400)

    network = resolve(path_hint, report.chain.chain_id)
    ingestion.network = network
    metrics.request_received(network)
    ingestion.counted = True

    try:
        await stores.upsert(network, report)
    except StoreError as e:
        metrics.request_failed(network, ingestion.elapsed())
        logger.error("error processing %s telemetry from node %s: %s", network, report.chain.node_id, e)
        return PlainTextResponse(str(e), status_code=500)
    except Exception:
        metrics.request_failed(network, ingestion.elapsed())
        logger.exception("unexpected error storing %s telemetry from node %s", network, report.chain.node_id)
        return PlainTextResponse("internal error", status_code=500)

    metrics.request_succeeded(network, ingestion.elapsed())
    logger.debug("telemetry from node %s for %s handled", report.chain.node_id, network)
    return Response(status_code=204)
