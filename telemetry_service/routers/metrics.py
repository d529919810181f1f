import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from ..dependencies import get_metrics
from ..metrics import CONTENT_TYPE, Metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def export_metrics(metrics: Metrics = Depends(get_metrics)):
    """Prometheus text exposition of the request metrics."""
    try:
        payload = metrics.render()
    except Exception as e:
        logger.exception("failed to encode metrics")
        return PlainTextResponse(str(e), status_code=500)
    return Response(content=payload, media_type=CONTENT_TYPE)
