from .nodes import router as nodes_router
from .health import router as health_router
from .metrics import router as metrics_router

__all__ = ["nodes_router", "health_router", "metrics_router"]
