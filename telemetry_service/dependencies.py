from fastapi import Request

from .config import Settings
from .metrics import Metrics
from .store import StoreRegistry


def get_stores(request: Request) -> StoreRegistry:
    return request.app.state.stores


def get_metrics(request: Request) -> Metrics:
    return request.app.state.metrics


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
