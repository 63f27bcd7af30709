"""API routers."""

from .diagrams import router as diagrams_router
from .health import router as health_router
from .render_ws import router as render_ws_router

__all__ = [
    "diagrams_router",
    "health_router",
    "render_ws_router",
]
