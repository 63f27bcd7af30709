"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_correlator,
    get_diagram_service,
    get_render_channel,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_correlator",
    "get_diagram_service",
    "get_render_channel",
    "get_service_cache",
]
