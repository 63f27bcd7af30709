"""
Observability module.

Provides logging configuration, structured logging helpers and request ID tracking.
"""

from diagramai.observability.logger import configure_logging
from diagramai.observability.request_context import get_request_id, set_request_id

__all__ = ["configure_logging", "get_request_id", "set_request_id"]
