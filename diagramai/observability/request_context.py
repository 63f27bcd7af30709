"""
Request ID context.

Propagates the HTTP request ID across async boundaries using contextvars,
so log records emitted deep inside the repair loop can be tied back to
the request that started it.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from contextvars import ContextVar

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str | None = None) -> str:
    """
    Set request ID in context.

    Args:
        request_id: Optional request ID (generates new if None)

    Returns:
        str: The request ID that was set
    """
    value = request_id or str(uuid.uuid4())
    request_id_ctx.set(value)
    return value


def get_request_id() -> str:
    """Get current request ID from context ("" outside a request)."""
    return request_id_ctx.get()


def clear_request_id() -> None:
    """Clear request ID from context."""
    request_id_ctx.set("")
