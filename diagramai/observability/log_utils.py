"""
Logging utilities for structured, single-line log fields.

Diagram sources and provider output are multi-line and can be long, so
every context value passes through safe_log_value before it reaches a
LogRecord.

Dependencies: logging (stdlib), diagramai.core.exceptions
System role: Logging helper functions
"""

import logging
from typing import Any

from diagramai.core.exceptions import DiagramAIException

ELLIPSIS = "..."


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value as one bounded log line.

    Strings have their whitespace collapsed so a diagram logs on one
    line. Collections are summarized by size rather than dumped.

    Args:
        value: Value to convert
        max_length: Length of the result, ellipsis included, before truncation

    Returns:
        str: Single-line representation
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        text = " ".join(value.split())
    elif isinstance(value, (list, tuple, set, frozenset)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = " ".join(str(value).split())

    if len(text) > max_length:
        return text[: max(max_length - len(ELLIPSIS), 0)] + ELLIPSIS
    return text


def preview(text: str | None, limit: int = 80) -> str:
    """Short single-line preview of diagram source or provider output."""
    if not text:
        return ""
    return safe_log_value(text, max_length=limit)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, converting every value.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Fields attached to the record
    """
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with its traceback and context.

    Details carried by a DiagramAIException become record fields;
    explicit context wins over them.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional fields attached to the record
    """
    fields: dict[str, Any] = {}
    if isinstance(exc, DiagramAIException):
        fields.update(exc.details)
        error_msg = exc.message
    else:
        error_msg = str(exc)
    fields.update(context)

    extra = {key: safe_log_value(val) for key, val in fields.items()}
    extra.update({
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(error_msg),
    })
    logger.error(message, exc_info=exc, extra=extra)
