"""
Exception hierarchy for the DiagramAI backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Render failures and unanswered validations are not exceptions: they are
ordinary verdicts handled by the repair loop.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DiagramAIException(Exception):
    """Base exception for all DiagramAI application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DiagramAIException):
    """Raised when caller input is rejected before generation starts."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class GenerationError(DiagramAIException):
    """Raised when the generation provider cannot be reached or times out."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize generation error.

        Args:
            message: Error message shown to the user
            stage: Loop stage that failed ("draft" or "repair")
            details: Additional context
        """
        details = details or {}
        if stage:
            details["stage"] = stage
        super().__init__(message, details)


class CorrelationConflictError(DiagramAIException):
    """Raised when a correlation ID is registered while already pending."""

    def __init__(self, correlation_id: str) -> None:
        super().__init__(
            f"Validation already pending for correlation ID: {correlation_id}",
            {"correlation_id": correlation_id},
        )


class RenderChannelError(DiagramAIException):
    """Raised when a render channel message is malformed."""

    def __init__(
        self,
        message: str,
        connection_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if connection_id:
            details["connection_id"] = connection_id
        super().__init__(message, details)
