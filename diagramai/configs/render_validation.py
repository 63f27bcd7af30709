"""
Render validation configuration settings.

Controls the browser round-trip validation loop: verdict timeout,
repair budget and the fallback policy for unanswered validations.

Dependencies: pydantic, pydantic_settings
System role: Validation loop configuration
"""

from pydantic import Field

from diagramai.configs.base import BaseSettings, env_config


class RenderValidationSettings(BaseSettings):
    """Render validation loop configuration."""

    model_config = env_config("RENDER_VALIDATION_")

    enabled: bool = Field(default=True, description="Validate drafts in the browser when possible")
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a render verdict before falling back",
    )
    max_repair_attempts: int = Field(
        default=40,
        ge=0,
        description="Maximum number of repair calls for a single request",
    )
    optimistic_fallback: bool = Field(
        default=True,
        description="Treat timed out or undeliverable validations as successful renders",
    )
