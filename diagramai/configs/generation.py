"""
Generation provider configuration settings.

Model selection, sampling and timeout settings for the diagram agent.

Dependencies: pydantic, pydantic_settings
System role: Text-generation provider configuration
"""

from pydantic import Field

from diagramai.configs.base import BaseSettings, env_config


class GenerationSettings(BaseSettings):
    """Generation provider configuration."""

    model_config = env_config("GENERATION_")

    model_id: str = Field(default="gemini-2.5-flash", description="Chat model identifier")
    api_key: str | None = Field(
        default=None,
        description="Provider API key (falls back to GOOGLE_API_KEY when unset)",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on a single draft or repair call",
    )
    history_window: int = Field(
        default=5,
        ge=0,
        description="Number of recent chat turns included in prompts",
    )
    syntax_guide_path: str | None = Field(
        default=None,
        description="Optional path to a Mermaid syntax reference included in prompts",
    )
