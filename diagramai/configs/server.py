"""
HTTP server configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Uvicorn and CORS configuration
"""

from pydantic import Field

from diagramai.configs.base import BaseSettings, env_config


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = env_config("SERVER_")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, description="Bind port")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by CORS",
    )
