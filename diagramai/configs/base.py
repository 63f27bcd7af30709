"""
Base configuration settings.

Every settings group reads the process environment and an optional
``.env`` file under its own variable prefix.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


def env_config(prefix: str = "") -> SettingsConfigDict:
    """Settings config reading ``<prefix><FIELD>`` variables from env and .env."""
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Base class for unprefixed, application-wide settings."""

    model_config = env_config()
