"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from diagramai.configs.generation import GenerationSettings
from diagramai.configs.render_validation import RenderValidationSettings
from diagramai.configs.server import ServerSettings
from diagramai.configs.settings import Settings, get_settings

__all__ = [
    "GenerationSettings",
    "RenderValidationSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
]
