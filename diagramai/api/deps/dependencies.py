"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived components (the
validation correlator, the render channel and the generation client) are
created once per process and shared by every request.

Dependencies: diagramai.configs, diagramai.core, diagramai.boundary, diagramai.application
System role: DI container for service injection
"""

from diagramai.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._correlator = None
        self._render_channel = None
        self._generation_client = None
        self._orchestrator = None
        self._diagram_service = None

    @property
    def settings(self) -> Settings:
        """Get settings used to build services."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def correlator(self):
        """Get cached validation correlator."""
        if self._correlator is None:
            from diagramai.core.validation_correlator import ValidationCorrelator

            config = self.settings.render_validation
            self._correlator = ValidationCorrelator(
                timeout_seconds=config.timeout_seconds,
                optimistic_fallback=config.optimistic_fallback,
            )
        return self._correlator

    @property
    def render_channel(self):
        """Get cached render channel."""
        if self._render_channel is None:
            from diagramai.boundary.render_channel import RenderChannel

            self._render_channel = RenderChannel(correlator=self.correlator)
        return self._render_channel

    @property
    def generation_client(self):
        """Get cached generation client."""
        if self._generation_client is None:
            # Lazy import to avoid loading the provider SDK at startup
            from diagramai.core.agentic_system.diagram_agent import DiagramAgent
            from diagramai.core.agentic_system.diagram_agent.diagram_agent_prompt import (
                load_syntax_guide,
            )

            config = self.settings.generation
            self._generation_client = DiagramAgent(
                model_id=config.model_id,
                temperature=config.temperature,
                api_key=config.api_key,
                history_window=config.history_window,
                syntax_guide=load_syntax_guide(config.syntax_guide_path),
            )
        return self._generation_client

    @generation_client.setter
    def generation_client(self, client) -> None:
        self._generation_client = client
        self._orchestrator = None
        self._diagram_service = None

    @property
    def orchestrator(self):
        """Get cached repair orchestrator."""
        if self._orchestrator is None:
            from diagramai.core.repair_orchestrator import RepairOrchestrator

            self._orchestrator = RepairOrchestrator(
                generation_client=self.generation_client,
                correlator=self.correlator,
                render_channel=self.render_channel,
                max_repair_attempts=self.settings.render_validation.max_repair_attempts,
                generation_timeout_seconds=self.settings.generation.timeout_seconds,
            )
        return self._orchestrator

    @property
    def diagram_service(self):
        """Get cached diagram service."""
        if self._diagram_service is None:
            from diagramai.application.services import DiagramService

            self._diagram_service = DiagramService(
                orchestrator=self.orchestrator,
                validation_enabled=self.settings.render_validation.enabled,
            )
        return self._diagram_service

    def clear(self) -> None:
        """Clear all cached instances, dropping pending validations."""
        if self._correlator is not None:
            self._correlator.clear()
        self._correlator = None
        self._render_channel = None
        self._generation_client = None
        self._orchestrator = None
        self._diagram_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_correlator():
    """
    Get the shared validation correlator.

    Returns:
        ValidationCorrelator: Process-wide registry of pending validations
    """
    return get_service_cache().correlator


def get_render_channel():
    """
    Get the shared render channel.

    Returns:
        RenderChannel: Registry of connected render clients
    """
    return get_service_cache().render_channel


def get_diagram_service():
    """
    Get diagram service instance.

    Returns:
        DiagramService: Service wired to the shared repair loop
    """
    return get_service_cache().diagram_service
