"""DiagramAI backend: natural-language Mermaid generation with render validation."""

__version__ = "0.1.0"
