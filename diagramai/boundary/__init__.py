"""External system boundaries."""

from diagramai.boundary.render_channel import RenderChannel

__all__ = ["RenderChannel"]
