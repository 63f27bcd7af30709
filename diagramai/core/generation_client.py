"""
Generation client interface.

The repair loop only depends on these two coroutines; DiagramAgent is
the production implementation and tests substitute fakes.

Dependencies: typing, diagramai.models.generation
System role: Seam between the repair loop and the text-generation provider
"""

from typing import Protocol

from diagramai.models.generation import DraftResult, GenerationContext


class GenerationClient(Protocol):
    """Produces diagram drafts and repairs."""

    async def draft(self, context: GenerationContext) -> DraftResult:
        """Produce a diagram and explanation for the request in context."""
        ...

    async def repair(
        self,
        context: GenerationContext,
        prior_diagram: str,
        error: str,
    ) -> DraftResult:
        """
        Produce a corrected diagram.

        Implementations must keep the diagram type of prior_diagram and
        make the smallest edit that addresses error.
        """
        ...
