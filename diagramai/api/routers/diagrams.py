"""Diagram generation API endpoints.

Routes:
- POST /diagrams/generate - Generate a Mermaid diagram, validated in the caller's browser

Dependencies: diagramai.application.services.diagram_service
System role: Diagram generation HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from diagramai.api.deps import get_diagram_service
from diagramai.application.services.diagram_service import DiagramService
from diagramai.core.exceptions import ValidationError
from diagramai.models.diagram import DiagramRequest, DiagramResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagrams", tags=["diagrams"])


@router.post("/generate", response_model=DiagramResponse)
async def generate_diagram(
    request: DiagramRequest,
    diagram_service: DiagramService = Depends(get_diagram_service),
) -> DiagramResponse:
    """Generate a diagram and repair it until it renders.

    Flow:
    1. Draft a diagram from the prompt, history and current diagram
    2. If the caller has a render connection, validate it in the browser
    3. Repair and re-validate failed renders up to the repair budget

    Provider and render failures are reported in the body with
    success=false, not as HTTP errors.

    Args:
        request: DiagramRequest with prompt, history and connection ID
        diagram_service: Injected DiagramService

    Returns:
        DiagramResponse: Answer, diagram source and success flag

    Raises:
        HTTPException(400): Missing prompt
        HTTPException(500): Unexpected processing error
    """
    try:
        outcome = await diagram_service.generate(request)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.exception(
            "Diagram generation failed",
            extra={"error_type": type(e).__name__, "error_msg": str(e)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Diagram generation failed: {str(e)}",
        )

    return DiagramResponse.from_outcome(outcome)
