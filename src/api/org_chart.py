"""API endpoints for chart layout, reassignment checks and the interaction log."""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from src.api.employees import get_org_chart_service
from src.schemas.org_chart import (
    EdgeResponse,
    LayoutResponse,
    NodePositionResponse,
    ReassignmentRequest,
    ReassignmentValidationResponse,
)
from src.services.interaction_log import (
    InteractionType,
    clear_logs,
    get_interaction_stats,
    get_logs_by_type,
    get_recent_logs,
)
from src.services.org_chart_service import OrgChartService


# =============================================================================
# Response Models
# =============================================================================

class InteractionLogResponse(BaseModel):
    """Recent interactions and session statistics."""

    data: List[Dict[str, Any]]
    stats: Dict[str, Any]


# =============================================================================
# Router Setup
# =============================================================================

org_chart_router = APIRouter(
    prefix="/api/org-chart",
    tags=["Org Chart"],
)


@org_chart_router.get(
    "/layout",
    response_model=LayoutResponse,
    summary="Get Chart Layout",
    description=(
        "Canvas coordinates for every employee card. Managers sit centred "
        "above their direct reports; levels are stacked top to bottom."
    ),
)
async def get_layout(
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> LayoutResponse:
    result = service.get_layout()
    return LayoutResponse(
        nodes=[
            NodePositionResponse(id=p.id, x=p.x, y=p.y, level=p.level)
            for p in result.positions.values()
        ],
        edges=[EdgeResponse(source=source, target=target) for source, target in result.edges],
        width=result.width,
        height=result.height,
    )


@org_chart_router.post(
    "/validate-reassignment",
    response_model=ReassignmentValidationResponse,
    summary="Validate Reassignment",
    description="Check a manager change without applying it.",
)
async def validate_reassignment(
    body: ReassignmentRequest,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> ReassignmentValidationResponse:
    result = service.validate_reassignment(body.employee_id, body.proposed_manager_id)
    payload = result.to_dict()
    return ReassignmentValidationResponse(
        employee_id=body.employee_id,
        proposed_manager_id=body.proposed_manager_id,
        is_valid=payload["is_valid"],
        errors=payload["errors"],
    )


@org_chart_router.get(
    "/interactions",
    response_model=InteractionLogResponse,
    summary="Get Interaction Log",
)
async def get_interactions(
    request: Request,
    interaction_type: Annotated[Optional[InteractionType], Query(alias="type")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> InteractionLogResponse:
    state = request.app.state.interactions
    entries = (
        get_logs_by_type(state, interaction_type)[-limit:]
        if interaction_type is not None
        else get_recent_logs(state, limit)
    )
    return InteractionLogResponse(
        data=[
            {
                "id": entry.id,
                "timestamp": entry.timestamp.isoformat(),
                "type": entry.type.value,
                "payload": entry.payload,
            }
            for entry in entries
        ],
        stats=get_interaction_stats(state),
    )


@org_chart_router.delete(
    "/interactions",
    status_code=204,
    summary="Clear Interaction Log",
)
async def clear_interactions(request: Request) -> None:
    request.app.state.interactions = clear_logs(request.app.state.interactions)
