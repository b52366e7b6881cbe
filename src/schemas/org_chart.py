"""Pydantic models for org chart layout and reassignment endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class NodePositionResponse(BaseModel):
    """Top-left canvas coordinate of one employee card."""

    id: str = Field(..., description="Employee id")
    x: float = Field(..., description="Horizontal position, increasing rightward")
    y: float = Field(..., description="Vertical position, increasing downward")
    level: int = Field(..., description="Depth from the nearest root (0 = root)")


class EdgeResponse(BaseModel):
    """Directed reporting edge."""

    source: str = Field(..., description="Manager id")
    target: str = Field(..., description="Direct report id")


class LayoutResponse(BaseModel):
    """Computed chart layout."""

    nodes: List[NodePositionResponse] = Field(default_factory=list)
    edges: List[EdgeResponse] = Field(default_factory=list)
    width: float = Field(..., description="Bounding box width")
    height: float = Field(..., description="Bounding box height")


class ReassignmentRequest(BaseModel):
    """Proposed manager change for an employee."""

    employee_id: str = Field(..., description="Employee being moved")
    proposed_manager_id: Optional[str] = Field(None, description="New manager, null for root")


class ReassignmentValidationResponse(BaseModel):
    """Outcome of validating a reassignment without applying it."""

    employee_id: str
    proposed_manager_id: Optional[str] = None
    is_valid: bool
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class IdListResponse(BaseModel):
    """Wrapper for a list of employee ids."""

    employee_id: str
    data: List[str] = Field(default_factory=list)
