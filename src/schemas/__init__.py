"""Pydantic schemas for API request/response validation."""

from src.schemas.employee import (
    EmployeeCollection,
    EmployeeCreateRequest,
    EmployeeRecord,
    EmployeeUpdateRequest,
    HierarchyPayload,
    HighlightReason,
    HighlightState,
    RestoreRequest,
    Tier,
)
from src.schemas.org_chart import (
    LayoutResponse,
    ReassignmentRequest,
    ReassignmentValidationResponse,
)

__all__ = [
    # Employee schemas
    "EmployeeCollection",
    "EmployeeCreateRequest",
    "EmployeeRecord",
    "EmployeeUpdateRequest",
    "HierarchyPayload",
    "HighlightReason",
    "HighlightState",
    "RestoreRequest",
    "Tier",
    # Org chart schemas
    "LayoutResponse",
    "ReassignmentRequest",
    "ReassignmentValidationResponse",
]
