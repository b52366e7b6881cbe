"""Pydantic models for employees and org chart payloads."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Tier(str, Enum):
    """Seniority tier, ordered from most to least senior."""

    EXECUTIVE = "executive"
    LEAD = "lead"
    MANAGER = "manager"
    INDIVIDUAL = "individual"
    INTERN = "intern"


TIER_RANK: Dict[Tier, int] = {
    Tier.EXECUTIVE: 0,
    Tier.LEAD: 1,
    Tier.MANAGER: 2,
    Tier.INDIVIDUAL: 3,
    Tier.INTERN: 4,
}


_TIER_BELOW: Dict[Tier, Tier] = {
    Tier.EXECUTIVE: Tier.LEAD,
    Tier.LEAD: Tier.MANAGER,
    Tier.MANAGER: Tier.INDIVIDUAL,
    Tier.INDIVIDUAL: Tier.INTERN,
    Tier.INTERN: Tier.INTERN,
}


def next_tier_below(tier: Tier) -> Tier:
    """Default tier for a new report of someone at ``tier``."""
    return _TIER_BELOW[Tier(tier)]


class HighlightReason(str, Enum):
    """Why an employee is currently emphasised in the chart."""

    FILTER = "filter"
    DRAG = "drag"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HighlightState(BaseModel):
    """Transient UI emphasis; not part of the hierarchy structure."""

    active: bool = Field(default=False, description="Whether the node is highlighted")
    reason: Optional[HighlightReason] = Field(None, description="filter, drag or null")


class EmployeeRecord(BaseModel):
    """A single employee as exchanged with the hierarchy and layout core."""

    id: str = Field(..., description="Stable unique identifier")
    employee_id: str = Field(..., description="Display code used for search, e.g. EMP1234")
    name: str = Field(..., description="Display name")
    designation: str = Field(..., description="Job designation")
    tier: Tier = Field(..., description="Seniority tier")
    team: Optional[str] = Field("Unassigned", description="Team name")
    manager_id: Optional[str] = Field(None, description="Manager id, null for a root")
    photo_asset_key: Optional[str] = Field(None, description="Portrait asset key")
    photo_url: Optional[str] = Field(None, description="Portrait URL")
    highlight_state: HighlightState = Field(default_factory=HighlightState)
    last_updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        """Pydantic configuration."""
        from_attributes = True


class EmployeeCreateRequest(BaseModel):
    """Request body for adding an employee."""

    name: str = Field("New Employee", min_length=1, max_length=200)
    designation: str = Field("TBD", max_length=200)
    tier: Optional[Tier] = Field(
        None,
        description="Defaults to one tier below the manager (or executive for a root)",
    )
    team: Optional[str] = Field("Unassigned", max_length=100)
    manager_id: Optional[str] = Field(None, description="Manager id, null for a root")
    employee_id: Optional[str] = Field(None, description="Display code; generated when omitted")
    photo_asset_key: Optional[str] = None


class EmployeeUpdateRequest(BaseModel):
    """Partial update; only fields that are explicitly set are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    designation: Optional[str] = Field(None, max_length=200)
    tier: Optional[Tier] = None
    team: Optional[str] = Field(None, max_length=100)
    manager_id: Optional[str] = None
    highlight_state: Optional[HighlightState] = None


class HierarchyPayload(BaseModel):
    """Serialized hierarchy snapshot."""

    roots: List[str] = Field(default_factory=list)
    children: Dict[str, List[str]] = Field(default_factory=dict)
    levels: Dict[str, int] = Field(default_factory=dict)


class EmployeeCollection(BaseModel):
    """All employees together with their derived hierarchy."""

    data: List[EmployeeRecord] = Field(default_factory=list)
    hierarchy: HierarchyPayload = Field(default_factory=HierarchyPayload)


class RestoreRequest(BaseModel):
    """Records removed by a delete, offered back for undo."""

    employees: List[EmployeeRecord] = Field(..., min_length=1)
