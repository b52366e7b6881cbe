"""Session-level log of chart interactions (filters, reassignments, additions)."""

import json
import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class InteractionType(str, Enum):
    """Kinds of logged interactions."""

    FILTER = "filter"
    REASSIGNMENT = "reassignment"
    ADD_NODE = "add-node"


@dataclass(frozen=True)
class InteractionLogEntry:
    """One logged interaction."""

    id: str
    timestamp: datetime
    type: InteractionType
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InteractionState:
    """Immutable log; every logging call returns a new state."""

    session_started: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    logs: List[InteractionLogEntry] = field(default_factory=list)


def _append(
    state: InteractionState,
    interaction_type: InteractionType,
    payload: Dict[str, Any],
    now: Optional[datetime],
) -> InteractionState:
    entry = InteractionLogEntry(
        id=f"log_{uuid.uuid4().hex[:12]}",
        timestamp=now or datetime.now(timezone.utc),
        type=interaction_type,
        payload=payload,
    )
    return replace(state, logs=[*state.logs, entry])


def log_filter(
    state: InteractionState,
    filter_type: str,
    filter_value: Optional[str] = None,
    result_count: int = 0,
    now: Optional[datetime] = None,
) -> InteractionState:
    return _append(
        state,
        InteractionType.FILTER,
        {
            "filter_type": filter_type,
            "filter_value": filter_value or None,
            "result_count": result_count,
        },
        now,
    )


def log_reassignment(
    state: InteractionState,
    employee_id: str,
    previous_manager_id: Optional[str],
    new_manager_id: Optional[str],
    success: bool,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> InteractionState:
    return _append(
        state,
        InteractionType.REASSIGNMENT,
        {
            "employee_id": employee_id,
            "previous_manager_id": previous_manager_id,
            "new_manager_id": new_manager_id,
            "success": success,
            "reason": reason,
        },
        now,
    )


def log_add_node(
    state: InteractionState,
    new_employee_id: str,
    manager_id: Optional[str],
    tier: str,
    success: bool,
    generated_data: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> InteractionState:
    return _append(
        state,
        InteractionType.ADD_NODE,
        {
            "new_employee_id": new_employee_id,
            "manager_id": manager_id,
            "tier": tier,
            "success": success,
            "generated_data": generated_data,
        },
        now,
    )


def get_logs_by_type(
    state: InteractionState, interaction_type: InteractionType
) -> List[InteractionLogEntry]:
    return [entry for entry in state.logs if entry.type == interaction_type]


def get_recent_logs(state: InteractionState, count: int = 10) -> List[InteractionLogEntry]:
    return state.logs[-count:] if count > 0 else []


def get_logs_in_time_range(
    state: InteractionState, start: datetime, end: datetime
) -> List[InteractionLogEntry]:
    return [entry for entry in state.logs if start <= entry.timestamp <= end]


def clear_logs(state: InteractionState) -> InteractionState:
    return replace(state, logs=[])


def get_interaction_stats(
    state: InteractionState, now: Optional[datetime] = None
) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    reassignments = get_logs_by_type(state, InteractionType.REASSIGNMENT)
    additions = get_logs_by_type(state, InteractionType.ADD_NODE)

    return {
        "total_interactions": len(state.logs),
        "filter_interactions": len(get_logs_by_type(state, InteractionType.FILTER)),
        "reassignment_interactions": len(reassignments),
        "add_node_interactions": len(additions),
        "successful_reassignments": sum(1 for e in reassignments if e.payload.get("success")),
        "successful_add_nodes": sum(1 for e in additions if e.payload.get("success")),
        "session_duration_seconds": (now - state.session_started).total_seconds(),
    }


def export_logs_as_json(state: InteractionState) -> str:
    """Serialize the session log for debugging."""
    logs = []
    for entry in state.logs:
        data = asdict(entry)
        data["timestamp"] = entry.timestamp.isoformat()
        data["type"] = entry.type.value
        logs.append(data)

    return json.dumps(
        {
            "session_started": state.session_started.isoformat(),
            "logs": logs,
            "stats": get_interaction_stats(state),
        },
        indent=2,
        default=str,
    )
