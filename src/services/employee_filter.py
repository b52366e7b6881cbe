"""Employee search filters combined with AND logic."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Sequence


class FilterField(str, Enum):
    """Searchable employee attributes."""

    NAME = "name"
    DESIGNATION = "designation"
    EMPLOYEE_ID = "employee_id"


@dataclass(frozen=True)
class FilterState:
    """Current filter queries and the ids they match."""

    queries: Dict[FilterField, str] = field(
        default_factory=lambda: {f: "" for f in FilterField}
    )
    active: Dict[FilterField, bool] = field(
        default_factory=lambda: {f: False for f in FilterField}
    )
    results: List[str] = field(default_factory=list)


_DIGITS = re.compile(r"^\d+$")


def filter_by_name(employees: Sequence[Any], query: str) -> List[Any]:
    if not query.strip():
        return list(employees)
    needle = query.strip().lower()
    return [emp for emp in employees if needle in emp.name.lower()]


def filter_by_designation(employees: Sequence[Any], query: str) -> List[Any]:
    if not query.strip():
        return list(employees)
    needle = query.strip().lower()
    return [emp for emp in employees if needle in emp.designation.lower()]


def _matches_employee_code(code: str, query: str) -> bool:
    if code == query:
        return True
    if query.startswith("#"):
        return False
    # "4325" matches "#4325" and "EMP4325"
    if _DIGITS.match(query):
        return re.sub(r"^(#|EMP)", "", code) == query
    return query in code


def filter_by_employee_id(employees: Sequence[Any], query: str) -> List[Any]:
    """Match the display code: exact, ``#``-prefixed exact, bare number, or substring."""
    if not query.strip():
        return list(employees)
    needle = query.strip()
    return [emp for emp in employees if _matches_employee_code(emp.employee_id, needle)]


_FILTERS = {
    FilterField.NAME: filter_by_name,
    FilterField.DESIGNATION: filter_by_designation,
    FilterField.EMPLOYEE_ID: filter_by_employee_id,
}


def combine_filters(state: FilterState, employees: Sequence[Any]) -> List[str]:
    """Ids matching every active filter; empty when no filter is active."""
    if not has_active_filters(state):
        return []

    matched = list(employees)
    for filter_field, apply_filter in _FILTERS.items():
        query = state.queries.get(filter_field, "")
        if state.active.get(filter_field) and query.strip():
            matched = apply_filter(matched, query)

    return [emp.id for emp in matched]


def update_filter_query(
    state: FilterState,
    filter_field: FilterField,
    query: str,
    employees: Sequence[Any],
) -> FilterState:
    filter_field = FilterField(filter_field)
    new_state = replace(
        state,
        queries={**state.queries, filter_field: query},
        active={**state.active, filter_field: bool(query.strip())},
    )
    return replace(new_state, results=combine_filters(new_state, employees))


def clear_filter(
    state: FilterState,
    filter_field: FilterField,
    employees: Sequence[Any],
) -> FilterState:
    return update_filter_query(state, filter_field, "", employees)


def clear_all_filters() -> FilterState:
    return FilterState()


def has_active_filters(state: FilterState) -> bool:
    return any(state.active.values())


def get_filter_summary(state: FilterState) -> Dict[str, Any]:
    """Counts for the sidebar summary line."""
    active_count = sum(1 for is_active in state.active.values() if is_active)
    result_count = len(state.results)
    return {
        "active_filter_count": active_count,
        "result_count": result_count,
        "has_results": result_count > 0,
        "is_empty": active_count > 0 and result_count == 0,
        "last_updated": datetime.now(timezone.utc).isoformat(),
    }
