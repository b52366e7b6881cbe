"""Highlight bookkeeping for filter results and drag feedback."""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from src.schemas.employee import EmployeeRecord, HighlightReason, HighlightState, utc_now


def _with_highlight(
    employee: EmployeeRecord,
    active: bool,
    reason: Optional[HighlightReason],
    now: datetime,
) -> EmployeeRecord:
    return employee.model_copy(
        update={
            "highlight_state": HighlightState(active=active, reason=reason),
            "last_updated_at": now,
        }
    )


def apply_highlight_changes(
    employees: Sequence[EmployeeRecord],
    employee_ids: Iterable[str],
    active: bool,
    reason: Optional[HighlightReason],
    now: Optional[datetime] = None,
) -> List[EmployeeRecord]:
    """
    Return a new employee list with highlights updated.

    - ``reason=filter, active=True``: targets become filter highlights and
      filter highlights outside the target set are cleared.
    - ``reason=None, active=False``: targets and every filter highlight clear.
    - ``reason=drag``: only targets change.
    Records that are not touched are returned as-is.
    """
    now = now or utc_now()
    targets = set(employee_ids)
    reason = HighlightReason(reason) if reason is not None else None
    updated: List[EmployeeRecord] = []

    for employee in employees:
        is_target = employee.id in targets
        current_reason = employee.highlight_state.reason

        if reason == HighlightReason.FILTER and active:
            if is_target:
                employee = _with_highlight(employee, True, HighlightReason.FILTER, now)
            elif current_reason == HighlightReason.FILTER:
                employee = _with_highlight(employee, False, None, now)
        elif reason is None and not active:
            if is_target or current_reason == HighlightReason.FILTER:
                employee = _with_highlight(employee, False, None, now)
        elif reason == HighlightReason.DRAG and is_target:
            employee = _with_highlight(
                employee, active, HighlightReason.DRAG if active else None, now
            )

        updated.append(employee)

    return updated


def get_highlighted_ids(employees: Sequence[EmployeeRecord]) -> List[str]:
    return [emp.id for emp in employees if emp.highlight_state.active]
