"""Drag-and-drop reassignment session.

Valid targets are computed once from the pre-drag hierarchy. A drop produces
an optimistic outcome that keeps the previous state for rollback; cancelling
or dropping on an invalid target changes nothing.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.schemas.employee import EmployeeRecord, utc_now
from src.services.cycle_guard import get_valid_drop_targets, would_create_cycle
from src.services.hierarchy_updater import apply_reassignment
from src.services.org_hierarchy import OrgHierarchy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReassignmentOutcome:
    """Optimistically applied reassignment with enough state to undo it."""

    employee_id: str
    previous_manager_id: Optional[str]
    new_manager_id: str
    employees: List[EmployeeRecord]
    hierarchy: OrgHierarchy
    previous_employees: List[EmployeeRecord]
    previous_hierarchy: OrgHierarchy


class DragSession:
    """Tracks one drag gesture for a single employee."""

    def __init__(
        self,
        employees: Sequence[EmployeeRecord],
        hierarchy: OrgHierarchy,
        employee_id: str,
        resort: bool = True,
    ):
        self.employees = list(employees)
        self.hierarchy = hierarchy
        self.employee_id = employee_id
        self.resort = resort
        self.valid_targets: List[str] = get_valid_drop_targets(
            self.employees, employee_id, hierarchy
        )
        self._valid_target_set = set(self.valid_targets)
        self.hovered_target_id: Optional[str] = None
        self.is_active = True

    def is_valid_target(self, target_id: str) -> bool:
        return target_id in self._valid_target_set

    def hover(self, target_id: str) -> bool:
        """Record the target under the pointer and report whether it accepts the drop."""
        self.hovered_target_id = target_id
        return self.is_valid_target(target_id)

    def leave(self) -> None:
        self.hovered_target_id = None

    def cancel(self) -> None:
        self.hovered_target_id = None
        self.is_active = False

    def drop(self, target_id: str) -> Optional[ReassignmentOutcome]:
        """
        Finish the drag on ``target_id``.

        Returns None (and leaves all state unchanged) when the target is not
        a valid drop target or the session has already ended.
        """
        if not self.is_active:
            return None
        self.is_active = False
        self.hovered_target_id = None

        if not self.is_valid_target(target_id):
            logger.info("Rejected drop of %s onto %s", self.employee_id, target_id)
            return None

        # Re-check against the same snapshot before committing
        if would_create_cycle(self.employee_id, target_id, self.hierarchy):
            logger.warning("Cycle detected at drop time for %s -> %s", self.employee_id, target_id)
            return None

        dragged = next(emp for emp in self.employees if emp.id == self.employee_id)
        now = utc_now()
        updated_employees = [
            emp.model_copy(update={"manager_id": target_id, "last_updated_at": now})
            if emp.id == self.employee_id
            else emp
            for emp in self.employees
        ]
        updated_hierarchy = apply_reassignment(
            self.hierarchy,
            self.employee_id,
            dragged.manager_id,
            target_id,
            employees=updated_employees if self.resort else None,
        )

        return ReassignmentOutcome(
            employee_id=self.employee_id,
            previous_manager_id=dragged.manager_id,
            new_manager_id=target_id,
            employees=updated_employees,
            hierarchy=updated_hierarchy,
            previous_employees=self.employees,
            previous_hierarchy=self.hierarchy,
        )


def rollback(outcome: ReassignmentOutcome) -> Tuple[List[EmployeeRecord], OrgHierarchy]:
    """State to restore when persisting an optimistic reassignment fails."""
    logger.info(
        "Rolling back reassignment of %s to %s", outcome.employee_id, outcome.new_manager_id
    )
    return list(outcome.previous_employees), outcome.previous_hierarchy
