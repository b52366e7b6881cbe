"""Reassignment validation: self-management and circular reporting checks.

Everything here is read-only with respect to the hierarchy and the employee
list. ``would_create_cycle`` is the single authority used both for computing
drop targets while dragging and for re-checking at commit time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

from src.services.org_hierarchy import OrgHierarchy


# =============================================================================
# Validation Types
# =============================================================================

class ValidationErrorCode(str, Enum):
    """Error codes for reassignment validation failures."""

    SELF_REPORTING = "SELF_REPORTING"
    MANAGER_REPORTS_TO_SUBORDINATE = "MANAGER_REPORTS_TO_SUBORDINATE"
    INVALID_MANAGER = "INVALID_MANAGER"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"


@dataclass
class ValidationError:
    """Represents a validation error."""

    code: ValidationErrorCode
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "details": self.details,
        }


@dataclass
class ValidationResult:
    """Result of validation operation."""

    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)

    def add_error(
        self,
        code: ValidationErrorCode,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an error to the result."""
        self.errors.append(ValidationError(code, message, field, details))
        self.is_valid = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }


# =============================================================================
# Cycle Detection
# =============================================================================

def would_create_cycle(
    employee_id: str,
    proposed_manager_id: str,
    hierarchy: OrgHierarchy,
) -> bool:
    """
    Check whether reporting ``employee_id`` to ``proposed_manager_id`` closes a loop.

    True when the two ids are equal, or when the proposed manager already sits
    somewhere below the employee (walking reporting lines down from the
    employee reaches the proposed manager).
    """
    if employee_id == proposed_manager_id:
        return True

    visited: Set[str] = {employee_id}
    stack = list(hierarchy.children.get(employee_id, []))

    while stack:
        current_id = stack.pop()
        if current_id == proposed_manager_id:
            return True
        if current_id in visited:
            continue
        visited.add(current_id)
        stack.extend(hierarchy.children.get(current_id, []))

    return False


def is_valid_drop_target(
    employee: Any,
    target_id: str,
    hierarchy: OrgHierarchy,
) -> bool:
    """A target is valid if it is not the employee, not its manager, and adds no cycle."""
    if target_id == employee.id:
        return False
    if employee.manager_id == target_id:
        return False
    return not would_create_cycle(employee.id, target_id, hierarchy)


def get_valid_drop_targets(
    employees: Sequence[Any],
    employee_id: str,
    hierarchy: OrgHierarchy,
) -> List[str]:
    """All ids the employee may be dropped onto, in employee-list order."""
    dragged = next((emp for emp in employees if emp.id == employee_id), None)
    if dragged is None:
        return []

    return [
        emp.id
        for emp in employees
        if is_valid_drop_target(dragged, emp.id, hierarchy)
    ]


# =============================================================================
# Commit-time Validation
# =============================================================================

class ReassignmentValidator:
    """
    Validates a manager change before it is committed.

    Wraps ``would_create_cycle`` with existence checks so callers get a
    structured result instead of a bare boolean.
    """

    def __init__(self, employees: Sequence[Any], hierarchy: OrgHierarchy):
        self.employee_ids: Set[str] = {emp.id for emp in employees}
        self.hierarchy = hierarchy

    def validate(
        self,
        employee_id: str,
        proposed_manager_id: Optional[str],
    ) -> ValidationResult:
        """
        Validate that a manager assignment is valid.

        Args:
            employee_id: ID of the employee
            proposed_manager_id: ID of the proposed manager (None makes a root)

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        if employee_id not in self.employee_ids:
            result.add_error(
                ValidationErrorCode.EMPLOYEE_NOT_FOUND,
                "Employee does not exist",
                "employee_id",
            )
            return result

        # No manager is valid (top-level employee)
        if proposed_manager_id is None:
            return result

        if employee_id == proposed_manager_id:
            result.add_error(
                ValidationErrorCode.SELF_REPORTING,
                "An employee cannot be their own manager",
                "manager_id",
            )
            return result

        if proposed_manager_id not in self.employee_ids:
            result.add_error(
                ValidationErrorCode.INVALID_MANAGER,
                "Proposed manager does not exist",
                "manager_id",
            )
            return result

        if would_create_cycle(employee_id, proposed_manager_id, self.hierarchy):
            result.add_error(
                ValidationErrorCode.MANAGER_REPORTS_TO_SUBORDINATE,
                "Cannot set a subordinate as manager - would create circular reporting",
                "manager_id",
                {"proposed_manager_id": proposed_manager_id},
            )

        return result
