"""Org chart service: employee persistence around the pure hierarchy core."""

import logging
import random
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config.settings import Settings, get_settings
from src.models.employee import Employee
from src.schemas.employee import (
    EmployeeCollection,
    EmployeeCreateRequest,
    EmployeeRecord,
    EmployeeUpdateRequest,
    HierarchyPayload,
    Tier,
    next_tier_below,
    utc_now,
)
from src.services.cycle_guard import (
    ReassignmentValidator,
    ValidationErrorCode,
    ValidationResult,
    get_valid_drop_targets,
)
from src.services.employee_filter import FilterField, FilterState, update_filter_query
from src.services.org_hierarchy import (
    OrgHierarchy,
    OrphanPolicy,
    build_org_hierarchy,
    get_descendants,
    get_hierarchy_path,
)
from src.services.seed_data import (
    PHOTO_ASSETS,
    generate_employee_code,
    generate_employee_id,
    generate_org_hierarchy,
)
from src.services.tree_layout import LayoutResult, compute_layout
from src.utils.errors import (
    CircularReportingError,
    ConflictError,
    DatabaseError,
    HasDirectReportsError,
    create_field_error,
    create_not_found_error,
)

logger = logging.getLogger(__name__)


class OrgChartService:
    """
    Service layer for org chart reads and mutations.

    Every read rebuilds the hierarchy snapshot from the stored rows; the
    snapshot is never persisted.
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize service with database session."""
        self.session = session
        self.settings = settings or get_settings()
        self.orphan_policy = OrphanPolicy(self.settings.hierarchy.orphan_policy)
        self.rng = rng or random.Random()

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_records(self) -> List[EmployeeRecord]:
        """All employees in insertion order."""
        rows = self.session.scalars(select(Employee).order_by(Employee.pk)).all()
        return [row.to_record() for row in rows]

    def get_employee(self, employee_id: str) -> EmployeeRecord:
        return self._get_row_or_raise(employee_id).to_record()

    def build_hierarchy(
        self,
        records: Optional[Sequence[EmployeeRecord]] = None,
    ) -> OrgHierarchy:
        if records is None:
            records = self.get_records()
        return build_org_hierarchy(records, self.orphan_policy)

    def build_full_hierarchy(
        self,
        records: Optional[Sequence[EmployeeRecord]] = None,
    ) -> OrgHierarchy:
        """Snapshot that keeps every orphan branch, whatever the configured policy.

        Used for descendants, deletes and cycle checks, which must see every
        reporting line.
        """
        if records is None:
            records = self.get_records()
        return build_org_hierarchy(records, OrphanPolicy.TREAT_AS_ROOT)

    def list_employees(self) -> EmployeeCollection:
        """Employees together with their hierarchy metadata."""
        records = self.get_records()
        hierarchy = self.build_hierarchy(records)
        return EmployeeCollection(
            data=records,
            hierarchy=HierarchyPayload(**hierarchy.to_dict()),
        )

    def get_descendants(self, employee_id: str) -> List[str]:
        self._get_row_or_raise(employee_id)
        return get_descendants(employee_id, self.build_full_hierarchy())

    def get_valid_drop_targets(self, employee_id: str) -> List[str]:
        self._get_row_or_raise(employee_id)
        records = self.get_records()
        return get_valid_drop_targets(records, employee_id, self.build_full_hierarchy(records))

    def get_hierarchy_path(self, employee_id: str) -> List[EmployeeRecord]:
        self._get_row_or_raise(employee_id)
        return get_hierarchy_path(self.get_records(), employee_id)

    def get_layout(self) -> LayoutResult:
        records = self.get_records()
        return compute_layout(records, self.build_hierarchy(records), self.settings.layout)

    def validate_reassignment(
        self,
        employee_id: str,
        proposed_manager_id: Optional[str],
    ) -> ValidationResult:
        records = self.get_records()
        validator = ReassignmentValidator(records, self.build_full_hierarchy(records))
        return validator.validate(employee_id, proposed_manager_id)

    def search_employees(
        self,
        name: Optional[str] = None,
        designation: Optional[str] = None,
        employee_code: Optional[str] = None,
    ) -> List[EmployeeRecord]:
        """Employees matching every given query (AND)."""
        records = self.get_records()
        state = FilterState()
        for filter_field, query in (
            (FilterField.NAME, name),
            (FilterField.DESIGNATION, designation),
            (FilterField.EMPLOYEE_ID, employee_code),
        ):
            if query:
                state = update_filter_query(state, filter_field, query, records)

        matched = set(state.results)
        return [record for record in records if record.id in matched]

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create_employee(self, data: EmployeeCreateRequest) -> EmployeeRecord:
        """
        Add an employee.

        The tier defaults to one level below the manager, or executive for a
        new root. Raises NotFoundError for an unknown manager.
        """
        manager = None
        if data.manager_id is not None:
            manager = self._get_row(data.manager_id)
            if manager is None:
                raise create_not_found_error("Manager", data.manager_id)

        if data.tier is not None:
            tier = data.tier
        elif manager is not None:
            tier = next_tier_below(Tier(manager.tier))
        else:
            tier = Tier.EXECUTIVE

        employee = Employee(
            id=self._new_employee_id(),
            employee_id=data.employee_id or generate_employee_code(self.rng),
            name=data.name,
            designation=data.designation,
            tier=tier.value,
            team=data.team,
            manager_id=data.manager_id,
            photo_asset_key=data.photo_asset_key or self.rng.choice(PHOTO_ASSETS),
            highlight_active=False,
            highlight_reason=None,
            last_updated_at=utc_now(),
        )

        try:
            self.session.add(employee)
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create employee: {str(e)}")

        logger.info("Created employee %s under %s", employee.id, data.manager_id)
        return employee.to_record()

    def restore_employees(self, records: Sequence[EmployeeRecord]) -> List[EmployeeRecord]:
        """Re-insert previously deleted records unchanged (undo)."""
        ids = [record.id for record in records]
        existing = self.session.scalars(select(Employee.id).where(Employee.id.in_(ids))).all()
        if existing:
            raise ConflictError(
                message="Cannot restore employees that still exist",
                details={"existing_ids": sorted(existing)},
            )

        try:
            for record in records:
                self.session.add(Employee.from_record(record))
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to restore employees: {str(e)}")

        logger.info("Restored %d employee(s)", len(records))
        return list(records)

    def seed_if_empty(self, seed: int) -> int:
        """Insert the demo organisation when the table is empty. Returns rows added."""
        if self.session.scalars(select(Employee.pk).limit(1)).first() is not None:
            return 0

        records = generate_org_hierarchy(seed)
        for record in records:
            self.session.add(Employee.from_record(record))
        self.session.flush()

        logger.info("Seeded %d demo employees (seed=%d)", len(records), seed)
        return len(records)

    # =========================================================================
    # Update Operations
    # =========================================================================

    def update_employee(
        self,
        employee_id: str,
        data: EmployeeUpdateRequest,
    ) -> EmployeeRecord:
        """
        Update an employee; only explicitly set fields are applied.

        A manager change is re-validated against the current hierarchy and
        rejected with CircularReportingError when it would create a cycle.
        """
        employee = self._get_row_or_raise(employee_id)
        update_data = data.model_dump(exclude_unset=True)

        if "manager_id" in update_data and update_data["manager_id"] != employee.manager_id:
            self._check_reassignment(employee_id, update_data["manager_id"])

        for field_name, value in update_data.items():
            if field_name == "highlight_state":
                if value is None:
                    continue
                reason = value.get("reason")
                employee.highlight_active = bool(value.get("active"))
                employee.highlight_reason = getattr(reason, "value", reason)
            elif field_name == "tier":
                if value is not None:
                    employee.tier = Tier(value).value
            elif field_name in ("name", "designation") and value is None:
                continue
            else:
                setattr(employee, field_name, value)

        employee.last_updated_at = utc_now()

        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to update employee: {str(e)}")

        return employee.to_record()

    def reassign_employee(
        self,
        employee_id: str,
        new_manager_id: Optional[str],
    ) -> EmployeeRecord:
        record = self.update_employee(
            employee_id, EmployeeUpdateRequest(manager_id=new_manager_id)
        )
        logger.info("Reassigned employee %s to manager %s", employee_id, new_manager_id)
        return record

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_employee(self, employee_id: str, cascade: bool = False) -> List[EmployeeRecord]:
        """
        Delete an employee, or the whole branch when ``cascade`` is set.

        Returns the removed records, targeted employee first, so callers can
        offer them back for undo.
        """
        self._get_row_or_raise(employee_id)
        hierarchy = self.build_full_hierarchy()
        descendants = get_descendants(employee_id, hierarchy)

        if descendants and not cascade:
            raise HasDirectReportsError(
                details={"direct_reports": hierarchy.children.get(employee_id, [])},
            )

        branch = [employee_id, *descendants]
        rows = {
            row.id: row
            for row in self.session.scalars(
                select(Employee).where(Employee.id.in_(branch))
            ).all()
        }
        removed = [rows[branch_id].to_record() for branch_id in branch if branch_id in rows]

        for row in rows.values():
            self.session.delete(row)
        self.session.flush()

        logger.info("Deleted %d employee(s) starting at %s", len(removed), employee_id)
        return removed

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_reassignment(self, employee_id: str, new_manager_id: Optional[str]) -> None:
        result = self.validate_reassignment(employee_id, new_manager_id)
        if result.is_valid:
            return

        error = result.errors[0]
        if error.code == ValidationErrorCode.INVALID_MANAGER:
            raise create_not_found_error("Manager", new_manager_id)

        logger.info("Rejected reassignment of %s to %s: %s", employee_id, new_manager_id, error.code.value)
        raise CircularReportingError(
            details={"employee_id": employee_id, "proposed_manager_id": new_manager_id},
            field_errors=[
                create_field_error(e.field or "manager_id", e.message, e.code.value.lower())
                for e in result.errors
            ],
        )

    def _new_employee_id(self) -> str:
        while True:
            candidate = generate_employee_id(self.rng)
            if self._get_row(candidate) is None:
                return candidate

    def _get_row(self, employee_id: str) -> Optional[Employee]:
        return self.session.scalars(
            select(Employee).where(Employee.id == employee_id)
        ).first()

    def _get_row_or_raise(self, employee_id: str) -> Employee:
        employee = self._get_row(employee_id)
        if employee is None:
            raise create_not_found_error("Employee", employee_id)
        return employee
