"""Tests for reassignment cycle detection and drop target validation."""

import pytest

from src.schemas.employee import Tier
from src.services.cycle_guard import (
    ReassignmentValidator,
    ValidationErrorCode,
    get_valid_drop_targets,
    is_valid_drop_target,
    would_create_cycle,
)
from src.services.org_hierarchy import OrgHierarchy, build_org_hierarchy


@pytest.fixture
def small_hierarchy(small_org):
    return build_org_hierarchy(small_org)


@pytest.fixture
def deep_hierarchy(deep_org):
    return build_org_hierarchy(deep_org)


class TestWouldCreateCycle:
    """Tests for would_create_cycle."""

    def test_manager_under_direct_report(self, small_hierarchy):
        """Test moving a manager under its own report is a cycle."""
        assert would_create_cycle("1", "2", small_hierarchy) is True

    def test_siblings_are_unrelated(self, small_hierarchy):
        """Test moving one sibling under another is allowed."""
        assert would_create_cycle("2", "3", small_hierarchy) is False

    @pytest.mark.parametrize("employee_id", ["ceo", "cto", "intern", "not-in-tree"])
    def test_self_is_always_a_cycle(self, deep_hierarchy, employee_id):
        """Test reporting to oneself is always rejected."""
        assert would_create_cycle(employee_id, employee_id, deep_hierarchy) is True

    @pytest.mark.parametrize("descendant_id", ["cto", "cfo", "eng1", "eng2", "intern"])
    def test_any_descendant_is_a_cycle(self, deep_hierarchy, descendant_id):
        """Test indirect reports are caught, not just direct ones."""
        assert would_create_cycle("ceo", descendant_id, deep_hierarchy) is True

    @pytest.mark.parametrize(
        "employee_id,manager_id",
        [("cfo", "eng1"), ("eng2", "eng1"), ("eng2", "intern"), ("intern", "cfo")],
    )
    def test_unrelated_pairs(self, deep_hierarchy, employee_id, manager_id):
        """Test employees in different branches can be reassigned."""
        assert would_create_cycle(employee_id, manager_id, deep_hierarchy) is False

    def test_moving_under_ancestor_is_allowed(self, deep_hierarchy):
        """Test moving an employee higher up its own chain is not a cycle."""
        assert would_create_cycle("intern", "ceo", deep_hierarchy) is False

    def test_malformed_children_terminate(self):
        """Test a looping children map does not hang the walk."""
        hierarchy = OrgHierarchy(
            roots=[],
            children={"a": ["b"], "b": ["a"], "c": []},
        )

        assert would_create_cycle("a", "c", hierarchy) is False
        assert would_create_cycle("a", "b", hierarchy) is True


class TestDropTargets:
    """Tests for drop target selection."""

    def test_excludes_self_and_current_manager(self, small_org, small_hierarchy):
        """Test employee cannot be dropped on itself or its current manager."""
        bob = small_org[1]

        assert is_valid_drop_target(bob, "2", small_hierarchy) is False
        assert is_valid_drop_target(bob, "1", small_hierarchy) is False
        assert is_valid_drop_target(bob, "3", small_hierarchy) is True

    def test_root_has_no_targets_in_single_tree(self, small_org, small_hierarchy):
        """Test the only root can only be dropped on its descendants, so nowhere."""
        assert get_valid_drop_targets(small_org, "1", small_hierarchy) == []

    def test_targets_follow_employee_order(self, deep_org, deep_hierarchy):
        """Test valid targets exclude the subtree and current manager."""
        targets = get_valid_drop_targets(deep_org, "cto", deep_hierarchy)

        assert targets == ["cfo"]

    def test_leaf_can_go_anywhere_else(self, deep_org, deep_hierarchy):
        """Test a leaf may move under any employee except itself and its manager."""
        targets = get_valid_drop_targets(deep_org, "intern", deep_hierarchy)

        assert targets == ["ceo", "cto", "cfo", "eng2"]

    def test_unknown_employee(self, deep_org, deep_hierarchy):
        """Test dragging an unknown employee yields no targets."""
        assert get_valid_drop_targets(deep_org, "ghost", deep_hierarchy) == []

    def test_separate_root_is_valid_target(self, make_employee):
        """Test another tree's root accepts a drop."""
        employees = [
            make_employee("a", tier=Tier.EXECUTIVE),
            make_employee("b", tier=Tier.EXECUTIVE),
            make_employee("a1", manager_id="a"),
        ]
        hierarchy = build_org_hierarchy(employees)

        assert get_valid_drop_targets(employees, "a", hierarchy) == ["b"]


class TestReassignmentValidator:
    """Tests for ReassignmentValidator."""

    @pytest.fixture
    def validator(self, deep_org, deep_hierarchy):
        return ReassignmentValidator(deep_org, deep_hierarchy)

    def test_valid_reassignment(self, validator):
        """Test a sideways move is valid."""
        result = validator.validate("eng2", "cfo")

        assert result.is_valid is True
        assert result.errors == []

    def test_no_manager_is_valid(self, validator):
        """Test promoting to a root is always allowed."""
        assert validator.validate("cto", None).is_valid is True

    def test_self_reporting(self, validator):
        """Test self management is rejected with its own code."""
        result = validator.validate("cto", "cto")

        assert result.is_valid is False
        assert result.errors[0].code == ValidationErrorCode.SELF_REPORTING
        assert result.errors[0].field == "manager_id"

    def test_subordinate_as_manager(self, validator):
        """Test cycle is rejected with details of the proposed manager."""
        result = validator.validate("cto", "intern")

        assert result.is_valid is False
        error = result.errors[0]
        assert error.code == ValidationErrorCode.MANAGER_REPORTS_TO_SUBORDINATE
        assert error.details == {"proposed_manager_id": "intern"}

    def test_unknown_manager(self, validator):
        """Test unknown manager is reported distinctly from a cycle."""
        result = validator.validate("cto", "ghost")

        assert result.errors[0].code == ValidationErrorCode.INVALID_MANAGER

    def test_unknown_employee(self, validator):
        """Test unknown employee short-circuits validation."""
        result = validator.validate("ghost", "ceo")

        assert result.errors[0].code == ValidationErrorCode.EMPLOYEE_NOT_FOUND

    def test_to_dict(self, validator):
        """Test result serializes codes by value."""
        data = validator.validate("cto", "cto").to_dict()

        assert data["is_valid"] is False
        assert data["errors"][0]["code"] == "SELF_REPORTING"
