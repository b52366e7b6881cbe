"""Tests for drag-and-drop reassignment sessions."""

import pytest

from src.schemas.employee import Tier
from src.services.drag_session import DragSession, rollback
from src.services.org_hierarchy import build_org_hierarchy


@pytest.fixture
def hierarchy(deep_org):
    return build_org_hierarchy(deep_org)


class TestDragSession:
    """Tests for DragSession."""

    def test_valid_targets_computed_at_start(self, deep_org, hierarchy):
        """Test targets exclude the dragged subtree and current manager."""
        session = DragSession(deep_org, hierarchy, "cto")

        assert session.valid_targets == ["cfo"]
        assert session.is_active is True

    def test_hover_reports_validity(self, deep_org, hierarchy):
        """Test hovering tracks the target and its validity."""
        session = DragSession(deep_org, hierarchy, "cto")

        assert session.hover("eng1") is False
        assert session.hover("cfo") is True
        assert session.hovered_target_id == "cfo"

        session.leave()
        assert session.hovered_target_id is None

    def test_drop_on_valid_target(self, deep_org, hierarchy):
        """Test a valid drop returns the updated employees and hierarchy."""
        session = DragSession(deep_org, hierarchy, "eng2")

        outcome = session.drop("cfo")

        assert outcome is not None
        assert outcome.previous_manager_id == "cto"
        assert outcome.new_manager_id == "cfo"
        moved = next(emp for emp in outcome.employees if emp.id == "eng2")
        assert moved.manager_id == "cfo"
        assert outcome.hierarchy.children["cfo"] == ["eng2"]
        assert outcome.hierarchy.levels["eng2"] == 2
        assert session.is_active is False

    def test_drop_leaves_inputs_unchanged(self, deep_org, hierarchy):
        """Test a drop never mutates the pre-drag state."""
        before_hierarchy = hierarchy.to_dict()
        session = DragSession(deep_org, hierarchy, "eng2")

        session.drop("cfo")

        assert hierarchy.to_dict() == before_hierarchy
        assert next(emp for emp in deep_org if emp.id == "eng2").manager_id == "cto"

    def test_drop_on_invalid_target(self, deep_org, hierarchy):
        """Test dropping onto a descendant is rejected with no changes."""
        session = DragSession(deep_org, hierarchy, "cto")

        assert session.drop("intern") is None
        assert session.is_active is False

    def test_cancel_then_drop(self, deep_org, hierarchy):
        """Test a cancelled session ignores later drops."""
        session = DragSession(deep_org, hierarchy, "eng2")
        session.hover("cfo")

        session.cancel()

        assert session.hovered_target_id is None
        assert session.drop("cfo") is None

    def test_second_drop_ignored(self, deep_org, hierarchy):
        """Test a session completes at most once."""
        session = DragSession(deep_org, hierarchy, "eng2")

        assert session.drop("cfo") is not None
        assert session.drop("ceo") is None

    def test_drop_without_resort_appends(self, make_employee):
        """Test disabling resort appends the employee to its new siblings."""
        employees = [
            make_employee("root", tier=Tier.EXECUTIVE, name="Root"),
            make_employee("m1", manager_id="root", tier=Tier.MANAGER, name="M1"),
            make_employee("m2", manager_id="root", tier=Tier.MANAGER, name="M2"),
            make_employee("zed", manager_id="m1", name="Zed"),
            make_employee("amy", manager_id="m2", name="Amy"),
        ]
        hierarchy = build_org_hierarchy(employees)

        appended = DragSession(employees, hierarchy, "amy", resort=False).drop("m1")
        sorted_outcome = DragSession(employees, hierarchy, "amy").drop("m1")

        assert appended.hierarchy.children["m1"] == ["zed", "amy"]
        assert sorted_outcome.hierarchy.children["m1"] == ["amy", "zed"]


class TestRollback:
    """Tests for rolling back an optimistic drop."""

    def test_rollback_restores_previous_state(self, deep_org, hierarchy):
        """Test rollback returns the exact pre-drop snapshot."""
        outcome = DragSession(deep_org, hierarchy, "eng2").drop("cfo")

        employees, restored = rollback(outcome)

        assert employees == deep_org
        assert restored is hierarchy
