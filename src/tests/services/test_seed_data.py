"""Tests for demo organisation generation."""

import random
import re

from src.schemas.employee import Tier
from src.services.org_hierarchy import build_org_hierarchy
from src.services.seed_data import (
    DESIGNATIONS_BY_TIER,
    generate_employee_for_manager,
    generate_employee_id,
    generate_org_hierarchy,
    get_designations_for_tier,
)


class TestGenerateOrgHierarchy:
    """Tests for generate_org_hierarchy."""

    def test_shape(self):
        """Test tier counts from executive down to intern."""
        employees = generate_org_hierarchy()
        counts = {tier: sum(1 for e in employees if e.tier == tier) for tier in Tier}

        assert counts == {
            Tier.EXECUTIVE: 1,
            Tier.LEAD: 3,
            Tier.MANAGER: 6,
            Tier.INDIVIDUAL: 12,
            Tier.INTERN: 20,
        }

    def test_same_seed_same_org(self):
        """Test generation is reproducible."""
        first = [e.model_dump(exclude={"last_updated_at"}) for e in generate_org_hierarchy(7)]
        second = [e.model_dump(exclude={"last_updated_at"}) for e in generate_org_hierarchy(7)]

        assert first == second
        assert first != [
            e.model_dump(exclude={"last_updated_at"}) for e in generate_org_hierarchy(8)
        ]

    def test_single_tree_five_levels(self):
        """Test the generated org is one tree with tiers matching depth."""
        employees = generate_org_hierarchy()
        hierarchy = build_org_hierarchy(employees)

        assert len(hierarchy.roots) == 1
        assert len(hierarchy.levels) == len(employees)
        assert max(hierarchy.levels.values()) == 4

    def test_designations_match_tier(self):
        """Test each designation belongs to the employee's tier."""
        for employee in generate_org_hierarchy():
            assert employee.designation in DESIGNATIONS_BY_TIER[employee.tier]

    def test_ids_unique(self):
        """Test generated ids do not collide."""
        employees = generate_org_hierarchy()

        assert len({e.id for e in employees}) == len(employees)


class TestGenerators:
    """Tests for single-record helpers."""

    def test_employee_id_format(self):
        """Test ids look like emp_ followed by eight characters."""
        assert re.fullmatch(r"emp_[a-z0-9]{8}", generate_employee_id(random.Random(1)))

    def test_report_is_one_tier_below(self):
        """Test a new report defaults to the next tier down."""
        report = generate_employee_for_manager(random.Random(1), "mgr", Tier.LEAD)

        assert report.tier == Tier.MANAGER
        assert report.manager_id == "mgr"

    def test_intern_reports_stay_interns(self):
        """Test the lowest tier has no tier below."""
        report = generate_employee_for_manager(random.Random(1), "mgr", Tier.INTERN)

        assert report.tier == Tier.INTERN

    def test_designations_for_tier_is_a_copy(self):
        """Test callers cannot mutate the shared table."""
        designations = get_designations_for_tier(Tier.LEAD)
        designations.append("Mascot")

        assert "Mascot" not in DESIGNATIONS_BY_TIER[Tier.LEAD]
