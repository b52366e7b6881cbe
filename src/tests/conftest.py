"""Shared fixtures for org chart tests."""

from datetime import datetime, timezone

import pytest

from src.schemas.employee import EmployeeRecord, Tier


FIXED_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_employee():
    """Factory for employee records with sensible defaults."""

    def _make(
        id: str,
        manager_id=None,
        tier: Tier = Tier.INDIVIDUAL,
        name=None,
        designation: str = "Engineer",
        employee_id=None,
    ) -> EmployeeRecord:
        return EmployeeRecord(
            id=id,
            employee_id=employee_id or f"EMP{id.rjust(4, '0')}",
            name=name or f"Employee {id}",
            designation=designation,
            tier=tier,
            manager_id=manager_id,
            last_updated_at=FIXED_TIME,
        )

    return _make


@pytest.fixture
def small_org(make_employee):
    """One root with two direct reports."""
    return [
        make_employee("1", tier=Tier.EXECUTIVE, name="Alice"),
        make_employee("2", manager_id="1", tier=Tier.LEAD, name="Bob"),
        make_employee("3", manager_id="1", tier=Tier.LEAD, name="Carol"),
    ]


@pytest.fixture
def deep_org(make_employee):
    """
    Four-level tree:

        ceo
        ├── cto
        │   ├── eng1
        │   │   └── intern
        │   └── eng2
        └── cfo
    """
    return [
        make_employee("ceo", tier=Tier.EXECUTIVE, name="Ceo"),
        make_employee("cto", manager_id="ceo", tier=Tier.LEAD, name="Cto"),
        make_employee("cfo", manager_id="ceo", tier=Tier.LEAD, name="Cfo"),
        make_employee("eng1", manager_id="cto", tier=Tier.INDIVIDUAL, name="Eng One"),
        make_employee("eng2", manager_id="cto", tier=Tier.INDIVIDUAL, name="Eng Two"),
        make_employee("intern", manager_id="eng1", tier=Tier.INTERN, name="Intern"),
    ]
