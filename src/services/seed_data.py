"""Deterministic demo organisation used to seed an empty database."""

import random
import string
from typing import Dict, List, Optional, Sequence

from src.schemas.employee import EmployeeRecord, Tier, next_tier_below


DESIGNATIONS_BY_TIER: Dict[Tier, List[str]] = {
    Tier.EXECUTIVE: ["Chief Executive Officer", "President", "Chief Operating Officer"],
    Tier.LEAD: ["Vice President", "Senior Director", "Chief Technology Officer", "Chief Financial Officer"],
    Tier.MANAGER: ["Director", "Senior Manager", "Department Head", "Principal Engineer"],
    Tier.INDIVIDUAL: ["Manager", "Team Lead", "Senior Developer", "Product Manager", "Senior Analyst"],
    Tier.INTERN: ["Developer", "Analyst", "Coordinator", "Specialist", "Associate"],
}

TEAMS = [
    "Engineering", "Product", "Design", "Marketing", "Sales",
    "Operations", "Finance", "HR", "Legal",
]

PHOTO_ASSETS = [f"person-{i:02d}" for i in range(1, 21)]

FIRST_NAMES = [
    "Avery", "Blake", "Carmen", "Dana", "Elliot", "Farah", "Gabriel", "Hana",
    "Imani", "Jonas", "Keiko", "Luis", "Maya", "Nikhil", "Olivia", "Priya",
    "Quinn", "Rafael", "Sofia", "Tariq", "Uma", "Victor", "Wen", "Yusuf", "Zoe",
]

LAST_NAMES = [
    "Adeyemi", "Bergstrom", "Castillo", "Dubois", "Eriksen", "Fujita", "Garcia",
    "Haddad", "Ivanova", "Jensen", "Kowalski", "Lindqvist", "Moreau", "Nakamura",
    "Okafor", "Petrov", "Quintero", "Rossi", "Schmidt", "Tanaka", "Valdez", "Wong",
]

# Employees per tier, top to bottom
ORG_SHAPE = [
    (Tier.EXECUTIVE, 1),
    (Tier.LEAD, 3),
    (Tier.MANAGER, 6),
    (Tier.INDIVIDUAL, 12),
    (Tier.INTERN, 20),
]


def generate_employee_id(rng: random.Random) -> str:
    return "emp_" + "".join(rng.choices(string.ascii_lowercase + string.digits, k=8))


def generate_employee_code(rng: random.Random) -> str:
    return f"EMP{rng.randint(0, 9999):04d}"


def generate_employee(
    rng: random.Random,
    tier: Tier,
    manager_id: Optional[str] = None,
) -> EmployeeRecord:
    """A single employee with a tier-appropriate designation."""
    return EmployeeRecord(
        id=generate_employee_id(rng),
        employee_id=generate_employee_code(rng),
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        designation=rng.choice(DESIGNATIONS_BY_TIER[tier]),
        tier=tier,
        team=rng.choice(TEAMS),
        manager_id=manager_id,
        photo_asset_key=rng.choice(PHOTO_ASSETS),
    )


def generate_employees_for_tier(
    rng: random.Random,
    tier: Tier,
    count: int,
    manager_ids: Sequence[str] = (),
) -> List[EmployeeRecord]:
    """``count`` employees assigned round-robin to ``manager_ids``."""
    return [
        generate_employee(rng, tier, manager_ids[i % len(manager_ids)] if manager_ids else None)
        for i in range(count)
    ]


def generate_org_hierarchy(seed: int = 12345) -> List[EmployeeRecord]:
    """Five-tier organisation: 1 executive down to 20 interns."""
    rng = random.Random(seed)
    employees: List[EmployeeRecord] = []
    manager_ids: List[str] = []

    for tier, count in ORG_SHAPE:
        members = generate_employees_for_tier(rng, tier, count, manager_ids)
        employees.extend(members)
        manager_ids = [emp.id for emp in members]

    return employees


def generate_employee_for_manager(
    rng: random.Random,
    manager_id: str,
    manager_tier: Tier,
) -> EmployeeRecord:
    """A new report one tier below the manager."""
    return generate_employee(rng, next_tier_below(manager_tier), manager_id)


def get_designations_for_tier(tier: Tier) -> List[str]:
    return list(DESIGNATIONS_BY_TIER.get(Tier(tier), DESIGNATIONS_BY_TIER[Tier.INTERN]))
