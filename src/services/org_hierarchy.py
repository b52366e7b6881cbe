"""Org hierarchy snapshot: roots, reporting lines and depth levels.

The snapshot is derived from a flat list of employee records (anything with
``id``, ``manager_id``, ``tier`` and ``name`` attributes) and is never the
source of truth. It is rebuilt from scratch after bulk changes and patched
incrementally after a single reassignment (see ``hierarchy_updater``).
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from src.schemas.employee import TIER_RANK, Tier

logger = logging.getLogger(__name__)


class OrphanPolicy(str, Enum):
    """How to treat an employee whose manager id matches no employee."""

    TREAT_AS_ROOT = "treat_as_root"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class OrgHierarchy:
    """Derived reporting structure keyed by employee id."""

    roots: List[str] = field(default_factory=list)
    children: Dict[str, List[str]] = field(default_factory=dict)
    levels: Dict[str, int] = field(default_factory=dict)

    def copy(self) -> "OrgHierarchy":
        """Deep-enough copy: new containers, shared immutable ids."""
        return OrgHierarchy(
            roots=list(self.roots),
            children={k: list(v) for k, v in self.children.items()},
            levels=dict(self.levels),
        )

    def parent_of(self, employee_id: str) -> Optional[str]:
        for parent_id, child_ids in self.children.items():
            if employee_id in child_ids:
                return parent_id
        return None

    def edges(self) -> List[Tuple[str, str]]:
        """Ordered (manager, report) pairs."""
        return [
            (parent_id, child_id)
            for parent_id, child_ids in self.children.items()
            for child_id in child_ids
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roots": list(self.roots),
            "children": {k: list(v) for k, v in self.children.items()},
            "levels": dict(self.levels),
        }


def tier_sort_key(employee: Any) -> Tuple[int, str, str, str]:
    """Sibling order: tier rank, then name, then id as a final tie-break."""
    return (
        TIER_RANK[Tier(employee.tier)],
        employee.name.casefold(),
        employee.name,
        employee.id,
    )


def sort_child_ids(child_ids: List[str], by_id: Dict[str, Any]) -> List[str]:
    """Return ``child_ids`` in sibling order; unknown ids keep their place at the end."""
    known = [cid for cid in child_ids if cid in by_id]
    unknown = [cid for cid in child_ids if cid not in by_id]
    known.sort(key=lambda cid: tier_sort_key(by_id[cid]))
    return known + unknown


def build_org_hierarchy(
    employees: Sequence[Any],
    orphan_policy: OrphanPolicy = OrphanPolicy.TREAT_AS_ROOT,
) -> OrgHierarchy:
    """
    Build the hierarchy snapshot for a flat employee list.

    Args:
        employees: Employee records in any order
        orphan_policy: What to do with employees whose manager is unknown

    Returns:
        OrgHierarchy with every employee id present in ``children``
        (leaves map to an empty list) and a level for every employee
        reachable from a root.
    """
    orphan_policy = OrphanPolicy(orphan_policy)
    by_id: Dict[str, Any] = {emp.id: emp for emp in employees}

    roots: List[str] = []
    children: Dict[str, List[str]] = {emp.id: [] for emp in employees}
    levels: Dict[str, int] = {}
    orphans: List[str] = []

    for emp in employees:
        if emp.manager_id is None:
            roots.append(emp.id)
            levels[emp.id] = 0
        elif emp.manager_id in children:
            children[emp.manager_id].append(emp.id)
        else:
            orphans.append(emp.id)
            if orphan_policy == OrphanPolicy.TREAT_AS_ROOT:
                roots.append(emp.id)
                levels[emp.id] = 0

    if orphans:
        logger.warning(
            "%d employee(s) reference an unknown manager (policy=%s): %s",
            len(orphans),
            orphan_policy.value,
            ", ".join(orphans),
        )
        if orphan_policy == OrphanPolicy.EXCLUDE:
            for orphan_id in orphans:
                for removed_id in [orphan_id, *_walk_descendants(orphan_id, children)]:
                    children.pop(removed_id, None)

    # Levels: breadth-first from every root at once
    queue = deque(roots)
    visited: Set[str] = set()
    while queue:
        current_id = queue.popleft()
        if current_id in visited:
            continue
        visited.add(current_id)

        current_level = levels.get(current_id, 0)
        for child_id in children.get(current_id, []):
            if child_id in visited:
                continue
            levels[child_id] = current_level + 1
            queue.append(child_id)

    unreachable = [emp_id for emp_id in children if emp_id not in levels]
    if unreachable:
        logger.warning(
            "%d employee(s) are not reachable from any root (cyclic manager chain?): %s",
            len(unreachable),
            ", ".join(unreachable),
        )

    for parent_id in children:
        children[parent_id] = sort_child_ids(children[parent_id], by_id)

    logger.debug(
        "Built hierarchy: %d employees, %d root(s)", len(children), len(roots)
    )
    return OrgHierarchy(roots=roots, children=children, levels=levels)


def _walk_descendants(employee_id: str, children: Dict[str, List[str]]) -> List[str]:
    descendants: List[str] = []
    visited: Set[str] = {employee_id}
    queue = deque([employee_id])

    while queue:
        current_id = queue.popleft()
        for child_id in children.get(current_id, []):
            if child_id in visited:
                continue
            visited.add(child_id)
            descendants.append(child_id)
            queue.append(child_id)

    return descendants


def get_descendants(employee_id: str, hierarchy: OrgHierarchy) -> List[str]:
    """All transitive reports of ``employee_id`` in breadth-first order."""
    return _walk_descendants(employee_id, hierarchy.children)


def get_hierarchy_path(employees: Iterable[Any], employee_id: str) -> List[Any]:
    """Management chain from the top-most reachable manager down to ``employee_id``."""
    by_id = {emp.id: emp for emp in employees}
    path: List[Any] = []
    seen: Set[str] = set()

    current = by_id.get(employee_id)
    while current is not None and current.id not in seen:
        seen.add(current.id)
        path.append(current)
        if current.manager_id is None:
            break
        current = by_id.get(current.manager_id)

    path.reverse()
    return path
