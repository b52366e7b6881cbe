"""Incremental hierarchy patching after a single validated reassignment."""

import logging
from collections import deque
from typing import Any, Optional, Sequence, Set

from src.services.org_hierarchy import OrgHierarchy, sort_child_ids

logger = logging.getLogger(__name__)


def apply_reassignment(
    hierarchy: OrgHierarchy,
    employee_id: str,
    old_manager_id: Optional[str],
    new_manager_id: Optional[str],
    employees: Optional[Sequence[Any]] = None,
) -> OrgHierarchy:
    """
    Move ``employee_id`` (with its whole branch) under ``new_manager_id``.

    The caller is expected to have run the cycle guard already; nothing is
    re-validated here. The input snapshot is left untouched.

    When ``employees`` is given the new manager's reports are re-sorted into
    tier/name order, matching a full rebuild. Without it the moved employee
    is appended at the end of its new sibling list until the next rebuild.
    Roots are never re-sorted.
    """
    updated = hierarchy.copy()

    if old_manager_id is None:
        if employee_id in updated.roots:
            updated.roots.remove(employee_id)
    elif employee_id in updated.children.get(old_manager_id, []):
        updated.children[old_manager_id].remove(employee_id)

    updated.children.setdefault(employee_id, [])

    if new_manager_id is None:
        updated.roots.append(employee_id)
        base_level: Optional[int] = 0
    else:
        siblings = updated.children.setdefault(new_manager_id, [])
        siblings.append(employee_id)
        if employees is not None:
            by_id = {emp.id: emp for emp in employees}
            updated.children[new_manager_id] = sort_child_ids(siblings, by_id)
        manager_level = updated.levels.get(new_manager_id)
        base_level = None if manager_level is None else manager_level + 1

    _relevel_branch(updated, employee_id, base_level)

    logger.debug(
        "Reassigned %s from %s to %s", employee_id, old_manager_id, new_manager_id
    )
    return updated


def _relevel_branch(
    hierarchy: OrgHierarchy,
    employee_id: str,
    base_level: Optional[int],
) -> None:
    # A manager without a level is itself unreachable, so the branch is too
    if base_level is None:
        logger.warning(
            "New manager of %s has no level; branch left without levels", employee_id
        )

    visited: Set[str] = set()
    queue = deque([(employee_id, base_level)])

    while queue:
        current_id, level = queue.popleft()
        if current_id in visited:
            continue
        visited.add(current_id)

        if level is None:
            hierarchy.levels.pop(current_id, None)
            next_level = None
        else:
            hierarchy.levels[current_id] = level
            next_level = level + 1

        for child_id in hierarchy.children.get(current_id, []):
            queue.append((child_id, next_level))
