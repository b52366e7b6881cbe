"""Deterministic top-down tree layout for the org chart.

Leaves take consecutive horizontal slots in sibling order, each manager sits
at the midpoint of its direct reports, and separate root trees are kept apart
by one empty slot. Depth alone decides the vertical position.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from src.config.settings import LayoutSettings
from src.services.org_hierarchy import OrgHierarchy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodePosition:
    """Top-left corner of an employee card."""

    id: str
    x: float
    y: float
    level: int


@dataclass
class LayoutResult:
    """Positions for every placed employee plus the canvas bounds."""

    positions: Dict[str, NodePosition] = field(default_factory=dict)
    edges: List[Tuple[str, str]] = field(default_factory=list)
    width: float = 0
    height: float = 0

    def coordinates(self) -> Dict[str, Tuple[float, float]]:
        return {node_id: (pos.x, pos.y) for node_id, pos in self.positions.items()}


def compute_layout(
    employees: Sequence[Any],
    hierarchy: OrgHierarchy,
    settings: Optional[LayoutSettings] = None,
) -> LayoutResult:
    """
    Lay out the hierarchy as a forest of top-down trees.

    Args:
        employees: Employee records the hierarchy was built from
        hierarchy: Snapshot providing roots, sibling order and levels
        settings: Card size, gaps and margin

    Returns:
        LayoutResult; identical inputs always give identical coordinates.
    """
    settings = settings or LayoutSettings()

    slots: Dict[str, float] = {}
    depths: Dict[str, int] = {}
    claimed: Set[str] = set()
    claimed_children: Dict[str, List[str]] = {}
    next_slot = 0

    for root_id in hierarchy.roots:
        if root_id in claimed:
            logger.warning("Root %s already placed; skipping", root_id)
            continue
        if slots:
            next_slot += 1  # spacer between separate trees
        claimed.add(root_id)

        # Post-order walk with an explicit stack: (id, depth, children_done)
        stack: List[Tuple[str, int, bool]] = [
            (root_id, hierarchy.levels.get(root_id, 0), False)
        ]
        while stack:
            node_id, depth, children_done = stack.pop()

            if children_done:
                child_slots = [slots[cid] for cid in claimed_children[node_id]]
                slots[node_id] = (min(child_slots) + max(child_slots)) / 2
                continue

            depths[node_id] = depth
            kids = []
            for child_id in hierarchy.children.get(node_id, []):
                if child_id in claimed:
                    logger.warning(
                        "Employee %s revisited under %s; not descending again",
                        child_id,
                        node_id,
                    )
                    continue
                claimed.add(child_id)
                kids.append(child_id)

            if not kids:
                slots[node_id] = next_slot
                next_slot += 1
                continue

            claimed_children[node_id] = kids
            stack.append((node_id, depth, True))
            for child_id in reversed(kids):
                stack.append((child_id, hierarchy.levels.get(child_id, depth + 1), False))

    if not slots:
        return LayoutResult(width=settings.empty_width, height=settings.empty_height)

    column = settings.node_width + settings.horizontal_gap
    row = settings.node_height + settings.vertical_gap

    positions = {
        node_id: NodePosition(
            id=node_id,
            x=settings.margin + slot * column,
            y=settings.margin + depths[node_id] * row,
            level=depths[node_id],
        )
        for node_id, slot in slots.items()
    }
    edges = [
        (parent_id, child_id)
        for parent_id, kids in claimed_children.items()
        for child_id in kids
    ]

    unplaced = [emp.id for emp in employees if emp.id not in positions]
    if unplaced:
        logger.warning("%d employee(s) have no position: %s", len(unplaced), ", ".join(unplaced))

    min_slot = min(slots.values())
    max_slot = max(slots.values())
    max_depth = max(depths[node_id] for node_id in slots)

    return LayoutResult(
        positions=positions,
        edges=edges,
        width=(max_slot - min_slot) * column + settings.node_width + 2 * settings.margin,
        height=max_depth * row + settings.node_height + 2 * settings.margin,
    )
