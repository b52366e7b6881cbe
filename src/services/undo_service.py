"""Single-slot undo buffer for node and branch deletions.

The buffer holds at most one operation and expires it after a fixed window.
Time is passed in by the caller, so nothing here schedules timers.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from src.schemas.employee import EmployeeRecord

logger = logging.getLogger(__name__)


class UndoOperationType(str, Enum):
    """Kinds of reversible operations."""

    DELETE_NODE = "DELETE_NODE"
    DELETE_BRANCH = "DELETE_BRANCH"


@dataclass(frozen=True)
class UndoOperation:
    """A deletion that can be reverted by re-inserting the same records."""

    type: UndoOperationType
    employee: EmployeeRecord
    timestamp: float
    parent_id: Optional[str] = None
    children: List[EmployeeRecord] = field(default_factory=list)

    @property
    def records(self) -> List[EmployeeRecord]:
        """Everything the deletion removed, the targeted employee first."""
        return [self.employee, *self.children]


class UndoBuffer:
    """Holds the most recent deletion until it is undone, dismissed or expires."""

    def __init__(self, window_seconds: float = 8.0):
        self.window_seconds = window_seconds
        self.last_operation: Optional[UndoOperation] = None

    def record_delete(
        self,
        employee: EmployeeRecord,
        now: float,
        children: Optional[List[EmployeeRecord]] = None,
        parent_id: Optional[str] = None,
    ) -> UndoOperation:
        """Replace any pending operation with this deletion."""
        children = list(children or [])
        operation = UndoOperation(
            type=UndoOperationType.DELETE_BRANCH if children else UndoOperationType.DELETE_NODE,
            employee=employee,
            timestamp=now,
            parent_id=parent_id,
            children=children,
        )
        self.last_operation = operation
        logger.debug("Recorded %s for %s", operation.type.value, employee.id)
        return operation

    def is_visible(self, now: float) -> bool:
        """Whether the undo prompt should still be shown."""
        return (
            self.last_operation is not None
            and now - self.last_operation.timestamp <= self.window_seconds
        )

    def peek(self, now: float) -> Optional[UndoOperation]:
        """The pending operation if it is still inside the undo window, left in place."""
        return self.last_operation if self.is_visible(now) else None

    def perform_undo(self, now: float) -> Optional[UndoOperation]:
        """Pop the pending operation if it is still inside the undo window."""
        operation = self.peek(now)
        self.last_operation = None
        return operation

    def dismiss(self) -> None:
        self.last_operation = None

    def clear(self) -> None:
        self.last_operation = None
