"""Tests for the undo buffer."""

import pytest

from src.services.undo_service import UndoBuffer, UndoOperationType


@pytest.fixture
def buffer():
    return UndoBuffer(window_seconds=8.0)


class TestUndoBuffer:
    """Tests for UndoBuffer."""

    def test_empty_buffer(self, buffer):
        """Test nothing to undo initially."""
        assert buffer.is_visible(0.0) is False
        assert buffer.perform_undo(0.0) is None

    def test_single_node_delete(self, buffer, small_org):
        """Test a delete with no children is a node operation."""
        operation = buffer.record_delete(small_org[1], now=100.0, parent_id="1")

        assert operation.type == UndoOperationType.DELETE_NODE
        assert operation.records == [small_org[1]]
        assert operation.parent_id == "1"

    def test_branch_delete(self, buffer, small_org):
        """Test a delete with descendants is a branch operation."""
        operation = buffer.record_delete(small_org[0], now=100.0, children=small_org[1:])

        assert operation.type == UndoOperationType.DELETE_BRANCH
        assert [r.id for r in operation.records] == ["1", "2", "3"]

    def test_undo_inside_window(self, buffer, small_org):
        """Test undo returns the operation and empties the buffer."""
        buffer.record_delete(small_org[1], now=100.0)

        operation = buffer.perform_undo(107.5)

        assert operation is not None
        assert operation.employee.id == "2"
        assert buffer.last_operation is None

    def test_window_boundary_is_inclusive(self, buffer, small_org):
        """Test undo exactly at the window edge still works."""
        buffer.record_delete(small_org[1], now=100.0)

        assert buffer.is_visible(108.0) is True

    def test_undo_after_window(self, buffer, small_org):
        """Test an expired operation cannot be undone and is dropped."""
        buffer.record_delete(small_org[1], now=100.0)

        assert buffer.perform_undo(108.1) is None
        assert buffer.last_operation is None

    def test_newer_delete_replaces_older(self, buffer, small_org):
        """Test only the latest deletion is kept."""
        buffer.record_delete(small_org[1], now=100.0)
        buffer.record_delete(small_org[2], now=101.0)

        assert buffer.perform_undo(102.0).employee.id == "3"

    def test_peek_leaves_operation_pending(self, buffer, small_org):
        """Test peeking returns the operation without consuming it."""
        buffer.record_delete(small_org[1], now=100.0)

        assert buffer.peek(101.0).employee.id == "2"
        assert buffer.last_operation is not None
        assert buffer.peek(108.1) is None

    def test_dismiss(self, buffer, small_org):
        """Test dismissing hides the prompt and forgets the operation."""
        buffer.record_delete(small_org[1], now=100.0)

        buffer.dismiss()

        assert buffer.is_visible(100.0) is False
        assert buffer.perform_undo(100.0) is None
