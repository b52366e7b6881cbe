"""Tests for the interaction log."""

import json
from datetime import datetime, timedelta, timezone

from src.services.interaction_log import (
    InteractionState,
    InteractionType,
    clear_logs,
    export_logs_as_json,
    get_interaction_stats,
    get_logs_by_type,
    get_logs_in_time_range,
    get_recent_logs,
    log_add_node,
    log_filter,
    log_reassignment,
)


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _populated_state():
    state = InteractionState(session_started=START)
    state = log_filter(state, "name", "priya", 2, now=START + timedelta(seconds=1))
    state = log_reassignment(state, "e2", "e1", "e3", True, now=START + timedelta(seconds=2))
    state = log_reassignment(
        state, "e1", None, "e2", False, reason="cycle", now=START + timedelta(seconds=3)
    )
    state = log_add_node(state, "e9", "e1", "lead", True, now=START + timedelta(seconds=4))
    return state


class TestInteractionLog:
    """Tests for logging and querying interactions."""

    def test_logging_returns_new_state(self):
        """Test logging never mutates the previous state."""
        state = InteractionState(session_started=START)

        new_state = log_filter(state, "name", "a", 1)

        assert state.logs == []
        assert len(new_state.logs) == 1
        assert new_state.logs[0].type == InteractionType.FILTER

    def test_empty_filter_value_stored_as_none(self):
        """Test a cleared filter is logged with no value."""
        state = log_filter(InteractionState(), "name", "", 0)

        assert state.logs[0].payload["filter_value"] is None

    def test_logs_by_type(self):
        """Test filtering entries by type."""
        state = _populated_state()

        reassignments = get_logs_by_type(state, InteractionType.REASSIGNMENT)

        assert [e.payload["employee_id"] for e in reassignments] == ["e2", "e1"]

    def test_recent_logs(self):
        """Test recent logs are the last N in order."""
        state = _populated_state()

        assert [e.type for e in get_recent_logs(state, 2)] == [
            InteractionType.REASSIGNMENT,
            InteractionType.ADD_NODE,
        ]
        assert get_recent_logs(state, 0) == []

    def test_time_range_inclusive(self):
        """Test range bounds are inclusive."""
        state = _populated_state()

        entries = get_logs_in_time_range(
            state, START + timedelta(seconds=2), START + timedelta(seconds=3)
        )

        assert len(entries) == 2

    def test_stats(self):
        """Test stats count each kind and successes."""
        state = _populated_state()

        stats = get_interaction_stats(state, now=START + timedelta(minutes=1))

        assert stats["total_interactions"] == 4
        assert stats["filter_interactions"] == 1
        assert stats["reassignment_interactions"] == 2
        assert stats["successful_reassignments"] == 1
        assert stats["add_node_interactions"] == 1
        assert stats["successful_add_nodes"] == 1
        assert stats["session_duration_seconds"] == 60.0

    def test_clear_keeps_session_start(self):
        """Test clearing keeps the session start time."""
        cleared = clear_logs(_populated_state())

        assert cleared.logs == []
        assert cleared.session_started == START

    def test_export_json(self):
        """Test export is valid JSON with string types."""
        exported = json.loads(export_logs_as_json(_populated_state()))

        assert exported["session_started"] == START.isoformat()
        assert [entry["type"] for entry in exported["logs"]] == [
            "filter",
            "reassignment",
            "reassignment",
            "add-node",
        ]
        assert exported["stats"]["total_interactions"] == 4
