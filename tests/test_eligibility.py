"""
Tests for actions and eligibility filtering

Tests cover:
- Rules and execution modes per action
- Splitting a selection in snapshot order
- Action name parsing
"""
import pytest

from numberdesk.core.batch import ActionKind, ExecutionMode, filter_selection
from numberdesk.core.models import NumberStatus

from test_helpers import make_ids


class TestActionKind:
    """Tests for action metadata"""

    def test_reputation_is_throttled(self):
        assert ActionKind.REPUTATION_CHECK.mode is ExecutionMode.SEQUENTIAL_THROTTLED

    @pytest.mark.parametrize("action", [ActionKind.ASSIGN, ActionKind.UNASSIGN, ActionKind.DELETE])
    def test_mutations_fan_out(self, action):
        assert action.mode is ExecutionMode.PARALLEL_FAN_OUT

    def test_rules(self):
        assert ActionKind.ASSIGN.rule.allows(NumberStatus.AVAILABLE)
        assert not ActionKind.ASSIGN.rule.allows(NumberStatus.RESERVED)
        assert ActionKind.UNASSIGN.rule.allows(NumberStatus.ASSIGNED)
        assert not ActionKind.UNASSIGN.rule.allows(NumberStatus.AVAILABLE)
        assert ActionKind.DELETE.rule.allows(NumberStatus.SUSPENDED)
        assert not ActionKind.DELETE.rule.allows(NumberStatus.ASSIGNED)
        assert all(ActionKind.REPUTATION_CHECK.rule.allows(s) for s in NumberStatus)

    @pytest.mark.parametrize("value,expected", [
        ("assign", ActionKind.ASSIGN),
        ("UNASSIGN", ActionKind.UNASSIGN),
        ("reputation", ActionKind.REPUTATION_CHECK),
        ("reputation-check", ActionKind.REPUTATION_CHECK),
    ])
    def test_from_string(self, value, expected):
        assert ActionKind.from_string(value) is expected

    def test_from_string_rejects_unknown(self):
        with pytest.raises(ValueError):
            ActionKind.from_string("suspend")


class TestFilterSelection:
    """Tests for eligibility splits"""

    def test_assign_split(self, snapshot):
        selected = frozenset(make_ids("n1", "n2", "n3", "n4", "n5"))
        split = filter_selection(selected, snapshot, ActionKind.ASSIGN)
        assert split.eligible == tuple(make_ids("n1", "n3", "n5"))
        assert split.ineligible == tuple(make_ids("n2", "n4"))

    def test_unassign_split(self, snapshot):
        split = filter_selection(frozenset(make_ids("n1", "n2")), snapshot, ActionKind.UNASSIGN)
        assert split.eligible == tuple(make_ids("n2"))
        assert split.ineligible == tuple(make_ids("n1"))

    def test_delete_skips_assigned(self, snapshot):
        split = filter_selection(frozenset(make_ids("n2", "n4")), snapshot, ActionKind.DELETE)
        assert split.eligible == tuple(make_ids("n4"))

    def test_order_follows_snapshot(self, snapshot):
        split = filter_selection(
            frozenset(make_ids("n5", "n1", "n3")), snapshot, ActionKind.REPUTATION_CHECK
        )
        assert split.eligible == tuple(make_ids("n1", "n3", "n5"))

    def test_ids_missing_from_snapshot_are_dropped(self, snapshot):
        split = filter_selection(frozenset(make_ids("n1", "gone")), snapshot, ActionKind.DELETE)
        assert split.eligible == tuple(make_ids("n1"))
        assert split.ineligible == ()

    def test_empty_selection(self, snapshot):
        split = filter_selection(frozenset(), snapshot, ActionKind.ASSIGN)
        assert split.eligible == () and split.ineligible == ()
