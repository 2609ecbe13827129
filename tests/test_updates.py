"""
Tests for typed status updates.
"""

import pytest
from pydantic import ValidationError

from das.state.schema import AgentStatus
from das.state.store import NotFoundError
from das.state.schemas.updates import (
    AdjustSanity,
    SetRole,
    SetStatus,
    SetStress,
    parse_updates,
    updates_from_mapping,
)


class TestParsing:
    """Tests for building updates."""

    def test_parse_tagged_list(self):
        updates = parse_updates([
            {"op": "adjust_sanity", "delta": -3},
            {"op": "set_status", "status": "injured"},
        ])
        assert isinstance(updates[0], AdjustSanity)
        assert isinstance(updates[1], SetStatus)
        assert updates[1].status == AgentStatus.INJURED

    def test_unknown_op_rejected(self):
        with pytest.raises(ValidationError):
            parse_updates([{"op": "set_mood", "mood": "grim"}])

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            SetStatus(status="vaporized")

    def test_empty_role_rejected(self):
        with pytest.raises(ValidationError):
            SetRole(role="")

    def test_mapping_in_order(self):
        updates = updates_from_mapping({"stressLevel": 20, "sanity": -5})
        assert [u.op for u in updates] == ["set_stress", "adjust_sanity"]

    def test_mapping_unknown_key(self):
        with pytest.raises(ValueError, match="clearance"):
            updates_from_mapping({"sanity": -1, "clearance": "MAJESTIC"})


class TestApplying:
    """Tests for update_agent_status on the manager."""

    def test_updates_apply_in_order(self, manager, agent):
        manager.update_agent_status(agent.id, [
            AdjustSanity(delta=-10, reason="autopsy"),
            SetStress(level=250),
            SetRole(role="Handler"),
        ])

        updated = manager.get_agent(agent.id)
        assert updated.sanity == 50
        assert updated.stress_level == 100
        assert updated.role == "Handler"
        assert updated.last_action is not None

    def test_sanity_update_goes_through_tracker(self, manager, agent):
        manager.update_agent_status(agent.id, {"sanity": -60})

        tracker = manager.get_sanity_tracker(agent.id)
        assert tracker.current == 0
        assert manager.get_agent(agent.id).status == AgentStatus.INCAPACITATED

    def test_missing_agent_checked_first(self, manager, store):
        before = store.snapshot()
        with pytest.raises(NotFoundError):
            manager.update_agent_status("A404", {"role": "Ghost"})
        assert store.snapshot() == before

    def test_bad_mapping_changes_nothing(self, manager, store, agent):
        before = store.snapshot()
        with pytest.raises(ValueError):
            manager.update_agent_status(agent.id, {"role": "Handler", "rank": 3})
        assert store.snapshot() == before
