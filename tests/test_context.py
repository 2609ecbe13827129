"""
Tests for context snapshots.
"""

import pytest
from pydantic import ValidationError

from das.context.builder import ContextBuilder
from das.state.event_bus import EventType


@pytest.fixture
def builder(manager):
    return ContextBuilder(manager, history_limit=3)


class TestBuildContext:
    """Tests for snapshot contents."""

    def test_empty_campaign(self, builder):
        snapshot = builder.build_context()

        assert snapshot.id == "CTX-DG-TEST-1"
        assert snapshot.agents == []
        assert snapshot.current_mission is None
        assert snapshot.atmosphere == "tense"
        assert snapshot.briefing_level == "classified"
        assert snapshot.clearance == "DELTA GREEN"
        assert snapshot.metadata["version"] == "1.0.0"

    def test_contents(self, builder, manager, agent):
        manager.create_team("Night Owls", [agent.id])
        manager.generate_mission_briefing({"title": "Op Whisper"})
        manager.create_threat_assessment({"name": "Low", "threat_level": 2})
        manager.create_threat_assessment({"name": "High", "threat_level": 9})
        manager.inject_narrative({"type": "scene", "content": "Fog"})

        snapshot = builder.build_context(atmosphere="dread")

        assert [a.id for a in snapshot.agents] == [agent.id]
        assert snapshot.teams[0].name == "Night Owls"
        assert snapshot.current_mission.title == "Op Whisper"
        assert [t.name for t in snapshot.active_threats] == ["High", "Low"]
        assert snapshot.narrative.recent_scene.content == "Fog"
        assert snapshot.atmosphere == "dread"

    def test_snapshot_isolated_from_later_changes(self, builder, manager, agent):
        snapshot = builder.build_context()
        manager.modify_sanity(agent.id, -30)

        assert snapshot.agents[0].sanity == 60
        assert manager.get_agent(agent.id).sanity == 30

    def test_world_state_copy_is_shallow(self, builder, manager):
        manager.world_state["sites"] = ["Arkham"]
        snapshot = builder.build_context()

        manager.world_state["weather"] = "storm"
        manager.world_state["sites"].append("Dunwich")

        assert "weather" not in snapshot.world_state
        assert snapshot.world_state["sites"] == ["Arkham", "Dunwich"]

    def test_snapshot_is_frozen(self, builder):
        snapshot = builder.build_context()
        with pytest.raises(ValidationError):
            snapshot.atmosphere = "calm"

    def test_camel_case_output(self, builder, manager):
        manager.create_team("Night Owls")
        data = builder.build_context().to_dict()

        for key in ("currentMission", "activeThreats", "worldState", "briefingLevel"):
            assert key in data
        assert "pendingNarrative" in data["narrative"]
        assert data["teams"][0]["status"] == "operational"


class TestHistory:
    """Tests for the bounded snapshot history."""

    def test_history_bounded(self, builder):
        for _ in range(5):
            builder.build_context()

        assert len(builder.history) == 3
        assert builder.history[0].id == "CTX-DG-TEST-3"
        assert builder.latest().id == "CTX-DG-TEST-5"

    def test_build_published(self, builder, bus):
        snapshot = builder.build_context()
        events = bus.get_history(EventType.CONTEXT_BUILT)
        assert events[-1].data["context_id"] == snapshot.id
