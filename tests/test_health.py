"""
Tests for physical health: damage, healing, wound levels and death.
"""

import pytest

from das.state.event_bus import EventType
from das.state.schema import Agent, AgentStatus, HealthBand
from das.systems.health import HealthSystem, health_band, wound_level


@pytest.fixture
def body():
    return Agent(id="X1", name="Loose")


class TestHealthBands:

    @pytest.mark.parametrize("current,band", [
        (100, HealthBand.HEALTHY),
        (99, HealthBand.DAMAGED),
        (50, HealthBand.DAMAGED),
        (49, HealthBand.WOUNDED),
        (25, HealthBand.WOUNDED),
        (24, HealthBand.CRITICAL),
        (1, HealthBand.CRITICAL),
        (0, HealthBand.DEAD),
    ])
    def test_thresholds(self, current, band):
        assert health_band(current, 100) == band

    @pytest.mark.parametrize("current,level", [(100, 0), (99, 1), (80, 1), (79, 2), (0, 5)])
    def test_wound_level_steps_of_twenty(self, current, level):
        assert wound_level(current, 100) == level


class TestHealthSystem:
    """Tests for HealthSystem damage and healing."""

    def test_damage(self, body):
        change = HealthSystem().take_damage(body, 30, "gunshot")

        assert (change.previous, change.current) == (100, 70)
        assert change.wound_level == 2
        assert change.band == HealthBand.DAMAGED
        assert body.health.injuries == ["gunshot"]
        assert body.status == AgentStatus.ACTIVE

    def test_damage_floors_at_zero_and_kills(self, body):
        change = HealthSystem().take_damage(body, 250)

        assert change.current == 0
        assert change.killed
        assert change.message == "Loose has been killed."
        assert body.status == AgentStatus.DECEASED

    def test_already_dead_not_killed_again(self, body):
        system = HealthSystem()
        system.take_damage(body, 100)
        assert not system.take_damage(body, 5).killed

    def test_heal_capped_at_maximum(self, body):
        system = HealthSystem()
        system.take_damage(body, 60)

        change = system.heal(body, 500)

        assert change.current == 100
        assert body.health.wound_level == 0
        assert change.band == HealthBand.HEALTHY

    def test_dead_cannot_heal(self, body):
        system = HealthSystem()
        system.take_damage(body, 100)
        with pytest.raises(ValueError):
            system.heal(body, 10)

    @pytest.mark.parametrize("method", ["take_damage", "heal"])
    def test_negative_amount_rejected(self, body, method):
        with pytest.raises(ValueError):
            getattr(HealthSystem(), method)(body, -1)
        assert body.health.current == 100


class TestManagerHealth:
    """Tests for health through CampaignManager."""

    def test_registration_health(self, manager):
        agent = manager.register_agent({"health": 150, "maxHealth": 80})
        assert (agent.health.current, agent.health.maximum) == (80, 80)

        hurt = manager.register_agent({"health": 30})
        assert hurt.health.wound_level == 4

    def test_zero_max_health_rejected(self, manager, store):
        with pytest.raises(ValueError):
            manager.register_agent({"maxHealth": 0})
        assert store.agents == {}

    def test_damage_published(self, manager, bus, agent):
        manager.take_damage(agent.id, 40)

        event = bus.get_history(EventType.HEALTH_CHANGED)[-1]
        assert event.data["current"] == 60
        assert event.data["wound_level"] == 2
        assert bus.get_history(EventType.AGENT_KILLED) == []

    def test_death_published(self, manager, bus, agent):
        manager.take_damage(agent.id, 100)

        assert bus.get_history(EventType.AGENT_KILLED)[-1].data["agent_id"] == agent.id
        assert manager.get_agent(agent.id).status == AgentStatus.DECEASED

    def test_sanity_break_keeps_dead_dead(self, manager, agent):
        manager.take_damage(agent.id, 100)
        manager.modify_sanity(agent.id, -100)
        manager.recover_from_breakdown(agent.id)

        assert manager.get_agent(agent.id).status == AgentStatus.DECEASED
