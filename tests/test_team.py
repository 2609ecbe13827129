"""
Tests for team dynamics: clamping, casualties and the morale penalty.
"""

import pytest
from pydantic import ValidationError

from das.state.event_bus import EventType
from das.state.schema import Team, TeamStatus
from das.state.schemas.updates import TeamDynamicsUpdate
from das.systems.team import TeamDynamics, casualty_penalty


@pytest.fixture
def team():
    return Team(id="TEAM-1", name="Night Owls")


class TestCasualtyPenalty:
    """Tests for the penalty formula."""

    @pytest.mark.parametrize("count,penalty", [
        (0, 0), (1, 5), (2, 10), (5, 25), (6, 30), (20, 30),
    ])
    def test_penalty_formula(self, count, penalty):
        assert casualty_penalty(count) == penalty


class TestTeamDynamics:
    """Tests for TeamDynamics.apply."""

    def test_two_single_casualties(self, team):
        """The second call pays min(30, 2*5) on the cumulative count."""
        dynamics = TeamDynamics()

        first = dynamics.apply(team, TeamDynamicsUpdate(casualty=1))
        second = dynamics.apply(team, TeamDynamicsUpdate(casualty=1))

        assert first.penalty == 5
        assert first.morale == 70
        assert second.penalty == 10
        assert second.morale == 60
        assert team.casualty_count == 2

    def test_penalty_rederived_on_every_call(self, team):
        """A call with no new casualties still pays the standing penalty."""
        dynamics = TeamDynamics()
        dynamics.apply(team, TeamDynamicsUpdate(casualty=2))  # 75 - 10

        result = dynamics.apply(team, TeamDynamicsUpdate())

        assert result.penalty == 10
        assert team.morale == 55

    def test_penalty_after_explicit_morale(self, team):
        """Explicit morale is set first, then the penalty comes off."""
        team.casualty_count = 2
        result = TeamDynamics().apply(team, TeamDynamicsUpdate(morale=90))
        assert result.morale == 80

    def test_no_casualties_no_penalty(self, team):
        result = TeamDynamics().apply(team, TeamDynamicsUpdate(morale=40))
        assert result.penalty == 0
        assert team.morale == 40

    @pytest.mark.parametrize("morale,cohesion", [(150, -5), (-20, 300)])
    def test_values_clamped(self, team, morale, cohesion):
        TeamDynamics().apply(team, TeamDynamicsUpdate(morale=morale, cohesion=cohesion))
        assert 0 <= team.morale <= 100
        assert 0 <= team.cohesion <= 100

    def test_penalty_never_below_zero(self, team):
        team.morale = 5
        TeamDynamics().apply(team, TeamDynamicsUpdate(casualty=10))
        assert team.morale == 0

    def test_tactics_updated(self, team):
        TeamDynamics().apply(team, TeamDynamicsUpdate(tactics="stealth"))
        assert team.tactics == "stealth"

    def test_negative_casualty_rejected(self):
        """Casualties are never refunded."""
        with pytest.raises(ValidationError):
            TeamDynamicsUpdate(casualty=-1)

    def test_status_threshold(self, team):
        """Operational strictly above 50."""
        team.morale = 51
        assert team.status == TeamStatus.OPERATIONAL
        team.morale = 50
        assert team.status == TeamStatus.COMPROMISED

    def test_status_change_reported(self, team):
        result = TeamDynamics().apply(team, TeamDynamicsUpdate(morale=30))
        assert result.status_changed
        assert result.previous_status == TeamStatus.OPERATIONAL


class TestManagerTeams:
    """Tests for team operations through the manager."""

    def test_create_team_drops_unknown_members(self, manager, agent):
        team = manager.create_team("Night Owls", ["A1", "GHOST"])

        assert team.id == "TEAM-1"
        assert team.member_ids == ["A1"]
        assert (team.morale, team.cohesion, team.tactics) == (75, 80, "adaptive")

    def test_create_team_clamps(self, manager):
        team = manager.create_team("Hotshots", morale=500, cohesion=-1)
        assert (team.morale, team.cohesion) == (100, 0)

    def test_dynamics_from_mapping(self, manager):
        team = manager.create_team("Night Owls")
        result = manager.manage_team_dynamics(team.id, {"casualty": 1, "cohesion": 60})

        assert result.morale == 70
        assert team.cohesion == 60

    def test_status_flip_published(self, manager, bus):
        team = manager.create_team("Night Owls")
        manager.manage_team_dynamics(team.id, {"morale": 20})

        events = bus.get_history(EventType.TEAM_STATUS_CHANGED)
        assert len(events) == 1
        assert events[0].data["status"] == "compromised"

    def test_team_bond_requires_members(self, manager, agent):
        manager.register_agent({"id": "A2", "name": "Jones"})
        team = manager.create_team("Pair", ["A1", "A2"])

        bond = manager.record_team_bond(team.id, "A1", "A2", "partnership", strength=12)

        assert bond.strength == 10
        with pytest.raises(ValueError):
            manager.record_team_bond(team.id, "A1", "A9", "rivalry")

    def test_status_report(self, manager, agent):
        manager.register_agent({"id": "A2", "name": "Jones", "sanity": 40})
        team = manager.create_team("Pair", ["A1", "A2"])

        report = manager.team_status_report(team.id)

        assert report["memberCount"] == 2
        assert report["averageSanity"] == 50
        assert report["status"] == "operational"
        assert report["averageHealth"] == 100

    def test_status_report_health_and_breakdown(self, manager, agent):
        manager.register_agent({"id": "A2", "name": "Jones", "health": 40})
        manager.modify_sanity("A2", -100)
        team = manager.create_team("Pair", ["A1", "A2"])

        report = manager.team_status_report(team.id)

        assert report["averageHealth"] == 70
        members = {m["id"]: m for m in report["memberStatus"]}
        assert members["A2"]["health"] == 40
        assert members["A2"]["inBreakdown"] is True
        assert members["A1"]["inBreakdown"] is False


class TestTeamResources:
    """Tests for roster changes and pooled team assets."""

    def test_remove_member(self, manager, bus, agent):
        team = manager.create_team("Solo", ["A1"])

        assert manager.remove_member(team.id, "A1")
        assert team.member_ids == []
        assert not manager.remove_member(team.id, "A1")
        assert bus.get_history(EventType.TEAM_UPDATED)[-1].data["removed"] == "A1"

    def test_allocate_counters(self, manager):
        team = manager.create_team("Owls")

        assert manager.allocate_team_resource(team.id, "budget", 5000) == 5000
        assert manager.allocate_team_resource(team.id, "budget", 2500) == 7500
        with pytest.raises(ValueError):
            manager.allocate_team_resource(team.id, "vehicles", 1)

    def test_motor_pool_and_arsenal(self, manager):
        team = manager.create_team("Owls")

        manager.add_vehicle(team.id, "Van", capacity=8)
        manager.add_weapon(team.id, "Shotgun", 2)
        stock = manager.add_weapon(team.id, "Shotgun")

        assert stock.quantity == 3
        assert team.resources.vehicles[0].capacity == 8
        available = manager.team_status_report(team.id)["resourcesAvailable"]
        assert (available["vehicles"], available["weapons"]) == (1, 3)
