"""
Tests for the sanity state machine: clamping, breakpoints, loss pools
and recovery.
"""

import pytest

from das.state.event_bus import EventType
from das.state.schema import AgentStatus, BreakpointType, LossKind, SanityBand
from das.systems.sanity import SanitySystem, recovery_recommendation, sanity_band


# -----------------------------------------------------------------------------
# Transition Tests
# -----------------------------------------------------------------------------

class TestSanityTransitions:
    """Tests for SanitySystem.modify."""

    @pytest.mark.parametrize("start", [0, 1, 14, 30, 60])
    @pytest.mark.parametrize("delta", [-100, -61, -15, -1, 0, 1, 15, 100])
    def test_current_stays_in_range(self, rng, loose_agent, start, delta):
        """Any delta from any start lands within [0, max]."""
        agent, tracker = loose_agent
        tracker.current = agent.sanity = start

        change = SanitySystem(rng).modify(agent, tracker, delta)

        assert 0 <= change.current <= tracker.maximum
        assert agent.sanity == tracker.current == change.current

    def test_zero_delta_still_recorded(self, rng, loose_agent):
        """History grows even when nothing changes."""
        agent, tracker = loose_agent
        SanitySystem(rng).modify(agent, tracker, 0, "quiet night")

        assert len(tracker.history) == 1
        entry = tracker.history[0]
        assert (entry.delta, entry.previous, entry.current) == (0, 60, 60)
        assert entry.reason == "quiet night"

    def test_history_records_requested_delta(self, rng, loose_agent):
        """The entry keeps the raw delta while current is clamped."""
        agent, tracker = loose_agent
        SanitySystem(rng).modify(agent, tracker, -500)

        entry = tracker.history[-1]
        assert entry.delta == -500
        assert entry.current == 0

    def test_critical_breakpoint_below_quarter(self, rng, loose_agent):
        """Dropping under 25% of max adds a critical breakpoint, no status change."""
        agent, tracker = loose_agent
        change = SanitySystem(rng).modify(agent, tracker, -46)  # 14 < 15

        assert change.breakpoint is not None
        assert change.breakpoint.type == BreakpointType.CRITICAL
        assert agent.status == AgentStatus.ACTIVE
        assert not change.incapacitated

    def test_exactly_quarter_is_not_critical(self, rng, loose_agent):
        """15 of 60 is not below the threshold."""
        agent, tracker = loose_agent
        change = SanitySystem(rng).modify(agent, tracker, -45)

        assert change.breakpoint is None
        assert tracker.breakpoints == []

    def test_critical_breakpoints_accumulate(self, rng, loose_agent):
        """Each transition that lands below the threshold adds another entry."""
        agent, tracker = loose_agent
        system = SanitySystem(rng)
        system.modify(agent, tracker, -50)
        system.modify(agent, tracker, 2)
        system.modify(agent, tracker, -1)

        assert [b.type for b in tracker.breakpoints] == [BreakpointType.CRITICAL] * 3

    def test_zero_is_complete_break(self, rng, loose_agent):
        """Hitting zero records one complete break and incapacitates."""
        agent, tracker = loose_agent
        change = SanitySystem(rng).modify(agent, tracker, -60)

        assert change.incapacitated
        assert agent.status == AgentStatus.INCAPACITATED
        assert [b.type for b in tracker.breakpoints] == [BreakpointType.COMPLETE_BREAK]
        assert tracker.in_breakdown

    def test_breakdown_duration_is_d10(self, rng, loose_agent):
        """Breakdown length is rolled on a d10."""
        agent, tracker = loose_agent
        change = SanitySystem(rng).modify(agent, tracker, -60)

        assert 1 <= change.breakpoint.duration_hours <= 10
        assert tracker.breakdown_hours == change.breakpoint.duration_hours

    def test_losses_fill_temporary_pool(self, rng, loose_agent):
        """Only the amount actually lost counts toward the pool."""
        agent, tracker = loose_agent
        SanitySystem(rng).modify(agent, tracker, -80)

        assert tracker.temporary_loss == 60


# -----------------------------------------------------------------------------
# Loss Pool and Recovery Tests
# -----------------------------------------------------------------------------

class TestSanityRecovery:
    """Tests for damage kinds and recovery."""

    def test_recovery_limited_to_temporary_pool(self, rng, loose_agent):
        """Recovering more than was temporarily lost restores only the pool."""
        agent, tracker = loose_agent
        system = SanitySystem(rng)
        system.take_damage(agent, tracker, 10, LossKind.TEMPORARY)

        change = system.recover(agent, tracker, 25)

        assert change.current == 60
        assert tracker.temporary_loss == 0

    def test_permanent_loss_not_recoverable(self, rng, loose_agent):
        """Permanent losses stay lost."""
        agent, tracker = loose_agent
        system = SanitySystem(rng)
        system.take_damage(agent, tracker, 10, LossKind.PERMANENT)

        change = system.recover(agent, tracker, 10)

        assert change.current == 50
        assert tracker.permanent_loss == 10
        assert len(tracker.history) == 2

    def test_recovery_never_exceeds_max(self, rng, loose_agent):
        """A pool larger than the headroom stops at max."""
        agent, tracker = loose_agent
        tracker.temporary_loss = 40

        change = SanitySystem(rng).recover(agent, tracker, 40)

        assert change.current == 60
        assert tracker.temporary_loss == 40

    def test_negative_damage_rejected(self, rng, loose_agent):
        agent, tracker = loose_agent
        with pytest.raises(ValueError):
            SanitySystem(rng).take_damage(agent, tracker, -5)

    def test_recover_from_breakdown(self, rng, loose_agent):
        """Breakdown recovery puts the agent back on duty with at least 1."""
        agent, tracker = loose_agent
        system = SanitySystem(rng)
        system.modify(agent, tracker, -60)

        change = system.recover_from_breakdown(agent, tracker)

        assert agent.status == AgentStatus.ACTIVE
        assert not tracker.in_breakdown
        assert change.current == 1
        assert tracker.history[-1].reason == "breakdown recovery"


# -----------------------------------------------------------------------------
# Band Tests
# -----------------------------------------------------------------------------

class TestSanityBands:
    """Tests for narrative bands."""

    @pytest.mark.parametrize("value,band", [
        (100, SanityBand.STABLE),
        (70, SanityBand.STABLE),
        (69, SanityBand.STRESSED),
        (40, SanityBand.STRESSED),
        (39, SanityBand.UNSTABLE),
        (10, SanityBand.UNSTABLE),
        (9, SanityBand.CRITICAL),
        (0, SanityBand.CRITICAL),
    ])
    def test_band_boundaries(self, value, band):
        assert sanity_band(value) == band

    def test_recommendation_per_band(self):
        """Critical agents are pulled from duty."""
        assert "removed from duty" in recovery_recommendation(5)
        assert "Standard maintenance" in recovery_recommendation(90)


# -----------------------------------------------------------------------------
# Manager Integration
# -----------------------------------------------------------------------------

class TestManagerSanity:
    """Tests for sanity through the CampaignManager."""

    def test_registered_agent_breaks_at_zero(self, manager):
        """70/70 agent hit for 75 ends at 0, incapacitated, one break recorded."""
        agent = manager.register_agent({"name": "Casey", "sanity": 70, "maxSanity": 70})

        change = manager.modify_sanity(agent.id, -75, "saw the thing")

        tracker = manager.get_sanity_tracker(agent.id)
        assert change.current == 0
        assert manager.get_agent(agent.id).status == AgentStatus.INCAPACITATED
        assert [b.type for b in tracker.breakpoints] == [BreakpointType.COMPLETE_BREAK]

    def test_break_emits_events(self, manager, bus, agent):
        """Breakpoints and incapacitation are published."""
        manager.modify_sanity(agent.id, -60)

        assert len(bus.get_history(EventType.SANITY_BREAKPOINT)) == 1
        assert len(bus.get_history(EventType.AGENT_INCAPACITATED)) == 1
        assert bus.get_history(EventType.SANITY_CHANGED)[-1].data["current"] == 0

    def test_sanity_status_report(self, manager, agent):
        manager.take_sanity_damage(agent.id, 25, "permanent")

        report = manager.sanity_status(agent.id)

        assert report["current"] == 35
        assert report["band"] == "unstable"
        assert report["permanentLoss"] == 25
