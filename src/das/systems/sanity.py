"""
Sanity system for DAS.

Degradation, breakpoints, loss pools and recovery. Every change goes
through one clamped transition that appends to the tracker's history,
records breakpoints and mirrors the value onto the agent.

Thresholds:
- current == 0              -> complete_break, agent incapacitated
- current < 25% of maximum  -> critical (no status change)

Breakpoints accumulate: every dip below a threshold adds an entry.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from ..state.schema import (
    Agent,
    AgentStatus,
    Breakpoint,
    BreakpointType,
    LossKind,
    SanityBand,
    SanityEntry,
    SanityTracker,
    clamp,
)
from ..tools.dice import roll_d10


CRITICAL_RATIO = 0.25

# Absolute-value bands (inclusive lower bounds, checked top-down)
SANITY_BANDS: list[tuple[SanityBand, int]] = [
    (SanityBand.STABLE, 70),
    (SanityBand.STRESSED, 40),
    (SanityBand.UNSTABLE, 10),
    (SanityBand.CRITICAL, 0),
]

RECOVERY_RECOMMENDATIONS: dict[SanityBand, str] = {
    SanityBand.STABLE: "Agent is stable. Standard maintenance protocols sufficient.",
    SanityBand.STRESSED: "Agent needs downtime. Recommend 1-2 weeks rest and counseling.",
    SanityBand.UNSTABLE: "Agent requires immediate intervention. Psychiatric evaluation recommended.",
    SanityBand.CRITICAL: "Agent must be removed from duty. Intensive therapy required.",
}


def sanity_band(value: int) -> SanityBand:
    """Narrative band for an absolute sanity value."""
    for band, floor in SANITY_BANDS:
        if value >= floor:
            return band
    return SanityBand.CRITICAL


def recovery_recommendation(value: int) -> str:
    return RECOVERY_RECOMMENDATIONS[sanity_band(value)]


@dataclass
class SanityChange:
    """Outcome of a single sanity transition."""
    agent_id: str
    previous: int
    current: int
    entry: SanityEntry
    tracker: SanityTracker
    breakpoint: Breakpoint | None = None
    incapacitated: bool = False

    @property
    def applied_delta(self) -> int:
        """What actually changed after clamping."""
        return self.current - self.previous

    @property
    def band(self) -> SanityBand:
        return sanity_band(self.current)

    def to_dict(self) -> dict:
        return {
            "agentId": self.agent_id,
            "previous": self.previous,
            "current": self.current,
            "maximum": self.tracker.maximum,
            "band": self.band.value,
            "breakpoint": self.breakpoint.type.value if self.breakpoint else None,
            "incapacitated": self.incapacitated,
        }


class SanitySystem:
    """
    Applies sanity transitions to an agent and its tracker.

    Stateless apart from the RNG used to roll breakdown duration.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def _transition(
        self,
        agent: Agent,
        tracker: SanityTracker,
        delta: int,
        reason: str = "",
    ) -> SanityChange:
        previous = tracker.current
        tracker.current = clamp(previous + delta, 0, tracker.maximum)

        # History is appended for every call, including zero deltas
        entry = SanityEntry(
            delta=delta,
            previous=previous,
            current=tracker.current,
            reason=reason,
        )
        tracker.history.append(entry)

        breakpoint = None
        incapacitated = False
        if tracker.current == 0:
            duration = roll_d10(self._rng)
            breakpoint = Breakpoint(
                type=BreakpointType.COMPLETE_BREAK,
                sanity=0,
                duration_hours=duration,
            )
            tracker.in_breakdown = True
            tracker.breakdown_hours = duration
            if agent.status != AgentStatus.DECEASED:
                agent.status = AgentStatus.INCAPACITATED
            incapacitated = True
        elif tracker.current < tracker.maximum * CRITICAL_RATIO:
            breakpoint = Breakpoint(type=BreakpointType.CRITICAL, sanity=tracker.current)

        if breakpoint is not None:
            tracker.breakpoints.append(breakpoint)

        agent.sanity = tracker.current
        return SanityChange(
            agent_id=agent.id,
            previous=previous,
            current=tracker.current,
            entry=entry,
            tracker=tracker,
            breakpoint=breakpoint,
            incapacitated=incapacitated,
        )

    def modify(
        self,
        agent: Agent,
        tracker: SanityTracker,
        delta: int,
        reason: str = "",
    ) -> SanityChange:
        """
        Apply a raw sanity delta.

        Whatever is actually lost counts toward the temporary loss pool,
        so it can later be recovered.
        """
        change = self._transition(agent, tracker, delta, reason)
        if change.applied_delta < 0:
            tracker.temporary_loss += -change.applied_delta
        return change

    def take_damage(
        self,
        agent: Agent,
        tracker: SanityTracker,
        amount: int,
        kind: LossKind = LossKind.TEMPORARY,
        reason: str = "",
    ) -> SanityChange:
        """Lose sanity into the temporary or permanent pool."""
        if amount < 0:
            raise ValueError("Sanity damage must be non-negative")
        change = self._transition(agent, tracker, -amount, reason)
        lost = -change.applied_delta
        if kind == LossKind.PERMANENT:
            tracker.permanent_loss += lost
        else:
            tracker.temporary_loss += lost
        return change

    def recover(
        self,
        agent: Agent,
        tracker: SanityTracker,
        amount: int,
        reason: str = "recovery",
    ) -> SanityChange:
        """
        Restore sanity from the temporary loss pool only.

        Never exceeds maximum and never touches permanent losses.
        """
        if amount < 0:
            raise ValueError("Recovery amount must be non-negative")
        recoverable = min(amount, tracker.temporary_loss)
        change = self._transition(agent, tracker, recoverable, reason)
        tracker.temporary_loss -= max(0, change.applied_delta)
        return change

    def recover_from_breakdown(self, agent: Agent, tracker: SanityTracker) -> SanityChange:
        """End a breakdown: agent back on duty with at least 1 sanity."""
        tracker.in_breakdown = False
        tracker.breakdown_hours = 0
        if agent.status != AgentStatus.DECEASED:
            agent.status = AgentStatus.ACTIVE
        floor = min(1, tracker.maximum)
        return self._transition(
            agent, tracker, max(0, floor - tracker.current), "breakdown recovery",
        )
