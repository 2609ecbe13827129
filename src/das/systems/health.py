"""
Physical health for DAS agents.

Damage and healing clamp health to [0, maximum]. The wound level counts
missing health in steps of 20, rounded up, and is recomputed on every
change. Bands after a change:

- 0           -> dead, agent marked deceased
- below 25    -> critical
- below 50    -> wounded
- below max   -> damaged
- at max      -> healthy
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..state.schema import Agent, AgentStatus, HealthBand, clamp


WOUND_STEP = 20
CRITICAL_BELOW = 25
WOUNDED_BELOW = 50


def wound_level(current: int, maximum: int) -> int:
    return math.ceil((maximum - current) / WOUND_STEP)


def health_band(current: int, maximum: int) -> HealthBand:
    if current <= 0:
        return HealthBand.DEAD
    if current < CRITICAL_BELOW:
        return HealthBand.CRITICAL
    if current < WOUNDED_BELOW:
        return HealthBand.WOUNDED
    if current < maximum:
        return HealthBand.DAMAGED
    return HealthBand.HEALTHY


@dataclass
class HealthChange:
    agent_id: str
    name: str
    previous: int
    current: int
    maximum: int
    wound_level: int

    @property
    def band(self) -> HealthBand:
        return health_band(self.current, self.maximum)

    @property
    def killed(self) -> bool:
        return self.previous > 0 and self.current == 0

    @property
    def message(self) -> str:
        if self.band == HealthBand.DEAD:
            return f"{self.name} has been killed."
        if self.band == HealthBand.CRITICAL:
            return f"{self.name} is critically wounded."
        if self.band == HealthBand.WOUNDED:
            return f"{self.name} is wounded."
        return f"{self.name} is at {self.current}/{self.maximum} health."

    def to_dict(self) -> dict:
        return {
            "agentId": self.agent_id,
            "previous": self.previous,
            "current": self.current,
            "maximum": self.maximum,
            "woundLevel": self.wound_level,
            "band": self.band.value,
            "message": self.message,
        }


class HealthSystem:
    """Applies damage and healing to an agent's health."""

    def _apply(self, agent: Agent, new_current: int) -> HealthChange:
        health = agent.health
        previous = health.current
        health.current = clamp(new_current, 0, health.maximum)
        health.wound_level = wound_level(health.current, health.maximum)
        return HealthChange(
            agent_id=agent.id,
            name=agent.name,
            previous=previous,
            current=health.current,
            maximum=health.maximum,
            wound_level=health.wound_level,
        )

    def take_damage(self, agent: Agent, amount: int, injury: str = "") -> HealthChange:
        """Subtract damage. Reaching zero marks the agent deceased."""
        if amount < 0:
            raise ValueError("Damage cannot be negative; use heal()")

        change = self._apply(agent, agent.health.current - amount)
        if injury:
            agent.health.injuries.append(injury)
        if change.current == 0:
            agent.status = AgentStatus.DECEASED
        return change

    def heal(self, agent: Agent, amount: int) -> HealthChange:
        """Restore health up to maximum. The dead stay dead."""
        if amount < 0:
            raise ValueError("Healing cannot be negative; use take_damage()")
        if agent.status == AgentStatus.DECEASED:
            raise ValueError(f"Agent {agent.id} is deceased")
        return self._apply(agent, agent.health.current + amount)
