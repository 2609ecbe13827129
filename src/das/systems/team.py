"""
Team dynamics for DAS.

Morale and cohesion live on 0-100. Casualties only accumulate. Whenever a
team has casualties, every dynamics application re-derives a morale
penalty from the cumulative count and subtracts it after any explicit
morale update:

    penalty = min(30, casualty_count * 5)

so a team that takes its second casualty loses 10 on that call, and keeps
paying on later calls for as long as the count stands.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..state.schema import Team, TeamStatus, clamp
from ..state.schemas.updates import TeamDynamicsUpdate


CASUALTY_PENALTY_PER = 5
CASUALTY_PENALTY_CAP = 30


def casualty_penalty(casualty_count: int) -> int:
    if casualty_count <= 0:
        return 0
    return min(CASUALTY_PENALTY_CAP, casualty_count * CASUALTY_PENALTY_PER)


@dataclass
class DynamicsResult:
    team_id: str
    morale: int
    cohesion: int
    casualties: int
    penalty: int
    status: TeamStatus
    previous_status: TeamStatus

    @property
    def status_changed(self) -> bool:
        return self.status != self.previous_status

    def to_dict(self) -> dict:
        return {
            "teamId": self.team_id,
            "morale": self.morale,
            "cohesion": self.cohesion,
            "casualties": self.casualties,
            "moralePenalty": self.penalty,
            "status": self.status.value,
        }


class TeamDynamics:
    """Applies TeamDynamicsUpdate values to a team."""

    def apply(self, team: Team, update: TeamDynamicsUpdate) -> DynamicsResult:
        previous_status = team.status

        if update.morale is not None:
            team.morale = clamp(update.morale, 0, 100)
        if update.cohesion is not None:
            team.cohesion = clamp(update.cohesion, 0, 100)
        if update.casualty:
            team.casualty_count += update.casualty
        if update.tactics:
            team.tactics = update.tactics

        penalty = casualty_penalty(team.casualty_count)
        if penalty:
            team.morale = clamp(team.morale - penalty, 0, 100)

        return DynamicsResult(
            team_id=team.id,
            morale=team.morale,
            cohesion=team.cohesion,
            casualties=team.casualty_count,
            penalty=penalty,
            status=team.status,
            previous_status=previous_status,
        )
