"""
Context snapshots for DAS.

A snapshot is everything a presentation layer needs at one moment:
agents, teams, the current mission, active threats, narrative state and
world state, plus the framing strings for the briefing. Snapshots are
frozen and hold deep copies, so mutating the campaign afterwards never
changes a snapshot that was already handed out.

The builder keeps recent snapshots in a bounded history.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..state.event_bus import EventType
from ..state.schema import Agent, Mission, Team, Threat
from ..systems.narrative import NarrativeState

if TYPE_CHECKING:
    from ..state.manager import CampaignManager

logger = logging.getLogger(__name__)


CONTEXT_VERSION = "1.0.0"
BUILDER_NAME = "DAS Context Builder"


class ContextSnapshot(BaseModel):
    """Immutable view of campaign state. Serializes with camelCase keys."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    agents: list[Agent] = Field(default_factory=list)
    teams: list[Team] = Field(default_factory=list)
    current_mission: Mission | None = None
    active_threats: list[Threat] = Field(default_factory=list)
    narrative: NarrativeState = Field(default_factory=NarrativeState)
    world_state: dict[str, Any] = Field(default_factory=dict)
    atmosphere: str = "tense"
    briefing_level: str = "classified"
    clearance: str = "DELTA GREEN"
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ContextBuilder:
    """
    Builds snapshots over a CampaignManager.

    ``history_limit`` bounds how many past snapshots are retained; the
    oldest is evicted first.
    """

    def __init__(self, manager: CampaignManager, history_limit: int = 50):
        self.manager = manager
        self.history: deque[ContextSnapshot] = deque(maxlen=history_limit)
        self._count = 0

    def build_context(
        self,
        atmosphere: str = "tense",
        briefing_level: str = "classified",
        clearance: str = "DELTA GREEN",
    ) -> ContextSnapshot:
        manager = self.manager
        self._count += 1
        current = manager.get_current_mission()

        snapshot = ContextSnapshot(
            id=f"CTX-{manager.campaign_id}-{self._count}",
            agents=[a.model_copy(deep=True) for a in manager.get_all_agents()],
            teams=[t.model_copy(deep=True) for t in manager.get_all_teams()],
            current_mission=current.model_copy(deep=True) if current else None,
            active_threats=[t.model_copy(deep=True) for t in manager.get_active_threats()],
            narrative=manager.get_narrative_state().model_copy(deep=True),
            # Shallow by contract: nested world-state values are shared
            world_state=dict(manager.world_state),
            atmosphere=atmosphere,
            briefing_level=briefing_level,
            clearance=clearance,
            metadata={
                "version": CONTEXT_VERSION,
                "systemTime": datetime.now().isoformat(),
                "contextBuilder": BUILDER_NAME,
            },
        )
        self.history.append(snapshot)

        logger.debug(f"Built context {snapshot.id}")
        manager.bus.emit(
            EventType.CONTEXT_BUILT,
            campaign_id=manager.campaign_id,
            context_id=snapshot.id,
        )
        return snapshot

    def latest(self) -> ContextSnapshot | None:
        return self.history[-1] if self.history else None
