"""
State management for DAS campaigns.

The CampaignManager lives in ``das.state.manager``; it depends on
``das.systems``, which in turn builds on the models exported here.
"""

from .schema import (
    Agent,
    AgentRegistration,
    AgentStatus,
    AlertLevel,
    Bond,
    CoverIdentity,
    Mission,
    MissionStatus,
    NarrativeElement,
    NarrativeType,
    SanityTracker,
    Team,
    TeamStatus,
    Threat,
    ThreatStatus,
)
from .store import EntityStore, NotFoundError
from .event_bus import EventBus, EventType, GameEvent

__all__ = [
    # Schema
    "Agent",
    "AgentRegistration",
    "AgentStatus",
    "AlertLevel",
    "Bond",
    "CoverIdentity",
    "Mission",
    "MissionStatus",
    "NarrativeElement",
    "NarrativeType",
    "SanityTracker",
    "Team",
    "TeamStatus",
    "Threat",
    "ThreatStatus",
    # Store
    "EntityStore",
    "NotFoundError",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
]
