"""
Campaign event bus.

The manager, dispatcher and context builder publish here whenever
campaign state moves; the REPL and the headless runner listen. Delivery
is synchronous and in subscription order.

    bus = EventBus()
    bus.on(EventType.SANITY_BREAKPOINT, lambda e: print(e.data["agent_id"]))
    bus.emit(EventType.SANITY_BREAKPOINT, agent_id="AGENT-1", type="critical")

Every CampaignManager builds its own bus.
"""


import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Campaign events that can be published."""

    # Agent events
    AGENT_REGISTERED = "agent.registered"
    AGENT_UPDATED = "agent.updated"
    AGENT_INCAPACITATED = "agent.incapacitated"

    # Sanity events
    SANITY_CHANGED = "sanity.changed"
    SANITY_BREAKPOINT = "sanity.breakpoint"

    # Health events
    HEALTH_CHANGED = "health.changed"
    AGENT_KILLED = "agent.killed"

    # Team events
    TEAM_CREATED = "team.created"
    TEAM_DYNAMICS = "team.dynamics"
    TEAM_STATUS_CHANGED = "team.status_changed"
    TEAM_UPDATED = "team.updated"

    # Mission and threat events
    MISSION_BRIEFED = "mission.briefed"
    MISSION_STATUS = "mission.status"
    THREAT_ASSESSED = "threat.assessed"
    THREAT_UPDATED = "threat.updated"
    ALERT_LEVEL_CHANGED = "alert.level_changed"

    # Narrative and context events
    NARRATIVE_INJECTED = "narrative.injected"
    NARRATIVE_DELIVERED = "narrative.delivered"
    CONTEXT_BUILT = "context.built"

    # Dispatch
    COMMAND_DISPATCHED = "command.dispatched"


@dataclass
class GameEvent:
    """One published event. ``data`` holds the emitter's keyword payload."""
    type: EventType
    data: dict = field(default_factory=dict)
    campaign_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe with a bounded event history.

    A listener that raises is logged and skipped; the emitter and the
    remaining listeners carry on.
    """

    def __init__(self, history_limit: int = 100):
        self._subscribers: defaultdict[EventType, list[EventHandler]] = defaultdict(list)
        self._recent: deque[GameEvent] = deque(maxlen=history_limit)

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        handlers = self._subscribers[event_type]
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: EventType, campaign_id: str = "", **data) -> GameEvent:
        """Record the event, then call each subscriber. Returns the event."""
        event = GameEvent(type=event_type, data=data, campaign_id=campaign_id)
        self._recent.append(event)

        for handler in list(self._subscribers.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Listener for {event_type.value} failed")
        return event

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """Recent events, oldest first, optionally of one type."""
        return [e for e in self._recent if event_type is None or e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._subscribers.get(event_type, []))
