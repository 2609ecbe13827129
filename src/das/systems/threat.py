"""
Threat escalation for DAS.

Two separate concerns live here:

1. The global alert level, a three-state machine driven by the dispatcher:
       NORMAL -> ELEVATED -> CRITICAL (absorbing under escalation)
   Entry points:
   - set_from_severity(): direct set from a containment severity
   - force_elevated():    keyword or ALERT driven, forces ELEVATED
   - escalate():          exactly one step up, idempotent at CRITICAL

2. Per-threat assessment levels, integers clamped to 1-10 on every write.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from ..state.schema import AlertLevel, Threat, ThreatStatus, clamp

logger = logging.getLogger(__name__)


THREAT_LEVEL_MIN = 1
THREAT_LEVEL_MAX = 10
DEFAULT_THREAT_LEVEL = 5

SEVERITY_LEVELS: dict[str, AlertLevel] = {
    "CRITICAL": AlertLevel.CRITICAL,
    "HIGH": AlertLevel.ELEVATED,
    "MEDIUM": AlertLevel.ELEVATED,
    "LOW": AlertLevel.NORMAL,
}

ESCALATION: dict[AlertLevel, AlertLevel] = {
    AlertLevel.NORMAL: AlertLevel.ELEVATED,
    AlertLevel.ELEVATED: AlertLevel.CRITICAL,
    AlertLevel.CRITICAL: AlertLevel.CRITICAL,
}

ANOMALY_KEYWORDS = ("ANOMALY", "ENTITY", "HOSTILE", "UNKNOWN")


def level_from_severity(severity: str | None) -> AlertLevel:
    """Map a severity word to an alert level. Unknown or missing -> NORMAL."""
    if not severity:
        return AlertLevel.NORMAL
    return SEVERITY_LEVELS.get(severity.upper(), AlertLevel.NORMAL)


def escalate(level: AlertLevel) -> AlertLevel:
    return ESCALATION[level]


def matches_anomaly(text: str) -> bool:
    """Case-insensitive substring match against the anomaly keywords."""
    upper = text.upper()
    return any(keyword in upper for keyword in ANOMALY_KEYWORDS)


def clamp_threat_level(value: int | None) -> int:
    if value is None:
        return DEFAULT_THREAT_LEVEL
    return clamp(value, THREAT_LEVEL_MIN, THREAT_LEVEL_MAX)


@dataclass
class AlertTransition:
    """One alert-level transition (possibly a no-op)."""
    previous: AlertLevel
    current: AlertLevel
    trigger: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def changed(self) -> bool:
        return self.previous != self.current

    def to_dict(self) -> dict:
        return {
            "previousLevel": self.previous.value,
            "newLevel": self.current.value,
            "trigger": self.trigger,
        }


class ThreatEscalation:
    """
    Global alert level state machine.

    By default a forced ELEVATED never lowers CRITICAL; set
    ``stands_down_critical`` to let keyword/ALERT triggers step CRITICAL
    back down to ELEVATED.
    """

    def __init__(
        self,
        level: AlertLevel = AlertLevel.NORMAL,
        stands_down_critical: bool = False,
        history_limit: int = 100,
    ):
        self._level = level
        self.stands_down_critical = stands_down_critical
        self.history: deque[AlertTransition] = deque(maxlen=history_limit)

    @property
    def level(self) -> AlertLevel:
        return self._level

    def _move(self, new_level: AlertLevel, trigger: str) -> AlertTransition:
        transition = AlertTransition(previous=self._level, current=new_level, trigger=trigger)
        self._level = new_level
        self.history.append(transition)
        if transition.changed:
            logger.info(
                f"Alert level {transition.previous.value} -> {transition.current.value} ({trigger})"
            )
        return transition

    def set_from_severity(self, severity: str | None) -> AlertTransition:
        """Direct set from severity; this can lower the level."""
        return self._move(level_from_severity(severity), f"severity:{severity or 'unspecified'}")

    def force_elevated(self, trigger: str) -> AlertTransition:
        """Force ELEVATED (keyword or ALERT)."""
        if self._level == AlertLevel.CRITICAL and not self.stands_down_critical:
            return self._move(AlertLevel.CRITICAL, trigger)
        return self._move(AlertLevel.ELEVATED, trigger)

    def check_keywords(self, text: str) -> AlertTransition | None:
        """Force ELEVATED when text mentions an anomaly keyword."""
        if not matches_anomaly(text):
            return None
        return self.force_elevated(f"keyword:{text}")

    def escalate(self, reason: str = "Unspecified") -> AlertTransition:
        """Step exactly one level up."""
        return self._move(escalate(self._level), f"escalate:{reason}")


# -----------------------------------------------------------------------------
# Threat assessments
# -----------------------------------------------------------------------------

def active_threats(threats: list[Threat], min_threat_level: int | None = None) -> list[Threat]:
    """Active threats, highest threat level first."""
    result = [
        t for t in threats
        if t.status == ThreatStatus.ACTIVE
        and (min_threat_level is None or t.threat_level >= min_threat_level)
    ]
    # sorted() is stable, so equal levels keep assessment order
    return sorted(result, key=lambda t: t.threat_level, reverse=True)


def mean_threat_level(threats: list[Threat]) -> int:
    """Rounded mean level of the active threats, 0 when there are none."""
    active = active_threats(threats)
    if not active:
        return 0
    return round(sum(t.threat_level for t in active) / len(active))
