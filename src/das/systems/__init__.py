"""
Threshold state machines for DAS.

Each system consumes current state plus an event and produces the new
state plus derived status. The CampaignManager owns persistence-free
bookkeeping (events, logging) around them.
"""

from .sanity import SanitySystem, SanityChange, sanity_band, recovery_recommendation
from .threat import (
    ThreatEscalation,
    AlertTransition,
    level_from_severity,
    escalate,
    matches_anomaly,
    clamp_threat_level,
    active_threats,
    mean_threat_level,
)
from .team import TeamDynamics, DynamicsResult, casualty_penalty
from .cover import CoverStressReport, CoverValidation, cover_stress, validate_cover
from .health import HealthSystem, HealthChange, health_band, wound_level
from .resources import RESOURCE_CEILINGS, redistribution_advice, utilization
from .narrative import NarrativeQueue, NarrativeState

__all__ = [
    # Sanity
    "SanitySystem",
    "SanityChange",
    "sanity_band",
    "recovery_recommendation",
    # Threat
    "ThreatEscalation",
    "AlertTransition",
    "level_from_severity",
    "escalate",
    "matches_anomaly",
    "clamp_threat_level",
    "active_threats",
    "mean_threat_level",
    # Team
    "TeamDynamics",
    "DynamicsResult",
    "casualty_penalty",
    # Cover
    "CoverStressReport",
    "CoverValidation",
    "cover_stress",
    "validate_cover",
    # Health
    "HealthSystem",
    "HealthChange",
    "health_band",
    "wound_level",
    # Resources
    "RESOURCE_CEILINGS",
    "redistribution_advice",
    "utilization",
    # Narrative
    "NarrativeQueue",
    "NarrativeState",
]
