"""
Pydantic models for DAS campaign state.

Agents, sanity trackers, teams, missions, threats and narrative elements.
Designed to serialize to JSON but structured like database tables.

Models hold data and small self-contained helpers only. Threshold logic
(sanity breakpoints, morale penalties, threat clamping) lives in
``das.systems`` so every write goes through one clamped path.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class AgentStatus(str, Enum):
    ACTIVE = "active"
    INCAPACITATED = "incapacitated"
    INJURED = "injured"
    MISSING = "missing"
    INACTIVE = "inactive"          # Retired from the roster; agents are never deleted
    DECEASED = "deceased"          # Health reached zero


class TrustLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class BreakpointType(str, Enum):
    CRITICAL = "critical"              # Dropped below a quarter of max sanity
    COMPLETE_BREAK = "complete_break"  # Hit zero


class SanityBand(str, Enum):
    """Narrative band for an absolute sanity value."""
    STABLE = "stable"          # 70-100
    STRESSED = "stressed"      # 40-69
    UNSTABLE = "unstable"      # 10-39
    CRITICAL = "critical"      # 0-9


class HealthBand(str, Enum):
    """Physical condition after a health change."""
    HEALTHY = "healthy"        # At maximum
    DAMAGED = "damaged"        # 50 and up
    WOUNDED = "wounded"        # Below 50
    CRITICAL = "critical"      # Below 25
    DEAD = "dead"              # Zero


class LossKind(str, Enum):
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class TeamStatus(str, Enum):
    OPERATIONAL = "operational"
    COMPROMISED = "compromised"


class MissionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"
    FAILED = "failed"
    ABORTED = "aborted"


class ThreatStatus(str, Enum):
    ACTIVE = "active"
    NEUTRALIZED = "neutralized"
    CONTAINED = "contained"


class AlertLevel(str, Enum):
    """Global threat posture driven by the command dispatcher."""
    NORMAL = "NORMAL"
    ELEVATED = "ELEVATED"
    CRITICAL = "CRITICAL"


class NarrativeType(str, Enum):
    SCENE = "scene"
    ATMOSPHERE = "atmosphere"
    CLUE = "clue"
    REVELATION = "revelation"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def generate_id() -> str:
    return str(uuid4())[:8]


def clamp(value: int, low: int, high: int) -> int:
    """Constrain value to the closed interval [low, high]."""
    return max(low, min(high, value))


# -----------------------------------------------------------------------------
# Agent Models
# -----------------------------------------------------------------------------

class Bond(BaseModel):
    """A relationship between an agent and a peer."""
    peer: str
    relationship: str
    strength: int = 5  # 0-10
    trust_level: TrustLevel = TrustLevel.MODERATE
    secrets: list[str] = Field(default_factory=list)
    formed_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Legend(BaseModel):
    """Supporting narrative artifact for a cover identity."""
    details: str
    created_at: datetime = Field(default_factory=datetime.now)
    tested: bool = False
    test_count: int = 0


class FieldExpertise(BaseModel):
    skill: str
    level: str = "basic"  # basic, intermediate, advanced, expert
    cover_story: str = ""


class SafeHouse(BaseModel):
    location: str
    security: int = 3  # 1-10
    status: str = "secure"
    last_checked: datetime = Field(default_factory=datetime.now)


class CoverIdentity(BaseModel):
    """
    A fictitious persona record.

    Legends, field expertise and safe houses can only be attached while
    the cover is active.
    """
    active: bool = False
    identity: str = "unknown"
    occupation: str = "civilian"
    background: str = ""
    legends: dict[str, Legend] = Field(default_factory=dict)
    field_expertise: list[FieldExpertise] = Field(default_factory=list)
    safe_houses: list[SafeHouse] = Field(default_factory=list)
    created_at: datetime | None = None

    def add_legend(self, name: str, details: str) -> bool:
        if not self.active:
            return False
        self.legends[name] = Legend(details=details)
        return True

    def add_field_expertise(self, skill: str, level: str = "basic") -> bool:
        if not self.active:
            return False
        self.field_expertise.append(FieldExpertise(skill=skill, level=level))
        return True

    def add_safe_house(self, location: str, security: int = 3) -> bool:
        if not self.active:
            return False
        self.safe_houses.append(SafeHouse(location=location, security=clamp(security, 1, 10)))
        return True


RESOURCE_TYPES = (
    "funding",
    "safe_houses",
    "vehicles",
    "weapons",
    "surveillance",
    "contacts",
    "documentation",
)


class OperationalResources(BaseModel):
    """Named counters for an agent's operational assets."""
    funding: int = 0
    safe_houses: int = 0
    vehicles: int = 0
    weapons: int = 0
    surveillance: int = 0
    contacts: int = 0
    documentation: int = 0

    def _check(self, resource: str) -> None:
        if resource not in RESOURCE_TYPES:
            raise ValueError(f"Unknown resource type: {resource}")

    def allocate(self, resource: str, amount: int) -> int:
        """Add to a resource counter. Returns the new total."""
        self._check(resource)
        setattr(self, resource, getattr(self, resource) + amount)
        return getattr(self, resource)

    def use(self, resource: str, amount: int) -> bool:
        """Spend from a resource counter. Returns False if not enough is available."""
        self._check(resource)
        available = getattr(self, resource)
        if available < amount:
            return False
        setattr(self, resource, available - amount)
        return True


class Health(BaseModel):
    """Physical health. ``wound_level`` counts missing health in steps of 20."""
    current: int = 100
    maximum: int = 100
    wound_level: int = 0
    injuries: list[str] = Field(default_factory=list)


class Phobia(BaseModel):
    trigger: str
    intensity: str = "moderate"
    acquired_at: datetime = Field(default_factory=datetime.now)


class Mania(BaseModel):
    description: str
    intensity: str = "moderate"
    acquired_at: datetime = Field(default_factory=datetime.now)


class Disorder(BaseModel):
    name: str
    symptoms: str = ""
    acquired_at: datetime = Field(default_factory=datetime.now)


class Trauma(BaseModel):
    description: str
    severity: str = "moderate"  # minor, moderate, severe
    recorded_at: datetime = Field(default_factory=datetime.now)


class Psychology(BaseModel):
    """Lasting psychological scars. Entries are only ever added."""
    phobias: list[Phobia] = Field(default_factory=list)
    manias: list[Mania] = Field(default_factory=list)
    disorders: list[Disorder] = Field(default_factory=list)
    traumas: list[Trauma] = Field(default_factory=list)


class InventoryItem(BaseModel):
    name: str
    quantity: int = 1
    description: str = ""
    added_at: datetime = Field(default_factory=datetime.now)


class MissionRecord(BaseModel):
    """One line of an agent's personal mission log."""
    name: str
    briefing: str = ""
    outcome: str = "unknown"  # success, partial, failure, compromised, classified
    date: datetime = Field(default_factory=datetime.now)
    days_elapsed: int = 1
    sanity_lost: int = 0
    wounds_received: list[str] = Field(default_factory=list)


class Agent(BaseModel):
    """
    A field agent on the roster.

    ``sanity`` mirrors the paired SanityTracker's current value and is only
    written by the sanity system.
    """
    id: str
    name: str = "Unknown Agent"
    role: str = "Operative"
    sanity: int = 60
    max_sanity: int = 60
    skills: dict[str, int] = Field(default_factory=dict)
    status: AgentStatus = AgentStatus.ACTIVE
    stress_level: int = 0  # 0-100
    health: Health = Field(default_factory=Health)
    attributes: dict[str, int] = Field(default_factory=dict)
    psychology: Psychology = Field(default_factory=Psychology)
    cover: CoverIdentity = Field(default_factory=CoverIdentity)
    bonds: list[Bond] = Field(default_factory=list)
    resources: OperationalResources = Field(default_factory=OperationalResources)
    equipment: list[str] = Field(default_factory=list)
    inventory: list[InventoryItem] = Field(default_factory=list)
    missions: list[MissionRecord] = Field(default_factory=list)
    connections: list[str] = Field(default_factory=list)
    notes: str = ""
    joined_at: datetime = Field(default_factory=datetime.now)
    last_action: datetime | None = None

    def get_bond(self, peer: str) -> Bond | None:
        return next((b for b in self.bonds if b.peer == peer), None)

    def get_item(self, name: str) -> InventoryItem | None:
        return next((i for i in self.inventory if i.name == name), None)


class AgentRegistration(BaseModel):
    """
    Registration input for a new agent.

    Every field is optional; accepts the camelCase keys used by
    external rosters (``maxSanity``, ``maxHealth``).
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str | None = None
    role: str | None = None
    sanity: int | None = None
    max_sanity: int | None = Field(default=None, alias="maxSanity")
    health: int | None = None
    max_health: int | None = Field(default=None, alias="maxHealth")
    attributes: dict[str, int] | None = None
    skills: dict[str, int] | None = None
    status: AgentStatus | None = None
    cover: CoverIdentity | None = None
    equipment: list[str] | None = None
    connections: list[str] | None = None
    notes: str | None = None


# -----------------------------------------------------------------------------
# Sanity Tracking
# -----------------------------------------------------------------------------

class SanityEntry(BaseModel):
    """One sanity change. History is append-only."""
    timestamp: datetime = Field(default_factory=datetime.now)
    delta: int
    previous: int
    current: int
    reason: str = ""


class Breakpoint(BaseModel):
    """A recorded crossing of a sanity threshold."""
    timestamp: datetime = Field(default_factory=datetime.now)
    type: BreakpointType
    sanity: int
    duration_hours: int | None = None  # Breakdown length, complete breaks only


class SanityTracker(BaseModel):
    """Paired 1:1 with an Agent. History and breakpoints only ever grow."""
    agent_id: str
    current: int
    maximum: int
    temporary_loss: int = 0
    permanent_loss: int = 0
    in_breakdown: bool = False
    breakdown_hours: int = 0
    history: list[SanityEntry] = Field(default_factory=list)
    breakpoints: list[Breakpoint] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Teams
# -----------------------------------------------------------------------------

class TeamBond(BaseModel):
    agent1: str
    agent2: str
    bond_type: str  # partnership, rivalry, subordinate, mentor, conflicted
    strength: int = 5
    recorded_at: datetime = Field(default_factory=datetime.now)


class Vehicle(BaseModel):
    name: str
    capacity: int = 4
    condition: str = "good"
    added_at: datetime = Field(default_factory=datetime.now)


class WeaponStock(BaseModel):
    name: str
    quantity: int = 1
    added_at: datetime = Field(default_factory=datetime.now)


TEAM_COUNTERS = ("budget", "safe_houses", "contacts")


class TeamResources(BaseModel):
    """Pooled team assets: counters plus a motor pool and an arsenal."""
    budget: int = 0
    safe_houses: int = 0
    contacts: int = 0
    vehicles: list[Vehicle] = Field(default_factory=list)
    weapons: list[WeaponStock] = Field(default_factory=list)

    def allocate(self, resource: str, amount: int) -> int:
        """Add to a counter. Vehicles and weapons have their own methods."""
        if resource not in TEAM_COUNTERS:
            raise ValueError(f"Cannot allocate {resource}")
        setattr(self, resource, getattr(self, resource) + amount)
        return getattr(self, resource)

    def add_vehicle(self, name: str, capacity: int = 4) -> Vehicle:
        vehicle = Vehicle(name=name, capacity=capacity)
        self.vehicles.append(vehicle)
        return vehicle

    def add_weapon(self, name: str, quantity: int = 1) -> WeaponStock:
        """Stock a weapon; a name already in the arsenal has its quantity raised."""
        stock = next((w for w in self.weapons if w.name == name), None)
        if stock is None:
            stock = WeaponStock(name=name, quantity=quantity)
            self.weapons.append(stock)
        else:
            stock.quantity += quantity
        return stock


class Team(BaseModel):
    """
    An operational team.

    Members are referenced by agent id; the EntityStore owns the agents.
    """
    id: str
    name: str = "Unnamed Team"
    member_ids: list[str] = Field(default_factory=list)
    objective: str = ""
    morale: int = 75     # 0-100
    cohesion: int = 80   # 0-100
    casualty_count: int = 0
    tactics: str = "adaptive"
    resources: TeamResources = Field(default_factory=TeamResources)
    team_bonds: list[TeamBond] = Field(default_factory=list)
    mission_history: list[str] = Field(default_factory=list)
    formed_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def status(self) -> TeamStatus:
        """Operational while morale stays above half."""
        if self.morale > 50:
            return TeamStatus.OPERATIONAL
        return TeamStatus.COMPROMISED


# -----------------------------------------------------------------------------
# Missions & Threats
# -----------------------------------------------------------------------------

class MissionParameters(BaseModel):
    priority: str = "high"
    timeframe: str = "72 hours"
    rules_of_engagement: str = "green"
    authorized_force: str = "lethal"
    collateral_sensitivity: str = "high"


class MissionIntelligence(BaseModel):
    enemy_forces: list[str] = Field(default_factory=list)
    supporting_assets: list[str] = Field(default_factory=list)
    local_intelligence: list[str] = Field(default_factory=list)


class Mission(BaseModel):
    id: str
    title: str = "Classified Operation"
    objective: str = "Unknown"
    location: str = "Classified"
    targets: list[str] = Field(default_factory=list)
    parameters: MissionParameters = Field(default_factory=MissionParameters)
    status: MissionStatus = MissionStatus.ACTIVE
    assigned_teams: list[str] = Field(default_factory=list)
    intelligence: MissionIntelligence = Field(default_factory=MissionIntelligence)
    estimated_casualties: str = "unknown"
    success_criteria: list[str] = Field(default_factory=list)
    failure_consequences: list[str] = Field(default_factory=list)
    briefed_at: datetime = Field(default_factory=datetime.now)


class Threat(BaseModel):
    id: str
    name: str = "Unknown Threat"
    type: str = "anomalous"  # entity, artifact, conspiracy, ...
    threat_level: int = 5    # 1-10
    classification: str = "DELTA GREEN"
    attributes: list[str] = Field(default_factory=list)
    known_locations: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    agents_aware: list[str] = Field(default_factory=list)
    status: ThreatStatus = ThreatStatus.ACTIVE
    containment_status: str = "uncontained"
    response_team: str | None = None
    discovered_at: datetime = Field(default_factory=datetime.now)
    last_seen: datetime = Field(default_factory=datetime.now)


# -----------------------------------------------------------------------------
# Narrative
# -----------------------------------------------------------------------------

class NarrativeElement(BaseModel):
    """
    A narrative beat queued for delivery.

    ``delivered`` is a latch: it goes False -> True once and never back.
    """
    id: str = Field(default_factory=lambda: f"NARRATIVE-{generate_id()}")
    type: NarrativeType = NarrativeType.SCENE
    content: str = ""
    triggers: list[str] = Field(default_factory=list)
    intensity: int = 5  # 1-10
    mood: str = "tense"
    affected_agents: list[str] = Field(default_factory=list)
    consequences: list[str] = Field(default_factory=list)
    delivered: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    def mark_delivered(self) -> bool:
        """Latch delivery. Returns True if this call flipped the flag."""
        if self.delivered:
            return False
        self.delivered = True
        return True
