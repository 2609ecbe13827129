"""
Campaign state management.

The CampaignManager owns one campaign's entity store, narrative queue,
world state and event bus, and routes every mutation through the
threshold systems so invariants hold after each call:

- sanity, threat level, morale, cohesion, stress stay within their ranges
- casualty counts, sanity history and breakpoints never shrink
- narrative delivery is a one-way latch
- every sanity tracker pairs with exactly one live agent

Methods validate that referenced entities exist before mutating anything.
"""

import logging
import random
from collections import deque
from datetime import datetime
from typing import Any

from .event_bus import EventBus, EventType
from .schema import (
    Agent,
    AgentRegistration,
    AgentStatus,
    Bond,
    CoverIdentity,
    Disorder,
    Health,
    InventoryItem,
    LossKind,
    Mania,
    Mission,
    MissionRecord,
    MissionStatus,
    Phobia,
    SanityTracker,
    Team,
    TeamBond,
    Threat,
    ThreatStatus,
    Trauma,
    TrustLevel,
    Vehicle,
    WeaponStock,
    clamp,
)
from .schemas.updates import (
    AdjustSanity,
    SetEquipment,
    SetNotes,
    SetRole,
    SetStatus,
    SetStress,
    StatusUpdate,
    TeamDynamicsUpdate,
    updates_from_mapping,
)
from .store import EntityStore
from ..systems.cover import CoverStressReport, CoverValidation, cover_stress, validate_cover
from ..systems.health import HealthChange, HealthSystem, wound_level
from ..systems.narrative import NarrativeQueue, NarrativeState
from ..systems.resources import redistribution_advice, utilization
from ..systems.sanity import SanityChange, SanitySystem, recovery_recommendation, sanity_band
from ..systems.team import DynamicsResult, TeamDynamics
from ..systems.threat import active_threats, clamp_threat_level, mean_threat_level
from ..tools.dice import CheckResult, skill_check

logger = logging.getLogger(__name__)


DEFAULT_SANITY = 60
DEFAULT_MORALE = 75
DEFAULT_COHESION = 80
DEFAULT_HEALTH = 100
DEFAULT_ATTRIBUTE = 50


def _trust_for(strength: int) -> TrustLevel:
    if strength > 7:
        return TrustLevel.HIGH
    if strength > 3:
        return TrustLevel.MODERATE
    return TrustLevel.LOW


class CampaignManager:
    """
    Manages a single campaign's state and domain operations.

    Construct one per campaign and hand it to the dispatcher and context
    builder; nothing here is process-global.
    """

    def __init__(
        self,
        campaign_id: str | None = None,
        gamemaster: str = "Anonymous Handler",
        world_state: dict[str, Any] | None = None,
        store: EntityStore | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        mission_log_limit: int = 200,
    ):
        self.created_at = datetime.now()
        self.campaign_id = campaign_id or f"DG-{int(self.created_at.timestamp() * 1000)}"
        self.gamemaster = gamemaster
        self.world_state: dict[str, Any] = dict(world_state or {})

        self.store = store or EntityStore()
        self.bus = event_bus or EventBus()
        self.narrative = NarrativeQueue()
        self.mission_log: deque[dict] = deque(maxlen=mission_log_limit)

        self.rng = rng
        self.sanity = SanitySystem(rng)
        self.health = HealthSystem()
        self.dynamics = TeamDynamics()

    def _emit(self, event_type: EventType, **data) -> None:
        self.bus.emit(event_type, campaign_id=self.campaign_id, **data)

    @staticmethod
    def _next_id(prefix: str, existing: dict) -> str:
        n = len(existing) + 1
        while f"{prefix}-{n}" in existing:
            n += 1
        return f"{prefix}-{n}"

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    def register_agent(self, data: dict[str, Any] | AgentRegistration | None = None) -> Agent:
        """
        Register a new agent and its sanity tracker.

        Every field is optional. Starting sanity is clamped into
        [0, maxSanity] and starting health into [0, maxHealth]; both
        maxima must be at least 1.
        """
        if isinstance(data, AgentRegistration):
            reg = data
        else:
            reg = AgentRegistration.model_validate(data or {})

        maximum = DEFAULT_SANITY if reg.max_sanity is None else reg.max_sanity
        if maximum < 1:
            raise ValueError(f"maxSanity must be at least 1, got {maximum}")
        current = DEFAULT_SANITY if reg.sanity is None else reg.sanity
        current = clamp(current, 0, maximum)

        max_health = DEFAULT_HEALTH if reg.max_health is None else reg.max_health
        if max_health < 1:
            raise ValueError(f"maxHealth must be at least 1, got {max_health}")
        health = clamp(max_health if reg.health is None else reg.health, 0, max_health)

        agent_id = reg.id or self._next_id("AGENT", self.store.agents)
        if self.store.find_agent(agent_id) is not None:
            raise ValueError(f"Agent {agent_id} already registered")

        agent = Agent(
            id=agent_id,
            name=reg.name or "Unknown Agent",
            role=reg.role or "Operative",
            sanity=current,
            max_sanity=maximum,
            health=Health(
                current=health,
                maximum=max_health,
                wound_level=wound_level(health, max_health),
            ),
            attributes=dict(reg.attributes or {}),
            skills=dict(reg.skills or {}),
            status=reg.status or AgentStatus.ACTIVE,
            cover=reg.cover or CoverIdentity(),
            equipment=list(reg.equipment or []),
            connections=list(reg.connections or []),
            notes=reg.notes or "",
        )
        tracker = SanityTracker(agent_id=agent.id, current=current, maximum=maximum)
        self.store.add_agent(agent, tracker)

        logger.info(f"Registered agent {agent.id} ({agent.name})")
        self._emit(EventType.AGENT_REGISTERED, agent_id=agent.id, name=agent.name)
        return agent

    def get_agent(self, agent_id: str) -> Agent:
        return self.store.get_agent(agent_id)

    def get_all_agents(self) -> list[Agent]:
        return self.store.list_agents()

    def update_agent_status(
        self,
        agent_id: str,
        updates: list[StatusUpdate] | dict[str, Any],
    ) -> Agent:
        """
        Apply typed status updates in order.

        A plain mapping is converted first; an unsupported key raises
        before the agent is touched.
        """
        agent = self.store.get_agent(agent_id)
        if isinstance(updates, dict):
            updates = updates_from_mapping(updates)

        for update in updates:
            if isinstance(update, AdjustSanity):
                self.modify_sanity(agent_id, update.delta, update.reason)
            elif isinstance(update, SetStatus):
                agent.status = update.status
            elif isinstance(update, SetStress):
                agent.stress_level = clamp(update.level, 0, 100)
            elif isinstance(update, SetRole):
                agent.role = update.role
            elif isinstance(update, SetNotes):
                agent.notes = update.notes
            elif isinstance(update, SetEquipment):
                agent.equipment = list(update.items)

        agent.last_action = datetime.now()
        self._emit(EventType.AGENT_UPDATED, agent_id=agent.id, updates=[u.op for u in updates])
        return agent

    # -------------------------------------------------------------------------
    # Sanity
    # -------------------------------------------------------------------------

    def _report_sanity(self, change: SanityChange) -> SanityChange:
        self._emit(
            EventType.SANITY_CHANGED,
            agent_id=change.agent_id,
            previous=change.previous,
            current=change.current,
        )
        if change.breakpoint is not None:
            logger.info(
                f"Agent {change.agent_id} hit {change.breakpoint.type.value} "
                f"breakpoint at sanity {change.current}"
            )
            self._emit(
                EventType.SANITY_BREAKPOINT,
                agent_id=change.agent_id,
                type=change.breakpoint.type.value,
                sanity=change.current,
            )
        if change.incapacitated:
            logger.warning(f"Agent {change.agent_id} incapacitated by complete break")
            self._emit(EventType.AGENT_INCAPACITATED, agent_id=change.agent_id)
        return change

    def modify_sanity(self, agent_id: str, delta: int, reason: str = "") -> SanityChange:
        """Apply a sanity delta, clamped to [0, max], with breakpoint checks."""
        agent = self.store.get_agent(agent_id)
        tracker = self.store.get_tracker(agent_id)
        return self._report_sanity(self.sanity.modify(agent, tracker, delta, reason))

    def take_sanity_damage(
        self,
        agent_id: str,
        amount: int,
        kind: LossKind | str = LossKind.TEMPORARY,
        reason: str = "",
    ) -> SanityChange:
        agent = self.store.get_agent(agent_id)
        tracker = self.store.get_tracker(agent_id)
        return self._report_sanity(
            self.sanity.take_damage(agent, tracker, amount, LossKind(kind), reason)
        )

    def recover_sanity(self, agent_id: str, amount: int) -> SanityChange:
        """Restore from the temporary loss pool, never above max."""
        agent = self.store.get_agent(agent_id)
        tracker = self.store.get_tracker(agent_id)
        return self._report_sanity(self.sanity.recover(agent, tracker, amount))

    def recover_from_breakdown(self, agent_id: str) -> SanityChange:
        agent = self.store.get_agent(agent_id)
        tracker = self.store.get_tracker(agent_id)
        return self._report_sanity(self.sanity.recover_from_breakdown(agent, tracker))

    def get_sanity_tracker(self, agent_id: str) -> SanityTracker:
        return self.store.get_tracker(agent_id)

    def sanity_status(self, agent_id: str) -> dict:
        tracker = self.store.get_tracker(agent_id)
        return {
            "agentId": agent_id,
            "current": tracker.current,
            "maximum": tracker.maximum,
            "band": sanity_band(tracker.current).value,
            "recommendation": recovery_recommendation(tracker.current),
            "inBreakdown": tracker.in_breakdown,
            "temporaryLoss": tracker.temporary_loss,
            "permanentLoss": tracker.permanent_loss,
            "breakpoints": len(tracker.breakpoints),
        }

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def _report_health(self, change: HealthChange) -> HealthChange:
        self._emit(
            EventType.HEALTH_CHANGED,
            agent_id=change.agent_id,
            previous=change.previous,
            current=change.current,
            wound_level=change.wound_level,
        )
        if change.killed:
            logger.warning(f"Agent {change.agent_id} killed")
            self._emit(EventType.AGENT_KILLED, agent_id=change.agent_id)
        return change

    def take_damage(self, agent_id: str, amount: int, injury: str = "") -> HealthChange:
        """Subtract physical damage, floored at zero. Zero health is death."""
        agent = self.store.get_agent(agent_id)
        return self._report_health(self.health.take_damage(agent, amount, injury))

    def heal(self, agent_id: str, amount: int) -> HealthChange:
        agent = self.store.get_agent(agent_id)
        return self._report_health(self.health.heal(agent, amount))

    # -------------------------------------------------------------------------
    # Psychology, Attributes, Inventory
    # -------------------------------------------------------------------------

    def add_phobia(self, agent_id: str, trigger: str, intensity: str = "moderate") -> Phobia:
        phobia = Phobia(trigger=trigger, intensity=intensity)
        self.store.get_agent(agent_id).psychology.phobias.append(phobia)
        return phobia

    def add_mania(self, agent_id: str, description: str, intensity: str = "moderate") -> Mania:
        mania = Mania(description=description, intensity=intensity)
        self.store.get_agent(agent_id).psychology.manias.append(mania)
        return mania

    def add_disorder(self, agent_id: str, name: str, symptoms: str = "") -> Disorder:
        disorder = Disorder(name=name, symptoms=symptoms)
        self.store.get_agent(agent_id).psychology.disorders.append(disorder)
        return disorder

    def add_trauma(self, agent_id: str, description: str, severity: str = "moderate") -> Trauma:
        trauma = Trauma(description=description, severity=severity)
        self.store.get_agent(agent_id).psychology.traumas.append(trauma)
        return trauma

    def attribute_check(
        self,
        agent_id: str,
        attribute: str,
        difficulty: int = 50,
    ) -> CheckResult:
        """
        Roll d100 under one of the agent's attributes.

        Attributes the agent has no rating for count as 50.
        """
        agent = self.store.get_agent(agent_id)
        value = agent.attributes.get(attribute, DEFAULT_ATTRIBUTE)
        return skill_check(attribute, value, difficulty, rng=self.rng)

    def add_to_inventory(
        self,
        agent_id: str,
        name: str,
        quantity: int = 1,
        description: str = "",
    ) -> InventoryItem:
        """Add items; an item already carried has its quantity raised."""
        if quantity < 1:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        agent = self.store.get_agent(agent_id)
        item = agent.get_item(name)
        if item is None:
            item = InventoryItem(name=name, quantity=quantity, description=description)
            agent.inventory.append(item)
        else:
            item.quantity += quantity
        return item

    def remove_from_inventory(self, agent_id: str, name: str, quantity: int = 1) -> bool:
        """
        Take items out of inventory.

        Quantity never drops below zero, and an item that runs out is
        removed. Returns False when the agent doesn't carry the item.
        """
        agent = self.store.get_agent(agent_id)
        item = agent.get_item(name)
        if item is None:
            return False
        item.quantity = max(0, item.quantity - quantity)
        if item.quantity == 0:
            agent.inventory.remove(item)
        return True

    # -------------------------------------------------------------------------
    # Agent mission log
    # -------------------------------------------------------------------------

    def log_mission(
        self,
        agent_id: str,
        name: str,
        briefing: str = "",
        outcome: str = "unknown",
        days_elapsed: int = 1,
    ) -> MissionRecord:
        record = MissionRecord(
            name=name,
            briefing=briefing,
            outcome=outcome,
            days_elapsed=days_elapsed,
        )
        self.store.get_agent(agent_id).missions.append(record)
        return record

    def update_last_mission(
        self,
        agent_id: str,
        outcome: str,
        sanity_lost: int = 0,
        wounds: list[str] | None = None,
    ) -> MissionRecord | None:
        """Close out the agent's latest mission. No-op with an empty log."""
        agent = self.store.get_agent(agent_id)
        if not agent.missions:
            return None
        record = agent.missions[-1]
        record.outcome = outcome
        record.sanity_lost = sanity_lost
        record.wounds_received = list(wounds or [])
        return record

    def resource_report(self, agent_id: str) -> dict:
        """Utilization of each operational resource plus redistribution advice."""
        resources = self.store.get_agent(agent_id).resources
        return {
            "agentId": agent_id,
            "utilization": utilization(resources),
            "recommendations": redistribution_advice(resources),
        }

    # -------------------------------------------------------------------------
    # Bonds, Resources, Cover
    # -------------------------------------------------------------------------

    def add_or_update_bond(
        self,
        agent_id: str,
        peer: str,
        relationship: str,
        strength: int = 5,
    ) -> Bond:
        agent = self.store.get_agent(agent_id)
        strength = clamp(strength, 0, 10)

        bond = agent.get_bond(peer)
        if bond is not None:
            bond.relationship = relationship
            bond.strength = strength
            bond.trust_level = _trust_for(strength)
            bond.updated_at = datetime.now()
        else:
            bond = Bond(
                peer=peer,
                relationship=relationship,
                strength=strength,
                trust_level=_trust_for(strength),
            )
            agent.bonds.append(bond)
        return bond

    def allocate_resource(self, agent_id: str, resource: str, amount: int) -> int:
        return self.store.get_agent(agent_id).resources.allocate(resource, amount)

    def use_resource(self, agent_id: str, resource: str, amount: int) -> bool:
        return self.store.get_agent(agent_id).resources.use(resource, amount)

    def create_cover_identity(
        self,
        agent_id: str,
        identity: str,
        occupation: str,
        background: str = "",
    ) -> CoverIdentity:
        """Replace the agent's cover with a fresh, active one."""
        agent = self.store.get_agent(agent_id)
        agent.cover = CoverIdentity(
            active=True,
            identity=identity,
            occupation=occupation,
            background=background,
            created_at=datetime.now(),
        )
        return agent.cover

    def add_legend(self, agent_id: str, name: str, details: str) -> bool:
        return self.store.get_agent(agent_id).cover.add_legend(name, details)

    def add_field_expertise(self, agent_id: str, skill: str, level: str = "basic") -> bool:
        return self.store.get_agent(agent_id).cover.add_field_expertise(skill, level)

    def add_safe_house(self, agent_id: str, location: str, security: int = 3) -> bool:
        return self.store.get_agent(agent_id).cover.add_safe_house(location, security)

    def deactivate_cover(self, agent_id: str) -> CoverIdentity:
        agent = self.store.get_agent(agent_id)
        agent.cover.active = False
        return agent.cover

    def validate_cover(self, agent_id: str) -> CoverValidation:
        return validate_cover(self.store.get_agent(agent_id).cover)

    def assess_cover_stress(self, agent_id: str, days_under_cover: int) -> CoverStressReport:
        return cover_stress(self.store.get_agent(agent_id).cover, days_under_cover)

    def apply_cover_stress(self, agent_id: str, days_under_cover: int) -> CoverStressReport:
        """Score cover stress and write it into the agent's stress level."""
        report = self.assess_cover_stress(agent_id, days_under_cover)
        self.update_agent_status(agent_id, [SetStress(level=report.stress_level)])
        return report

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    def create_team(
        self,
        name: str | None = None,
        member_ids: list[str] | None = None,
        objective: str = "",
        morale: int | None = None,
        cohesion: int | None = None,
        tactics: str | None = None,
        team_id: str | None = None,
    ) -> Team:
        """
        Form a team. Member ids that don't match a registered agent are
        dropped rather than rejected.
        """
        team_id = team_id or self._next_id("TEAM", self.store.teams)
        members = [mid for mid in (member_ids or []) if self.store.find_agent(mid) is not None]

        team = Team(
            id=team_id,
            name=name or "Unnamed Team",
            member_ids=members,
            objective=objective,
            morale=clamp(DEFAULT_MORALE if morale is None else morale, 0, 100),
            cohesion=clamp(DEFAULT_COHESION if cohesion is None else cohesion, 0, 100),
            tactics=tactics or "adaptive",
        )
        self.store.add_team(team)

        logger.info(f"Formed team {team.id} with {len(members)} member(s)")
        self._emit(EventType.TEAM_CREATED, team_id=team.id, members=members)
        return team

    def get_all_teams(self) -> list[Team]:
        return self.store.list_teams()

    def manage_team_dynamics(
        self,
        team_id: str,
        dynamics: TeamDynamicsUpdate | dict[str, Any],
    ) -> DynamicsResult:
        team = self.store.get_team(team_id)
        if not isinstance(dynamics, TeamDynamicsUpdate):
            dynamics = TeamDynamicsUpdate.model_validate(dynamics)

        result = self.dynamics.apply(team, dynamics)
        self._emit(EventType.TEAM_DYNAMICS, **result.to_dict())
        if result.status_changed:
            logger.info(f"Team {team.id} is now {result.status.value}")
            self._emit(
                EventType.TEAM_STATUS_CHANGED,
                team_id=team.id,
                previous=result.previous_status.value,
                status=result.status.value,
            )
        return result

    def record_team_bond(
        self,
        team_id: str,
        agent1: str,
        agent2: str,
        bond_type: str,
        strength: int = 5,
    ) -> TeamBond:
        team = self.store.get_team(team_id)
        for agent_id in (agent1, agent2):
            if agent_id not in team.member_ids:
                raise ValueError(f"Agent {agent_id} is not a member of {team.id}")
        bond = TeamBond(
            agent1=agent1,
            agent2=agent2,
            bond_type=bond_type,
            strength=clamp(strength, 0, 10),
        )
        team.team_bonds.append(bond)
        return bond

    def remove_member(self, team_id: str, agent_id: str) -> bool:
        """Drop an agent from the roster. Returns False if they weren't on it."""
        team = self.store.get_team(team_id)
        if agent_id not in team.member_ids:
            return False
        team.member_ids.remove(agent_id)
        self._emit(EventType.TEAM_UPDATED, team_id=team.id, removed=agent_id)
        return True

    def allocate_team_resource(self, team_id: str, resource: str, amount: int) -> int:
        team = self.store.get_team(team_id)
        total = team.resources.allocate(resource, amount)
        self._emit(EventType.TEAM_UPDATED, team_id=team.id, resource=resource, total=total)
        return total

    def add_vehicle(self, team_id: str, name: str, capacity: int = 4) -> Vehicle:
        team = self.store.get_team(team_id)
        vehicle = team.resources.add_vehicle(name, capacity)
        self._emit(EventType.TEAM_UPDATED, team_id=team.id, vehicle=name)
        return vehicle

    def add_weapon(self, team_id: str, name: str, quantity: int = 1) -> WeaponStock:
        team = self.store.get_team(team_id)
        stock = team.resources.add_weapon(name, quantity)
        self._emit(EventType.TEAM_UPDATED, team_id=team.id, weapon=name, quantity=stock.quantity)
        return stock

    def team_status_report(self, team_id: str) -> dict:
        team = self.store.get_team(team_id)
        members = self.store.team_members(team)
        count = len(members)
        average_sanity = round(sum(m.sanity for m in members) / count) if members else 0
        average_health = round(sum(m.health.current for m in members) / count) if members else 0
        in_breakdown = {m.id: self.store.get_tracker(m.id).in_breakdown for m in members}
        return {
            "teamId": team.id,
            "name": team.name,
            "memberCount": count,
            "averageSanity": average_sanity,
            "averageHealth": average_health,
            "morale": team.morale,
            "cohesion": team.cohesion,
            "casualties": team.casualty_count,
            "status": team.status.value,
            "teamBonds": len(team.team_bonds),
            "resourcesAvailable": {
                "budget": team.resources.budget,
                "safeHouses": team.resources.safe_houses,
                "contacts": team.resources.contacts,
                "vehicles": len(team.resources.vehicles),
                "weapons": sum(w.quantity for w in team.resources.weapons),
            },
            "memberStatus": [
                {
                    "id": m.id,
                    "name": m.name,
                    "sanity": m.sanity,
                    "health": m.health.current,
                    "status": m.status.value,
                    "inBreakdown": in_breakdown[m.id],
                }
                for m in members
            ],
        }

    # -------------------------------------------------------------------------
    # Missions
    # -------------------------------------------------------------------------

    def generate_mission_briefing(self, briefing: dict[str, Any] | None = None) -> Mission:
        """
        Create an active mission. Missing parameters take their defaults
        (priority high, 72 hours, green, lethal, high sensitivity).
        """
        data = {k: v for k, v in (briefing or {}).items() if v is not None}
        data["id"] = data.get("id") or self._next_id("MISSION", self.store.missions)
        data["status"] = MissionStatus.ACTIVE

        mission = Mission.model_validate(data)
        self.store.add_mission(mission)
        for team_id in mission.assigned_teams:
            team = self.store.teams.get(team_id)
            if team is not None:
                team.mission_history.append(mission.id)

        self.mission_log.append({"missionId": mission.id, "timestamp": datetime.now().isoformat()})
        self._emit(EventType.MISSION_BRIEFED, mission_id=mission.id, title=mission.title)
        return mission

    def get_current_mission(self) -> Mission | None:
        """The most recently briefed mission that is still active."""
        current = None
        for mission in self.store.list_missions():
            if mission.status == MissionStatus.ACTIVE:
                current = mission
        return current

    def set_mission_status(self, mission_id: str, status: MissionStatus | str) -> Mission:
        mission = self.store.get_mission(mission_id)
        mission.status = MissionStatus(status)
        self._emit(EventType.MISSION_STATUS, mission_id=mission.id, status=mission.status.value)
        return mission

    # -------------------------------------------------------------------------
    # Threats
    # -------------------------------------------------------------------------

    def create_threat_assessment(self, threat: dict[str, Any] | None = None) -> Threat:
        data = {k: v for k, v in (threat or {}).items() if v is not None}
        data["id"] = data.get("id") or self._next_id("THREAT", self.store.threats)
        data["threat_level"] = clamp_threat_level(data.get("threat_level"))
        data["status"] = ThreatStatus.ACTIVE

        assessment = Threat.model_validate(data)
        self.store.add_threat(assessment)
        self._emit(
            EventType.THREAT_ASSESSED,
            threat_id=assessment.id,
            threat_level=assessment.threat_level,
        )
        return assessment

    def update_threat(
        self,
        threat_id: str,
        threat_level: int | None = None,
        status: ThreatStatus | str | None = None,
        containment_status: str | None = None,
    ) -> Threat:
        threat = self.store.get_threat(threat_id)
        new_status = ThreatStatus(status) if status is not None else None

        if threat_level is not None:
            threat.threat_level = clamp_threat_level(threat_level)
        if new_status is not None:
            threat.status = new_status
        if containment_status is not None:
            threat.containment_status = containment_status
        threat.last_seen = datetime.now()

        self._emit(
            EventType.THREAT_UPDATED,
            threat_id=threat.id,
            threat_level=threat.threat_level,
            status=threat.status.value,
        )
        return threat

    def get_active_threats(self, min_threat_level: int | None = None) -> list[Threat]:
        return active_threats(self.store.list_threats(), min_threat_level)

    # -------------------------------------------------------------------------
    # Narrative
    # -------------------------------------------------------------------------

    def inject_narrative(self, narrative: dict[str, Any]):
        element = self.narrative.inject(narrative)
        self._emit(EventType.NARRATIVE_INJECTED, element_id=element.id, type=element.type.value)
        return element

    def mark_narrative_delivered(self, element_id: str):
        element = self.narrative.mark_delivered(element_id)
        self._emit(EventType.NARRATIVE_DELIVERED, element_ids=[element.id])
        return element

    def deliver_pending_narrative(self):
        delivered = self.narrative.deliver_pending()
        if delivered:
            self._emit(EventType.NARRATIVE_DELIVERED, element_ids=[e.id for e in delivered])
        return delivered

    def get_narrative_state(self) -> NarrativeState:
        return self.narrative.state()

    # -------------------------------------------------------------------------
    # Campaign
    # -------------------------------------------------------------------------

    def campaign_summary(self) -> dict:
        agents = self.store.list_agents()
        average_sanity = round(sum(a.sanity for a in agents) / len(agents)) if agents else 0
        current = self.get_current_mission()
        days = (datetime.now() - self.created_at).days

        return {
            "campaignId": self.campaign_id,
            "gamemaster": self.gamemaster,
            "stats": {
                "total_agents": len(agents),
                "active_agents": sum(1 for a in agents if a.status == AgentStatus.ACTIVE),
                "teams": len(self.store.teams),
                "missions": len(self.store.missions),
                "threats": len(self.store.threats),
                "narrative_elements": len(self.narrative),
            },
            "sanity_average": average_sanity,
            "active_mission": current.title if current else "None",
            "threat_level": mean_threat_level(self.store.list_threats()),
            "campaign_duration": f"{days} days",
        }

    def reset_campaign(
        self,
        preserve_agents: bool = False,
        preserve_teams: bool = False,
        reset_world_state: bool = False,
    ) -> None:
        """Clear the board for a new scenario."""
        self.store.clear(preserve_agents=preserve_agents, preserve_teams=preserve_teams)
        self.narrative.clear()
        self.mission_log.clear()
        if reset_world_state:
            self.world_state = {}
        logger.info(f"Campaign {self.campaign_id} reset")
