"""
Entity storage for DAS campaigns.

Holds agents, sanity trackers, teams, missions and threats keyed by id.
No domain behavior beyond storage and lookup: clamping, breakpoints and
derived status all live in ``das.systems``.
"""

from .schema import Agent, Mission, SanityTracker, Team, Threat


class NotFoundError(LookupError):
    """A referenced entity id is not in the store."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class EntityStore:
    """
    In-memory entity store.

    Dicts preserve insertion order, so every listing is in registration
    order. Getters raise NotFoundError; ``find_*`` variants return None.
    Agents are never removed individually, only cleared on campaign reset.
    """

    def __init__(self):
        self.agents: dict[str, Agent] = {}
        self.trackers: dict[str, SanityTracker] = {}
        self.teams: dict[str, Team] = {}
        self.missions: dict[str, Mission] = {}
        self.threats: dict[str, Threat] = {}

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    def add_agent(self, agent: Agent, tracker: SanityTracker) -> None:
        """Store an agent with its paired tracker."""
        if agent.id in self.agents:
            raise ValueError(f"Agent {agent.id} already registered")
        if tracker.agent_id != agent.id:
            raise ValueError(f"Tracker for {tracker.agent_id} cannot pair with agent {agent.id}")
        self.agents[agent.id] = agent
        self.trackers[agent.id] = tracker

    def find_agent(self, agent_id: str) -> Agent | None:
        return self.agents.get(agent_id)

    def get_agent(self, agent_id: str) -> Agent:
        agent = self.agents.get(agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)
        return agent

    def get_tracker(self, agent_id: str) -> SanityTracker:
        tracker = self.trackers.get(agent_id)
        if tracker is None:
            raise NotFoundError("Sanity tracker", agent_id)
        return tracker

    def list_agents(self) -> list[Agent]:
        return list(self.agents.values())

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    def add_team(self, team: Team) -> None:
        if team.id in self.teams:
            raise ValueError(f"Team {team.id} already exists")
        self.teams[team.id] = team

    def get_team(self, team_id: str) -> Team:
        team = self.teams.get(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)
        return team

    def list_teams(self) -> list[Team]:
        return list(self.teams.values())

    def team_members(self, team: Team) -> list[Agent]:
        """Resolve a team's member ids to live agents."""
        return [self.agents[mid] for mid in team.member_ids if mid in self.agents]

    # -------------------------------------------------------------------------
    # Missions
    # -------------------------------------------------------------------------

    def add_mission(self, mission: Mission) -> None:
        if mission.id in self.missions:
            raise ValueError(f"Mission {mission.id} already exists")
        self.missions[mission.id] = mission

    def get_mission(self, mission_id: str) -> Mission:
        mission = self.missions.get(mission_id)
        if mission is None:
            raise NotFoundError("Mission", mission_id)
        return mission

    def list_missions(self) -> list[Mission]:
        return list(self.missions.values())

    # -------------------------------------------------------------------------
    # Threats
    # -------------------------------------------------------------------------

    def add_threat(self, threat: Threat) -> None:
        if threat.id in self.threats:
            raise ValueError(f"Threat {threat.id} already exists")
        self.threats[threat.id] = threat

    def get_threat(self, threat_id: str) -> Threat:
        threat = self.threats.get(threat_id)
        if threat is None:
            raise NotFoundError("Threat", threat_id)
        return threat

    def list_threats(self) -> list[Threat]:
        return list(self.threats.values())

    # -------------------------------------------------------------------------
    # Bulk
    # -------------------------------------------------------------------------

    def clear(
        self,
        preserve_agents: bool = False,
        preserve_teams: bool = False,
    ) -> None:
        """Clear entities for a new scenario. Trackers go with their agents."""
        if not preserve_agents:
            self.agents.clear()
            self.trackers.clear()
        if not preserve_teams:
            self.teams.clear()
        self.missions.clear()
        self.threats.clear()

    def snapshot(self) -> dict:
        """JSON-ready dump of every entity, for comparisons and debugging."""
        return {
            "agents": [a.model_dump(mode="json") for a in self.agents.values()],
            "trackers": [t.model_dump(mode="json") for t in self.trackers.values()],
            "teams": [t.model_dump(mode="json") for t in self.teams.values()],
            "missions": [m.model_dump(mode="json") for m in self.missions.values()],
            "threats": [t.model_dump(mode="json") for t in self.threats.values()],
        }
