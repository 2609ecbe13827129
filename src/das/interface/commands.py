"""
Command handlers for DAS.

Each handler takes (dispatcher, args) and returns a CommandResult. A
handler checks every required argument, parses every number and looks up
every referenced entity before it changes anything, so a rejected
directive leaves the campaign untouched.

Handlers may let NotFoundError escape; the dispatcher turns it into an
ERROR response.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ..state.schema import AgentStatus, NarrativeType
from ..state.schemas.response import CommandResult
from ..state.schemas.updates import TeamDynamicsUpdate
from ..tools.dice import skill_check
from .command_registry import CommandCategory, CommandRegistry

if TYPE_CHECKING:
    from .dispatcher import CommandDispatcher


DYNAMICS_KEYS = ("morale", "cohesion", "casualty", "tactics")


def _now() -> str:
    return datetime.now().isoformat()


def _parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _not_integer(label: str, value: str) -> CommandResult:
    return CommandResult.failure(f"{label} must be an integer, got '{value}'")


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Invalid {location}: {first['msg']}" if location else first["msg"]


# -----------------------------------------------------------------------------
# Field Operations
# -----------------------------------------------------------------------------

def cmd_investigate(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """Open an investigation; it counts as an active operation."""
    if not args:
        return CommandResult.failure("INVESTIGATE requires a target")

    investigation = {
        "id": dispatcher.generate_id(),
        "target": args[0],
        "details": " ".join(args[1:]),
        "status": "ACTIVE",
        "timestamp": _now(),
        "findings": [],
    }
    dispatcher.operations[investigation["id"]] = investigation
    return CommandResult.success(
        f"Investigation initiated: {investigation['id']}",
        {"investigation": investigation},
    )


def cmd_engage(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """Log an engagement. Anomalous threat designations raise the alert level."""
    if len(args) < 2:
        return CommandResult.failure("ENGAGE requires agent ID and threat designation")

    agent_id, threat = args[0], args[1]
    engagement = {
        "agentId": agent_id,
        "threat": threat,
        "modifiers": " ".join(args[2:]),
        "timestamp": _now(),
        "outcome": "PENDING",
    }
    dispatcher.record_alert(dispatcher.escalation.check_keywords(threat))
    return CommandResult.success("Engagement directive processed", {"engagement": engagement})


def cmd_retreat(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    if not args:
        return CommandResult.failure("RETREAT requires agent ID")

    retreat = {
        "agentId": args[0],
        "reason": args[1] if len(args) > 1 else "Tactical withdrawal",
        "timestamp": _now(),
        "status": "EXECUTED",
    }
    return CommandResult.success("Retreat order processed", {"retreat": retreat})


def cmd_contain(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """Start containment. The supplied severity sets the alert level directly."""
    if not args:
        return CommandResult.failure("CONTAIN requires object type and severity level")

    severity = args[1] if len(args) > 1 else None
    containment = {
        "id": dispatcher.generate_id(),
        "objectType": args[0],
        "severity": severity or "UNKNOWN",
        "measures": " ".join(args[2:]),
        "status": "INITIATED",
        "timestamp": _now(),
    }
    dispatcher.record_alert(dispatcher.escalation.set_from_severity(severity))
    return CommandResult.success("Containment protocol activated", {"containment": containment})


def cmd_research(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    if not args:
        return CommandResult.failure("RESEARCH requires a subject")

    research = {
        "id": dispatcher.generate_id(),
        "subject": args[0],
        "parameters": " ".join(args[1:]),
        "status": "IN_PROGRESS",
        "timestamp": _now(),
        "results": None,
    }
    dispatcher.operations[research["id"]] = research
    return CommandResult.success("Research directive established", {"research": research})


def cmd_sanitize(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    if not args:
        return CommandResult.failure("SANITIZE requires a target")

    sanitization = {
        "id": dispatcher.generate_id(),
        "target": args[0],
        "methods": " ".join(args[1:]),
        "timestamp": _now(),
        "status": "PROCESSING",
    }
    return CommandResult.success(
        "Sanitization operation initiated", {"sanitization": sanitization},
    )


# -----------------------------------------------------------------------------
# Reporting
# -----------------------------------------------------------------------------

def cmd_status(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """
    Operational status: alert level, open operations, recent audit entries.

    With an id, attaches the matching operation record or registered agent.
    An id that matches neither is ignored.
    """
    report = {
        "timestamp": _now(),
        "threatLevel": dispatcher.threat_level.value,
        "activeOperations": len(dispatcher.operations),
        "recentActions": [e.model_dump(mode="json") for e in dispatcher.recent_actions()],
    }

    if args:
        target = args[0]
        manager = dispatcher.manager
        if target in dispatcher.operations:
            report["agentStatus"] = dispatcher.operations[target]
        elif manager.store.find_agent(target) is not None:
            agent = manager.get_agent(target)
            report["agentStatus"] = {
                **agent.model_dump(mode="json"),
                "sanityReport": manager.sanity_status(target),
            }

    return CommandResult.success("Status report generated", report)


def cmd_debrief(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    if not args:
        return CommandResult.failure("DEBRIEF requires agent ID")

    debrief = {
        "agentId": args[0],
        "timestamp": _now(),
        "observations": " ".join(args[1:]),
        "mentalStatus": "PENDING_EVALUATION",
        "recordId": dispatcher.generate_id(),
    }
    return CommandResult.success("Debrief recorded", {"debrief": debrief})


def cmd_report(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    report = {
        "type": args[0] if args else "GENERAL",
        "timestamp": _now(),
        "details": " ".join(args[1:]),
        "classification": "DELTA_GREEN",
        "reportId": dispatcher.generate_id(),
    }
    return CommandResult.success("Report generated", {"report": report})


def cmd_context(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """Build a context snapshot: CONTEXT [atmosphere] [briefingLevel]."""
    snapshot = dispatcher.context.build_context(
        atmosphere=args[0] if args else "tense",
        briefing_level=args[1] if len(args) > 1 else "classified",
    )
    return CommandResult.success("Context snapshot built", {"context": snapshot.to_dict()})


# -----------------------------------------------------------------------------
# Threat Management
# -----------------------------------------------------------------------------

def cmd_alert(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    if not args:
        return CommandResult.failure("ALERT requires threat type")

    alert = {
        "id": dispatcher.generate_id(),
        "threatType": args[0],
        "location": args[1] if len(args) > 1 else "UNKNOWN",
        "timestamp": _now(),
        "status": "ISSUED",
    }
    dispatcher.record_alert(dispatcher.escalation.force_elevated(f"alert:{args[0]}"))
    return CommandResult.success("Alert issued to network", {"alert": alert})


def cmd_escalate(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    reason = args[0] if args else "Unspecified"
    transition = dispatcher.record_alert(dispatcher.escalation.escalate(reason))
    escalation = {
        "previousLevel": transition.previous.value,
        "newLevel": transition.current.value,
        "reason": reason,
        "timestamp": _now(),
    }
    return CommandResult.success("Threat level escalated", {"escalation": escalation})


def cmd_threat(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """THREAT <name> [level] [type]"""
    if not args:
        return CommandResult.failure("THREAT requires a name")

    level = None
    if len(args) > 1:
        level = _parse_int(args[1])
        if level is None:
            return _not_integer("Threat level", args[1])

    threat = dispatcher.manager.create_threat_assessment({
        "name": args[0],
        "threat_level": level,
        "type": args[2] if len(args) > 2 else None,
    })
    return CommandResult.success(
        f"Threat assessed: {threat.id}", {"threat": threat.model_dump(mode="json")},
    )


# -----------------------------------------------------------------------------
# Roster
# -----------------------------------------------------------------------------

def cmd_agent(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """AGENT <name> [role] [sanity] [maxSanity]"""
    if not args:
        return CommandResult.failure("AGENT requires a name")

    numbers: dict[str, int] = {}
    for label, position in (("sanity", 2), ("maxSanity", 3)):
        if len(args) > position:
            value = _parse_int(args[position])
            if value is None:
                return _not_integer(label, args[position])
            numbers[label] = value

    if numbers.get("maxSanity", 1) < 1:
        return CommandResult.failure("maxSanity must be at least 1")

    agent = dispatcher.manager.register_agent({
        "name": args[0],
        "role": args[1] if len(args) > 1 else None,
        **numbers,
    })
    return CommandResult.success(
        f"Agent registered: {agent.id}", {"agent": agent.model_dump(mode="json")},
    )


def cmd_sanity(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """SANITY <agentId> <delta> [reason...]"""
    if len(args) < 2:
        return CommandResult.failure("SANITY requires agent ID and delta")

    delta = _parse_int(args[1])
    if delta is None:
        return _not_integer("Sanity delta", args[1])

    change = dispatcher.manager.modify_sanity(args[0], delta, " ".join(args[2:]))
    return CommandResult.success("Sanity adjusted", {"sanity": change.to_dict()})


def cmd_recover(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """RECOVER <agentId> <amount>"""
    if len(args) < 2:
        return CommandResult.failure("RECOVER requires agent ID and amount")

    amount = _parse_int(args[1])
    if amount is None:
        return _not_integer("Recovery amount", args[1])
    if amount < 0:
        return CommandResult.failure("Recovery amount cannot be negative")

    change = dispatcher.manager.recover_sanity(args[0], amount)
    return CommandResult.success("Sanity recovered", {"sanity": change.to_dict()})


def cmd_wound(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """WOUND <agentId> <damage> [injury...]"""
    if len(args) < 2:
        return CommandResult.failure("WOUND requires agent ID and damage")

    damage = _parse_int(args[1])
    if damage is None:
        return _not_integer("Damage", args[1])
    if damage < 0:
        return CommandResult.failure("Damage cannot be negative")

    change = dispatcher.manager.take_damage(args[0], damage, " ".join(args[2:]))
    return CommandResult.success(change.message, {"health": change.to_dict()})


def cmd_heal(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """HEAL <agentId> <amount>"""
    if len(args) < 2:
        return CommandResult.failure("HEAL requires agent ID and amount")

    amount = _parse_int(args[1])
    if amount is None:
        return _not_integer("Healing amount", args[1])
    if amount < 0:
        return CommandResult.failure("Healing amount cannot be negative")
    if dispatcher.manager.get_agent(args[0]).status == AgentStatus.DECEASED:
        return CommandResult.failure(f"Agent {args[0]} is deceased")

    change = dispatcher.manager.heal(args[0], amount)
    return CommandResult.success("Agent healed", {"health": change.to_dict()})


def cmd_team(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """TEAM <name> [agentIds...]"""
    if not args:
        return CommandResult.failure("TEAM requires a name")

    team = dispatcher.manager.create_team(name=args[0], member_ids=args[1:])
    return CommandResult.success(
        f"Team formed: {team.id}", {"team": team.model_dump(mode="json")},
    )


def cmd_dynamics(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """DYNAMICS <teamId> [morale=N] [cohesion=N] [casualty=N] [tactics=word]"""
    if not args:
        return CommandResult.failure("DYNAMICS requires a team ID")

    values: dict[str, object] = {}
    for pair in args[1:]:
        key, sep, raw = pair.partition("=")
        key = key.lower()
        if not sep or key not in DYNAMICS_KEYS:
            return CommandResult.failure(
                f"Unknown dynamics setting '{pair}'; use {', '.join(DYNAMICS_KEYS)} as key=value"
            )
        if key == "tactics":
            values[key] = raw
            continue
        number = _parse_int(raw)
        if number is None:
            return _not_integer(key, raw)
        values[key] = number

    try:
        update = TeamDynamicsUpdate(**values)
    except ValidationError as e:
        return CommandResult.failure(_validation_message(e))

    result = dispatcher.manager.manage_team_dynamics(args[0], update)
    return CommandResult.success("Team dynamics updated", {"dynamics": result.to_dict()})


def cmd_roll(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """ROLL <agentId> <skill> [difficulty]"""
    if len(args) < 2:
        return CommandResult.failure("ROLL requires agent ID and skill")

    difficulty = 50
    if len(args) > 2:
        difficulty = _parse_int(args[2])
        if difficulty is None:
            return _not_integer("Difficulty", args[2])

    agent = dispatcher.manager.get_agent(args[0])
    skills = {name.lower(): value for name, value in agent.skills.items()}
    skill = args[1]
    if skill.lower() not in skills:
        return CommandResult.failure(f"{agent.id} has no {skill} skill")

    check = skill_check(skill, skills[skill.lower()], difficulty, rng=dispatcher.rng)
    return CommandResult.success("Skill check resolved", {"check": check.to_dict()})


# -----------------------------------------------------------------------------
# Narrative
# -----------------------------------------------------------------------------

def cmd_brief(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """BRIEF <title> [objective...]"""
    if not args:
        return CommandResult.failure("BRIEF requires a mission title")

    mission = dispatcher.manager.generate_mission_briefing({
        "title": args[0],
        "objective": " ".join(args[1:]) or None,
    })
    return CommandResult.success(
        f"Mission briefed: {mission.id}", {"mission": mission.model_dump(mode="json")},
    )


def cmd_narrate(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """NARRATE <type> <content> [intensity]"""
    if len(args) < 2:
        return CommandResult.failure("NARRATE requires a type and content")

    kinds = [t.value for t in NarrativeType]
    kind = args[0].lower()
    if kind not in kinds:
        return CommandResult.failure(
            f"Unknown narrative type '{args[0]}'; use one of {', '.join(kinds)}"
        )

    intensity = None
    if len(args) > 2:
        intensity = _parse_int(args[2])
        if intensity is None:
            return _not_integer("Intensity", args[2])

    element = dispatcher.manager.inject_narrative({
        "type": kind,
        "content": args[1],
        "intensity": intensity,
    })
    return CommandResult.success(
        f"Narrative queued: {element.id}", {"narrative": element.model_dump(mode="json")},
    )


# -----------------------------------------------------------------------------
# System
# -----------------------------------------------------------------------------

def cmd_help(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    return CommandResult.success(
        "Help information",
        {"help": dispatcher.registry.help_text(args[0] if args else None)},
    )


def cmd_config(dispatcher: CommandDispatcher, args: list[str]) -> CommandResult:
    """Echo a configuration change. Nothing is persisted."""
    if not args:
        return CommandResult.failure("CONFIG requires a setting name")

    config = {
        "setting": args[0],
        "value": " ".join(args[1:]),
        "timestamp": _now(),
    }
    return CommandResult.success("Configuration updated", {"config": config})


# -----------------------------------------------------------------------------
# Registration
# -----------------------------------------------------------------------------

def build_registry() -> CommandRegistry:
    """A fresh registry with every DAS directive."""
    registry = CommandRegistry()
    field_ops = CommandCategory.FIELD
    reporting = CommandCategory.REPORTING
    threat = CommandCategory.THREAT
    roster = CommandCategory.ROSTER
    narrative = CommandCategory.NARRATIVE
    system = CommandCategory.SYSTEM

    for name, usage, description, category, handler in [
        ("INVESTIGATE", "<target> [details...]", "Initiate investigation directive", field_ops, cmd_investigate),
        ("ENGAGE", "<agentId> <threat> [modifiers...]", "Execute direct engagement", field_ops, cmd_engage),
        ("RETREAT", "<agentId> [reason]", "Order tactical withdrawal", field_ops, cmd_retreat),
        ("CONTAIN", "<objectType> <severity> [measures...]", "Activate containment", field_ops, cmd_contain),
        ("RESEARCH", "<subject> [parameters...]", "Conduct research operation", field_ops, cmd_research),
        ("STATUS", "[agentId]", "Get operational status", reporting, cmd_status),
        ("DEBRIEF", "<agentId> [observations...]", "Record agent debrief", reporting, cmd_debrief),
        ("REPORT", "[type] [details...]", "Generate operational report", reporting, cmd_report),
        ("ALERT", "<threatType> [location]", "Issue threat alert", threat, cmd_alert),
        ("ESCALATE", "[reason]", "Escalate threat level", threat, cmd_escalate),
        ("SANITIZE", "<target> [methods...]", "Initiate sanitization", field_ops, cmd_sanitize),
        ("HELP", "[command]", "Display help information", system, cmd_help),
        ("CONFIG", "<setting> [value...]", "Manage configuration", system, cmd_config),
        ("AGENT", "<name> [role] [sanity] [maxSanity]", "Register a field agent", roster, cmd_agent),
        ("SANITY", "<agentId> <delta> [reason...]", "Apply a sanity change", roster, cmd_sanity),
        ("RECOVER", "<agentId> <amount>", "Recover temporary sanity loss", roster, cmd_recover),
        ("WOUND", "<agentId> <damage> [injury...]", "Apply physical damage", roster, cmd_wound),
        ("HEAL", "<agentId> <amount>", "Restore physical health", roster, cmd_heal),
        ("TEAM", "<name> [agentIds...]", "Form an operational team", roster, cmd_team),
        ("DYNAMICS", "<teamId> [key=value...]", "Adjust team morale, cohesion, casualties", roster, cmd_dynamics),
        ("ROLL", "<agentId> <skill> [difficulty]", "Roll a d100 skill check", roster, cmd_roll),
        ("THREAT", "<name> [level] [type]", "Record a threat assessment", threat, cmd_threat),
        ("BRIEF", "<title> [objective...]", "Brief a new mission", narrative, cmd_brief),
        ("NARRATE", "<type> <content> [intensity]", "Queue a narrative element", narrative, cmd_narrate),
        ("CONTEXT", "[atmosphere] [briefingLevel]", "Build a context snapshot", narrative, cmd_context),
    ]:
        registry.add(name, usage, description, category)(handler)

    return registry
