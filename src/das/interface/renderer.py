"""
Display and rendering helpers for the DAS CLI.

Handles theming, the banner, and turning response envelopes into
panels and tables.
"""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from prompt_toolkit.styles import Style as PTStyle

from ..state.schema import AlertLevel
from ..state.schemas.response import CommandResponse
from .command_registry import CommandRegistry


# Shared console instance
console = Console()

# -----------------------------------------------------------------------------
# Theme: field-office terminal, green on black
# -----------------------------------------------------------------------------

THEME = {
    "primary": "green4",            # Delta Green
    "secondary": "grey70",          # redacted paper
    "warning": "dark_goldenrod",    # elevated
    "danger": "dark_red",           # critical, errors
    "accent": "cyan",               # interface highlights
    "dim": "dim",                   # background text
    "text": "grey85",               # standard body text
}

ALERT_COLORS = {
    AlertLevel.NORMAL: THEME["primary"],
    AlertLevel.ELEVATED: THEME["warning"],
    AlertLevel.CRITICAL: THEME["danger"],
}

pt_style = PTStyle.from_dict({
    "completion-menu.completion": "bg:#12301a #c0c0c0",
    "completion-menu.completion.current": "bg:#2f6b3a #ffffff bold",
    "completion-menu.meta.completion": "bg:#12301a #808080",
    "completion-menu.meta.completion.current": "bg:#2f6b3a #c0c0c0",
})

BANNER = r"""
 ____    _    ____
|  _ \  / \  / ___|
| | | |/ _ \ \___ \
| |_| / ___ \ ___) |
|____/_/   \_\____/
"""


def show_banner():
    console.print(f"[bold {THEME['primary']}]{BANNER}[/bold {THEME['primary']}]")
    console.print(f"[{THEME['dim']}]Delta Green Administration System[/{THEME['dim']}]\n")


def show_help(registry: CommandRegistry):
    """Commands grouped by category."""
    for category, commands in registry.by_category().items():
        if not commands:
            continue
        table = Table(
            title=f"[bold {THEME['primary']}]{category.value}[/bold {THEME['primary']}]",
            show_header=False,
            box=None,
            title_justify="left",
        )
        table.add_column("Command", style=THEME["accent"])
        table.add_column("Description", style=THEME["secondary"])
        for cmd in commands:
            table.add_row(f"{cmd.name} {cmd.usage}".strip(), cmd.description)
        console.print(table)
        console.print()


def render_alert_level(level: AlertLevel) -> str:
    color = ALERT_COLORS[level]
    return f"[bold {color}]{level.value}[/bold {color}]"


def render_response(response: CommandResponse, verbose: bool = False):
    """Print a response envelope as a panel, with the payload when asked."""
    if response.ok:
        border = THEME["primary"]
        title = f"[bold {THEME['primary']}]SUCCESS[/bold {THEME['primary']}]"
    else:
        border = THEME["danger"]
        title = f"[bold {THEME['danger']}]ERROR[/bold {THEME['danger']}]"

    body = response.message
    data = response.to_envelope()["data"]

    # HELP payload reads better as plain lines
    if data and set(data) == {"help"}:
        body = f"{body}\n\n{data['help']}"
    elif data and verbose:
        body = f"{body}\n\n[{THEME['dim']}]{json.dumps(data, indent=2)}[/{THEME['dim']}]"

    console.print(Panel(
        body,
        title=title,
        subtitle=f"[{THEME['dim']}]{response.timestamp:%H:%M:%S}[/{THEME['dim']}]",
        border_style=border,
    ))


def show_status(dispatcher):
    """Alert level, roster and teams at a glance."""
    manager = dispatcher.manager

    table = Table(show_header=False, box=None)
    table.add_column("Key", style=THEME["dim"])
    table.add_column("Value", style=THEME["secondary"])
    table.add_row("Campaign", manager.campaign_id)
    table.add_row("Alert level", render_alert_level(dispatcher.threat_level))
    table.add_row("Open operations", str(len(dispatcher.operations)))
    current = manager.get_current_mission()
    table.add_row("Mission", current.title if current else "None")
    console.print(table)

    agents = manager.get_all_agents()
    if agents:
        roster = Table(title="Roster", title_justify="left")
        roster.add_column("ID", style=THEME["dim"])
        roster.add_column("Name")
        roster.add_column("Sanity", justify="right")
        roster.add_column("Health", justify="right")
        roster.add_column("Status")
        for agent in agents:
            color = THEME["danger"] if agent.sanity < agent.max_sanity * 0.25 else THEME["text"]
            roster.add_row(
                agent.id,
                agent.name,
                f"[{color}]{agent.sanity}/{agent.max_sanity}[/{color}]",
                f"{agent.health.current}/{agent.health.maximum}",
                agent.status.value,
            )
        console.print(roster)

    teams = manager.get_all_teams()
    if teams:
        team_table = Table(title="Teams", title_justify="left")
        team_table.add_column("ID", style=THEME["dim"])
        team_table.add_column("Name")
        team_table.add_column("Morale", justify="right")
        team_table.add_column("Cohesion", justify="right")
        team_table.add_column("Status")
        for team in teams:
            team_table.add_row(
                team.id, team.name, str(team.morale), str(team.cohesion), team.status.value,
            )
        console.print(team_table)
