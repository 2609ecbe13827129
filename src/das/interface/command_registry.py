"""
Command Registry for DAS.

Holds every directive the dispatcher can route, with its usage line and
category. The REPL completer, HELP and the dispatcher all read from the
same registry instance.

Registries are plain instances: build one with ``build_registry()`` (see
``commands.py``) and hand it to the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..state.schemas.response import CommandResult

if TYPE_CHECKING:
    from .dispatcher import CommandDispatcher


class CommandCategory(str, Enum):
    """Command categories for organized display."""
    FIELD = "Field Operations"
    REPORTING = "Reporting"
    THREAT = "Threat Management"
    ROSTER = "Roster"
    NARRATIVE = "Narrative"
    SYSTEM = "System"


CommandHandler = Callable[["CommandDispatcher", list[str]], CommandResult]


# -----------------------------------------------------------------------------
# Command Definition
# -----------------------------------------------------------------------------

@dataclass
class Command:
    """
    One directive: its upper-case name, argument synopsis for HELP, and the
    handler the dispatcher calls with (dispatcher, args). Aliases resolve to
    the same Command; hidden commands stay out of HELP and completion.
    """
    name: str
    usage: str
    description: str
    category: CommandCategory
    handler: CommandHandler
    aliases: list[str] = field(default_factory=list)
    hidden: bool = False

    @property
    def help_line(self) -> str:
        synopsis = f"{self.name} {self.usage}" if self.usage else self.name
        return f"{synopsis} - {self.description}"


# -----------------------------------------------------------------------------
# Fuzzy Matching
# -----------------------------------------------------------------------------

def fuzzy_match(pattern: str, text: str) -> tuple[bool, int]:
    """
    Subsequence match for command names. Returns (matched, score).

    A prefix beats any scattered match, and shorter names win among
    prefixes. Scattered matches score by how many pattern letters land
    next to the previous one.
    """
    needle, name = pattern.upper(), text.upper()
    if name.startswith(needle):
        return True, 1000 - len(name)

    score, last = 0, -2
    position = 0
    for letter in needle:
        found = name.find(letter, position)
        if found < 0:
            return False, 0
        score += 20 if found == last + 1 else 5
        last, position = found, found + 1
    return True, score


# -----------------------------------------------------------------------------
# Command Registry
# -----------------------------------------------------------------------------

class CommandRegistry:
    """
    Maps command names to Command definitions.

    Lookup is case-insensitive; names are stored upper-cased.
    """

    def __init__(self):
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Register a command and its aliases. Re-registering replaces."""
        command.name = command.name.upper()
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias.upper()] = command

    def add(
        self,
        name: str,
        usage: str,
        description: str,
        category: CommandCategory,
        aliases: list[str] | None = None,
        hidden: bool = False,
    ) -> Callable[[CommandHandler], CommandHandler]:
        """
        Decorator form of register():

            @registry.add("ALERT", "<threatType> [location]", "Issue threat alert",
                          CommandCategory.THREAT)
            def cmd_alert(dispatcher, args):
                ...
        """
        def decorator(fn: CommandHandler) -> CommandHandler:
            self.register(Command(
                name=name,
                usage=usage,
                description=description,
                category=category,
                handler=fn,
                aliases=aliases or [],
                hidden=hidden,
            ))
            return fn
        return decorator

    def get(self, name: str) -> Command | None:
        return self._commands.get(name.upper())

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._commands

    def all_commands(self) -> list[Command]:
        """Each command once, in registration order; aliases collapse."""
        unique = {id(cmd): cmd for cmd in self._commands.values()}
        return list(unique.values())

    def names(self) -> list[str]:
        return [cmd.name for cmd in self.all_commands()]

    def by_category(self) -> dict[CommandCategory, list[Command]]:
        """Visible commands grouped by category, in registration order."""
        grouped: dict[CommandCategory, list[Command]] = {cat: [] for cat in CommandCategory}
        for cmd in self.all_commands():
            if not cmd.hidden:
                grouped[cmd.category].append(cmd)
        return grouped

    def search(self, query: str) -> list[tuple[Command, int]]:
        """
        Fuzzy search over command names.

        Returns (command, score) tuples, best first.
        """
        results: list[tuple[Command, int]] = []
        for cmd in self.all_commands():
            if cmd.hidden:
                continue
            is_match, score = fuzzy_match(query, cmd.name)
            if is_match:
                results.append((cmd, score))
        results.sort(key=lambda x: (-x[1], x[0].name))
        return results

    def help_text(self, name: str | None = None) -> str:
        """Usage line for one command, or every visible command one per line."""
        if name:
            cmd = self.get(name)
            return cmd.help_line if cmd else "Command not found"
        return "\n".join(cmd.help_line for cmd in self.all_commands() if not cmd.hidden)


# -----------------------------------------------------------------------------
# Prompt-Toolkit Completer Integration
# -----------------------------------------------------------------------------

def create_completer(registry: CommandRegistry):
    """Create a prompt-toolkit Completer over the registry's command names."""
    from prompt_toolkit.completion import Completer, Completion

    class RegistryCompleter(Completer):
        def get_completions(self, document, complete_event):
            text = document.text_before_cursor.lstrip()

            # Only the command word is completed
            if " " in text:
                return

            for cmd, _score in registry.search(text):
                yield Completion(
                    cmd.name,
                    start_position=-len(text),
                    display_meta=cmd.description,
                )

    return RegistryCompleter()
