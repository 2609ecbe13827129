"""
Command dispatch for DAS.

Turns a line of directive text into a CommandResponse:

    tokenize -> resolve (case-insensitive) -> handler -> envelope

Handlers validate their own arguments and return a CommandResult before
touching state. Anything a handler raises is caught here: a missing
entity becomes an ERROR carrying the lookup message, and any other fault
becomes "Command execution failed: <reason>". Raised faults never reach
the audit log; only handlers that return normally are audited.
"""

from __future__ import annotations

import logging
import random
import re
import string
from collections import deque
from datetime import datetime

from ..context.builder import ContextBuilder
from ..state.event_bus import EventType
from ..state.manager import CampaignManager
from ..state.schema import AlertLevel
from ..state.schemas.response import AuditEntry, CommandResponse, ErrorKind
from ..state.store import NotFoundError
from ..systems.threat import AlertTransition, ThreatEscalation
from .command_registry import CommandRegistry
from .commands import build_registry
from .config import DEFAULT_CONFIG, Config

logger = logging.getLogger(__name__)


# A bare run of non-space, non-quote characters, or a quoted run
TOKEN_PATTERN = re.compile(r'[^\s"]+|"([^"]*)"')

_ID_ALPHABET = string.ascii_lowercase + string.digits


def tokenize(text: str) -> list[str]:
    """
    Split directive text into tokens.

        >>> tokenize('ENGAGE A1 "giant squid" loud')
        ['ENGAGE', 'A1', 'giant squid', 'loud']
    """
    return [
        match.group(1) if match.group(1) is not None else match.group(0)
        for match in TOKEN_PATTERN.finditer(text)
    ]


class CommandDispatcher:
    """
    Routes directives to handlers over one campaign.

    Owns the global alert level, the operations ledger (open
    investigations and research), the audit log and a context builder.
    Not thread-safe: callers serialize access.
    """

    def __init__(
        self,
        manager: CampaignManager | None = None,
        registry: CommandRegistry | None = None,
        config: Config | None = None,
        rng: random.Random | None = None,
    ):
        self.config: Config = {**DEFAULT_CONFIG, **(config or {})}
        self.rng = rng
        self.manager = manager or CampaignManager(
            rng=rng,
            mission_log_limit=self.config["mission_log_limit"],
        )
        self.registry = registry or build_registry()

        self.escalation = ThreatEscalation(
            stands_down_critical=self.config["alert_stands_down_critical"],
        )
        self.operations: dict[str, dict] = {}
        self.audit: deque[AuditEntry] = deque(maxlen=self.config["audit_log_limit"])
        self.context = ContextBuilder(
            self.manager,
            history_limit=self.config["context_history_limit"],
        )

    @property
    def threat_level(self) -> AlertLevel:
        return self.escalation.level

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def process(self, text: str) -> CommandResponse:
        """Process one line of directive text. Always returns an envelope."""
        stripped = (text or "").strip()
        if not stripped:
            return CommandResponse.error_response("No command provided", ErrorKind.VALIDATION)

        tokens = tokenize(stripped)
        name = tokens[0].upper() if tokens else ""
        args = tokens[1:]

        command = self.registry.get(name) if name else None
        if command is None:
            logger.warning(f"Unknown command: {name}")
            return CommandResponse.error_response(
                f"Unknown command: {name}", ErrorKind.UNKNOWN_COMMAND,
            )

        try:
            result = command.handler(self, args)
        except NotFoundError as e:
            logger.warning(f"{command.name}: {e}")
            return CommandResponse.error_response(str(e), ErrorKind.NOT_FOUND)
        except Exception as e:
            logger.exception(f"Command {command.name} raised")
            return CommandResponse.error_response(
                f"Command execution failed: {e}", ErrorKind.INTERNAL,
            )

        response = CommandResponse.from_result(result)
        self.audit.append(AuditEntry(command=command.name, args=list(args), status=response.status))
        if not response.ok:
            logger.warning(f"{command.name} rejected: {response.message}")

        self.manager.bus.emit(
            EventType.COMMAND_DISPATCHED,
            campaign_id=self.manager.campaign_id,
            command=command.name,
            status=response.status.value,
        )
        return response

    def recent_actions(self, count: int | None = None) -> list[AuditEntry]:
        """The newest audit entries, oldest first."""
        count = self.config["recent_actions"] if count is None else count
        if count <= 0:
            return []
        return list(self.audit)[-count:]

    # -------------------------------------------------------------------------
    # Helpers for handlers
    # -------------------------------------------------------------------------

    def generate_id(self) -> str:
        """Operation record id: DG-<epoch ms>-<9 random base36 chars>."""
        source = self.rng or random
        suffix = "".join(source.choice(_ID_ALPHABET) for _ in range(9))
        return f"DG-{int(datetime.now().timestamp() * 1000)}-{suffix}"

    def record_alert(self, transition: AlertTransition | None) -> AlertTransition | None:
        """Publish an alert-level transition if it changed anything."""
        if transition is not None and transition.changed:
            self.manager.bus.emit(
                EventType.ALERT_LEVEL_CHANGED,
                campaign_id=self.manager.campaign_id,
                **transition.to_dict(),
            )
        return transition
