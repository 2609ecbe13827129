"""
Typed contracts for DAS.

- updates: closed tagged union of agent status updates, team dynamics input
- response: handler results, the response envelope, audit entries
"""

from .updates import (
    AdjustSanity,
    SetStatus,
    SetStress,
    SetRole,
    SetNotes,
    SetEquipment,
    StatusUpdate,
    TeamDynamicsUpdate,
    parse_updates,
    updates_from_mapping,
)
from .response import (
    AuditEntry,
    CommandResponse,
    CommandResult,
    ErrorKind,
    ResponseStatus,
)

__all__ = [
    # Updates
    "AdjustSanity",
    "SetStatus",
    "SetStress",
    "SetRole",
    "SetNotes",
    "SetEquipment",
    "StatusUpdate",
    "TeamDynamicsUpdate",
    "parse_updates",
    "updates_from_mapping",
    # Responses
    "AuditEntry",
    "CommandResponse",
    "CommandResult",
    "ErrorKind",
    "ResponseStatus",
]
