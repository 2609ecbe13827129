"""
Typed update operations for agents and teams.

Status updates are a closed tagged union: each operation is validated when
it is constructed, so applying a list of updates never has to guess what a
key means. The ``op`` field is the discriminator.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from ..schema import AgentStatus


class AdjustSanity(BaseModel):
    """Apply a sanity delta through the sanity system."""
    op: Literal["adjust_sanity"] = "adjust_sanity"
    delta: int
    reason: str = ""


class SetStatus(BaseModel):
    op: Literal["set_status"] = "set_status"
    status: AgentStatus


class SetStress(BaseModel):
    """Set stress level. Out-of-range values are clamped to 0-100 on apply."""
    op: Literal["set_stress"] = "set_stress"
    level: int


class SetRole(BaseModel):
    op: Literal["set_role"] = "set_role"
    role: str = Field(min_length=1)


class SetNotes(BaseModel):
    op: Literal["set_notes"] = "set_notes"
    notes: str


class SetEquipment(BaseModel):
    op: Literal["set_equipment"] = "set_equipment"
    items: list[str]


StatusUpdate = Annotated[
    Union[AdjustSanity, SetStatus, SetStress, SetRole, SetNotes, SetEquipment],
    Field(discriminator="op"),
]

_UPDATES_ADAPTER = TypeAdapter(list[StatusUpdate])

# Plain-key form accepted from rosters and tools: key -> (model, field)
_KEY_TO_UPDATE: dict[str, tuple[type[BaseModel], str]] = {
    "sanity": (AdjustSanity, "delta"),
    "status": (SetStatus, "status"),
    "stressLevel": (SetStress, "level"),
    "stress_level": (SetStress, "level"),
    "role": (SetRole, "role"),
    "notes": (SetNotes, "notes"),
    "equipment": (SetEquipment, "items"),
}


def parse_updates(raw: list[dict[str, Any]]) -> list[StatusUpdate]:
    """Validate a list of ``{"op": ..., ...}`` dicts into typed updates."""
    return _UPDATES_ADAPTER.validate_python(raw)


def updates_from_mapping(mapping: dict[str, Any]) -> list[StatusUpdate]:
    """
    Convert a flat ``{"sanity": -5, "status": "injured"}`` mapping.

    Keys are processed in mapping order. Unknown keys raise ValueError
    before anything is built, so a bad mapping produces no updates.
    """
    unknown = [key for key in mapping if key not in _KEY_TO_UPDATE]
    if unknown:
        raise ValueError(f"Unsupported status update field(s): {', '.join(unknown)}")

    updates: list[StatusUpdate] = []
    for key, value in mapping.items():
        model, field_name = _KEY_TO_UPDATE[key]
        updates.append(model(**{field_name: value}))
    return updates


class TeamDynamicsUpdate(BaseModel):
    """
    One application of team dynamics.

    Casualties are counted, never refunded, so the delta must be >= 0.
    """
    morale: int | None = None
    cohesion: int | None = None
    casualty: int = Field(default=0, ge=0)
    tactics: str | None = None
