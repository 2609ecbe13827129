"""
Narrative queue for DAS.

Four ordered, append-only lists (scenes, atmosphere, clues, revelations).
Elements start undelivered; delivery is a one-way latch.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..state.schema import NarrativeElement, NarrativeType, clamp
from ..state.store import NotFoundError


INTENSITY_MIN = 1
INTENSITY_MAX = 10
DEFAULT_INTENSITY = 5


class NarrativeState(BaseModel):
    """Counts per list, the latest scene, and everything still pending."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scenes: int = 0
    atmosphere: int = 0
    clues: int = 0
    revelations: int = 0
    recent_scene: NarrativeElement | None = None
    pending_narrative: list[NarrativeElement] = Field(default_factory=list)


class NarrativeQueue:
    """
    Routes narrative elements by type.

    Pending order is list-append order across lists: all scenes, then
    atmosphere, then clues, then revelations.
    """

    def __init__(self):
        self.scenes: list[NarrativeElement] = []
        self.atmosphere: list[NarrativeElement] = []
        self.clues: list[NarrativeElement] = []
        self.revelations: list[NarrativeElement] = []

    def _list_for(self, narrative_type: NarrativeType) -> list[NarrativeElement]:
        return {
            NarrativeType.SCENE: self.scenes,
            NarrativeType.ATMOSPHERE: self.atmosphere,
            NarrativeType.CLUE: self.clues,
            NarrativeType.REVELATION: self.revelations,
        }[narrative_type]

    def inject(self, narrative: dict[str, Any] | NarrativeElement) -> NarrativeElement:
        """
        Queue a narrative element.

        Dict input is validated (unknown types raise a pydantic
        ValidationError). Intensity is clamped to 1-10 and the element
        always starts undelivered.
        """
        if isinstance(narrative, NarrativeElement):
            data = narrative.model_dump()
        else:
            data = dict(narrative)

        intensity = data.get("intensity")
        data["intensity"] = clamp(
            DEFAULT_INTENSITY if intensity is None else intensity,
            INTENSITY_MIN,
            INTENSITY_MAX,
        )
        data["delivered"] = False

        element = NarrativeElement.model_validate(data)
        self._list_for(element.type).append(element)
        return element

    def all_elements(self) -> list[NarrativeElement]:
        return [*self.scenes, *self.atmosphere, *self.clues, *self.revelations]

    def pending(self) -> list[NarrativeElement]:
        return [e for e in self.all_elements() if not e.delivered]

    def get(self, element_id: str) -> NarrativeElement:
        for element in self.all_elements():
            if element.id == element_id:
                return element
        raise NotFoundError("Narrative element", element_id)

    def mark_delivered(self, element_id: str) -> NarrativeElement:
        element = self.get(element_id)
        element.mark_delivered()
        return element

    def deliver_pending(self) -> list[NarrativeElement]:
        """Latch every pending element. Returns what was delivered."""
        delivered = self.pending()
        for element in delivered:
            element.mark_delivered()
        return delivered

    def state(self) -> NarrativeState:
        return NarrativeState(
            scenes=len(self.scenes),
            atmosphere=len(self.atmosphere),
            clues=len(self.clues),
            revelations=len(self.revelations),
            recent_scene=self.scenes[-1] if self.scenes else None,
            pending_narrative=self.pending(),
        )

    def clear(self) -> None:
        self.scenes.clear()
        self.atmosphere.clear()
        self.clues.clear()
        self.revelations.clear()

    def __len__(self) -> int:
        return len(self.scenes) + len(self.atmosphere) + len(self.clues) + len(self.revelations)
