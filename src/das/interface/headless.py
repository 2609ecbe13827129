"""
Headless runner for DAS.

Line-oriented JSON I/O for programmatic control.
Input: one directive per stdin line, either plain text
       (``ALERT entity "Lake Erie"``) or a JSON object
       (``{"command": "ALERT entity \"Lake Erie\""}``)
Output: one JSON response envelope per stdout line

Optionally, campaign events are written as ``{"type": "event", ...}``
lines ahead of the envelope they belong to.
"""

import json
import logging
import sys
from typing import TextIO

from ..state.event_bus import EventType, GameEvent
from ..state.schemas.response import CommandResponse, ErrorKind
from .dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)


class HeadlessRunner:
    """
    Headless DAS runner with JSON I/O.

    Every input line produces exactly one envelope; blank lines are
    skipped.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher | None = None,
        output: TextIO = sys.stdout,
        emit_events: bool = False,
    ):
        self.dispatcher = dispatcher or CommandDispatcher()
        self.output = output
        self.emit_events = emit_events

        if emit_events:
            self._subscribe_to_events()

    def _subscribe_to_events(self):
        """Subscribe to all events and emit them as JSON."""
        bus = self.dispatcher.manager.bus
        for event_type in EventType:
            bus.on(event_type, self._emit_event)

    def _emit_event(self, event: GameEvent):
        self._write_json({
            "type": "event",
            "event_type": event.type.value,
            "data": event.data,
            "campaign_id": event.campaign_id,
            "timestamp": event.timestamp.isoformat(),
        })

    def _write_json(self, obj: dict):
        """Write a JSON object to output followed by newline."""
        json.dump(obj, self.output, default=str)
        self.output.write("\n")
        self.output.flush()

    def handle_line(self, line: str) -> CommandResponse:
        """Decode one input line and dispatch it."""
        text = line.strip()
        if text.startswith("{"):
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as e:
                return CommandResponse.error_response(f"Invalid JSON: {e}", ErrorKind.VALIDATION)
            command = payload.get("command") if isinstance(payload, dict) else None
            if not isinstance(command, str):
                return CommandResponse.error_response(
                    "JSON input needs a string 'command' field", ErrorKind.VALIDATION,
                )
            text = command
        return self.dispatcher.process(text)

    def run(self, source: TextIO = sys.stdin) -> int:
        """
        Main loop: read directives, write envelopes. Exits on EOF.

        Returns the number of directives processed.
        """
        processed = 0
        for line in source:
            if not line.strip():
                continue
            response = self.handle_line(line)
            self._write_json(response.to_envelope())
            processed += 1
        logger.info(f"Headless session processed {processed} directive(s)")
        return processed


def run_headless(dispatcher: CommandDispatcher | None = None, emit_events: bool = False) -> int:
    """Entry point for headless mode."""
    return HeadlessRunner(dispatcher=dispatcher, emit_events=emit_events).run()
