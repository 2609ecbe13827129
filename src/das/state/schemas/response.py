"""
Command result and response envelope.

Handlers return a CommandResult: an explicit success-or-typed-error value.
The dispatcher turns every result (and every fault it catches) into a
CommandResponse, the uniform envelope every caller receives.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ResponseStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ErrorKind(str, Enum):
    VALIDATION = "validation"            # Missing or malformed argument, no mutation
    NOT_FOUND = "not_found"              # Referenced entity id absent
    UNKNOWN_COMMAND = "unknown_command"  # Unregistered command name
    INTERNAL = "internal"                # Unexpected handler fault


class CommandResult(BaseModel):
    """What a command handler returns."""
    ok: bool
    message: str
    data: dict[str, Any] | None = None
    error: ErrorKind | None = None

    @classmethod
    def success(cls, message: str, data: dict[str, Any] | None = None) -> "CommandResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, kind: ErrorKind = ErrorKind.VALIDATION) -> "CommandResult":
        return cls(ok=False, message=message, error=kind)


class CommandResponse(BaseModel):
    """
    Uniform response envelope.

    Serializes to exactly ``{status, message, data, timestamp}``; the error
    kind is kept for in-process callers and tests.
    """
    status: ResponseStatus
    message: str
    data: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    error: ErrorKind | None = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.status == ResponseStatus.SUCCESS

    @classmethod
    def from_result(cls, result: CommandResult) -> "CommandResponse":
        return cls(
            status=ResponseStatus.SUCCESS if result.ok else ResponseStatus.ERROR,
            message=result.message,
            data=result.data,
            error=result.error,
        )

    @classmethod
    def error_response(cls, message: str, kind: ErrorKind) -> "CommandResponse":
        return cls(status=ResponseStatus.ERROR, message=message, error=kind)

    def to_envelope(self) -> dict[str, Any]:
        """JSON-ready envelope for transports."""
        return self.model_dump(mode="json")


class AuditEntry(BaseModel):
    """One line of the dispatcher's bounded audit log."""
    timestamp: datetime = Field(default_factory=datetime.now)
    command: str
    args: list[str] = Field(default_factory=list)
    status: ResponseStatus
