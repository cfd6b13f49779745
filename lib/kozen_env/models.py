"""Request-scoped data models for environment exposure.

These models describe one exposure call from input to outcome:
- ExposureRequest: the caller's key/value content plus prefix and flow id
- SanitizedVariable: a shell-safe key and a bounded, escaped value
- CommandResult: structured output of one external command
- PersistenceOutcome / ExposureReport: what was persisted, and how
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from . import codec
from .errors import InvalidInputError


class PersistenceScope(str, Enum):
    """How long an exposed variable outlives the current shell session."""

    GLOBAL = "GLOBAL"
    LOCAL = "LOCAL"

    @classmethod
    def parse(cls, raw: str | None) -> PersistenceScope:
        """Parse a scope name case-insensitively. Empty or unset means GLOBAL.

        Raises ValueError for any other value.
        """
        if raw is None or not raw.strip():
            return cls.GLOBAL
        return cls(raw.strip().upper())


class ExposureRequest(BaseModel):
    """A mapping of variables to expose, with optional namespace and flow id."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: dict[str, Any] = Field(..., description="Raw key/value pairs to expose")
    prefix: str | None = Field(
        default=None, description="Namespace override for this call only"
    )
    flow: str | None = Field(
        default=None, description="Correlation id passed through to log records"
    )

    @classmethod
    def build(
        cls,
        content: Any,
        prefix: str | None = None,
        flow: str | None = None,
    ) -> ExposureRequest:
        """Validate raw content and snapshot it into a request.

        Raises InvalidInputError unless content is a non-null mapping.
        """
        if content is None or not isinstance(content, Mapping):
            raise InvalidInputError(
                "Invalid content provided. Expected a key/value mapping, "
                f"got {type(content).__name__}."
            )
        snapshot = codec.clone({str(k): v for k, v in content.items()})
        return cls(content=snapshot, prefix=prefix, flow=flow)


class SanitizedVariable(BaseModel):
    """A variable ready to be embedded in a shell command."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(
        ...,
        min_length=1,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Namespaced variable name, safe to use unquoted",
    )
    value: str = Field(..., description="Escaped, whitespace-collapsed, bounded value")


class CommandResult(BaseModel):
    """Structured result from one external command."""

    stdout: str = Field(default="", description="Standard output")
    stderr: str = Field(default="", description="Standard error")
    exit_code: int = Field(..., description="Process exit code")
    timed_out: bool = Field(default=False, description="Whether the command timed out")
    duration_ms: int = Field(
        default=0, description="Wall-clock duration in milliseconds"
    )


class PersistenceOutcome(BaseModel):
    """A variable that was persisted successfully."""

    key: str = Field(..., description="Sanitized variable name")
    backend: str = Field(..., description="Persistence variant that handled it")
    command: str = Field(..., description="The command that was run")
    exit_code: int = Field(default=0, description="Process exit code")
    duration_ms: int = Field(default=0, description="Command duration in milliseconds")


class ExposureReport(BaseModel):
    """Summary of one successful exposure call."""

    os: str = Field(..., description="Detected operating system")
    scope: PersistenceScope = Field(..., description="Scope used for this call")
    flow: str | None = Field(default=None, description="Caller correlation id")
    outcomes: list[PersistenceOutcome] = Field(default_factory=list)
    skipped: list[str] = Field(
        default_factory=list, description="Raw keys skipped for having a falsy value"
    )
