"""A2A protocol data models — follows the A2A v0.3 task/message layout.

Covers Tasks, Artifacts, Messages, Agent Cards and the wire shape of
protocol errors.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from a2awatch.types import new_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Task status ──────────────────────────────────────────────


class TaskStatus(str, Enum):
    """A2A task lifecycle states."""

    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset({
    TaskStatus.SUCCEEDED,
    TaskStatus.FAILED,
    TaskStatus.CANCELLED,
    TaskStatus.EXPIRED,
})


def is_terminal(status: TaskStatus | str) -> bool:
    """Return True if no further transition can follow ``status``."""
    try:
        return TaskStatus(status) in TERMINAL_STATUSES
    except ValueError:
        return False


# ── Errors on the wire ───────────────────────────────────────


class ErrorDetail(BaseModel):
    """Wire shape of a protocol error: ``{code, message, data?}``."""

    code: int
    message: str = ""
    data: Any = None


# ── Messages ─────────────────────────────────────────────────


class A2AContext(BaseModel):
    """Routing context carried by every message."""

    sender: str = Field(default="", alias="from")
    to: str = ""
    conversation_id: str = ""
    message_id: str = ""

    model_config = {"populate_by_name": True}


class A2APayload(BaseModel):
    method: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    error: ErrorDetail | None = None


class A2AMessage(BaseModel):
    """A single protocol message exchanged with an agent."""

    protocol: str = "a2a"
    version: str = "0.3.0"
    id: str = Field(default_factory=new_id)
    type: str = "request"  # "request" | "response" | "error" | "stream"
    timestamp: datetime = Field(default_factory=_utcnow)
    in_response_to: str = Field(default="", alias="inResponseTo")
    context: A2AContext | None = None
    payload: A2APayload | None = None

    model_config = {"populate_by_name": True}


# ── Tasks ─────────────────────────────────────────────────────


class A2AArtifact(BaseModel):
    """A tangible output produced by a task."""

    id: str
    type: str = ""
    description: str = ""
    uri: str = ""
    size: int | None = None
    hash: str | None = None


class A2ATask(BaseModel):
    """A read-only snapshot of one unit of remote work.

    The remote agent owns the authoritative task; every poll yields a
    freshly parsed snapshot.
    """

    id: str
    status: TaskStatus = TaskStatus.CREATED
    messages: list[A2AMessage] = Field(default_factory=list)
    artifacts: list[A2AArtifact] = Field(default_factory=list)
    history: list[A2AMessage] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    modified_at: datetime | None = Field(default=None, alias="modifiedAt")

    model_config = {"populate_by_name": True}

    @field_validator("created_at", "modified_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # Timestamps without an offset are taken as UTC so the two compare.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _check_timestamps(self) -> A2ATask:
        if (
            self.created_at is not None
            and self.modified_at is not None
            and self.modified_at < self.created_at
        ):
            raise ValueError("modifiedAt must not precede createdAt")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


# ── Agent Card ────────────────────────────────────────────────


class AgentCapabilities(BaseModel):
    """Protocol features the agent supports."""

    supported_methods: list[str] = Field(default_factory=list)
    max_input_size: int = 0
    max_output_size: int = 0
    streaming_support: bool = False
    concurrent_execution: bool = False
    supported_content_types: list[str] = Field(default_factory=list)


class AgentCard(BaseModel):
    """Extended A2A Agent Card — the identity document of an agent."""

    id: str = ""
    name: str
    description: str = ""
    version: str = "1.0.0"
    protocols: dict[str, Any] = Field(default_factory=dict)
    capabilities: AgentCapabilities = Field(default_factory=AgentCapabilities)
    endpoints: dict[str, str] = Field(default_factory=dict)
    supported_output_modes: list[str] = Field(
        default_factory=list, alias="supportedOutputModes",
    )
    supports_authenticated_extended_card: bool = Field(
        default=False, alias="supportsAuthenticatedExtendedCard",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}
