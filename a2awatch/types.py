"""Core types shared across a2awatch subsystems."""

from __future__ import annotations

import uuid
from typing import TypeAlias

# ── ID Types ──────────────────────────────────────────────────────────────────

AgentId: TypeAlias = str
TaskId: TypeAlias = str
MessageId: TypeAlias = str


def new_id() -> str:
    return uuid.uuid4().hex[:12]
