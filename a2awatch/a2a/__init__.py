"""A2A (Agent-to-Agent) protocol client for a2awatch.

Talks to remote A2A agents (send messages, fetch/list/cancel tasks, fetch
agent cards) and tracks remote tasks until they finish.
"""

from a2awatch.a2a.client import A2AClient
from a2awatch.a2a.errors import (
    A2AError,
    AgentNotFoundError,
    AuthenticationRequiredError,
    ErrorCode,
    InternalError,
    TaskNotCancelableError,
    TaskNotFoundError,
    is_transient,
)
from a2awatch.a2a.models import (
    A2AArtifact,
    A2AMessage,
    A2ATask,
    AgentCard,
    TaskStatus,
    is_terminal,
)
from a2awatch.a2a.monitor import MonitorState, TaskMonitor
from a2awatch.a2a.protocol import ProtocolClient
from a2awatch.a2a.sender import MessageSender

__all__ = [
    "A2AArtifact",
    "A2AClient",
    "A2AError",
    "A2AMessage",
    "A2ATask",
    "AgentCard",
    "AgentNotFoundError",
    "AuthenticationRequiredError",
    "ErrorCode",
    "InternalError",
    "MessageSender",
    "MonitorState",
    "ProtocolClient",
    "TaskMonitor",
    "TaskNotCancelableError",
    "TaskNotFoundError",
    "TaskStatus",
    "is_terminal",
    "is_transient",
]
