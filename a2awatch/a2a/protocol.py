"""Abstract A2A protocol client — the capability the task monitor depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod

from a2awatch.a2a.errors import UnsupportedOperationError
from a2awatch.a2a.models import A2AMessage, A2ATask, AgentCard
from a2awatch.types import AgentId, TaskId


class ProtocolClient(ABC):
    """Performs single A2A operations against a remote agent.

    Implementations return typed results or raise an ``A2AError`` (or
    ``TransportError`` for network failures). Cancelling the awaiting task
    must abort an in-flight call.
    """

    @abstractmethod
    async def get_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask: ...

    @abstractmethod
    async def list_tasks(
        self, agent_id: AgentId, filters: dict[str, str] | None = None,
    ) -> list[A2ATask]: ...

    @abstractmethod
    async def cancel_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask: ...

    @abstractmethod
    async def send_message(
        self, agent_id: AgentId, message: A2AMessage,
    ) -> A2AMessage: ...

    async def get_agent_card(self, agent_id: AgentId) -> AgentCard:
        """Fetch the agent's card. Optional; the default reports it unsupported."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot fetch agent cards"
        )
