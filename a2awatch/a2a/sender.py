"""Message sender — validated, retried and broadcast message delivery."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from a2awatch.a2a.errors import A2AError, ErrorCode, UnsupportedOperationError
from a2awatch.a2a.models import A2AContext, A2AMessage, A2APayload
from a2awatch.a2a.protocol import ProtocolClient
from a2awatch.exceptions import RetriesExhaustedError, TransportError
from a2awatch.types import AgentId, new_id

_logger = logging.getLogger(__name__)

# Send failures worth another attempt. Narrower than "transient" for the
# monitor: an execution failure may succeed on a fresh send.
RETRYABLE_CODES = frozenset({
    ErrorCode.INTERNAL_ERROR,
    ErrorCode.AGENT_EXECUTION_FAILED,
})


class MessageSender:
    """Sends messages to remote agents through a ``ProtocolClient``.

    If the client can fetch agent cards (``get_agent_card``), the target
    agent is looked up before each send so an unknown agent fails with
    ``AgentNotFoundError`` rather than a generic request error. Clients
    that report the lookup as unsupported skip the check.
    """

    def __init__(
        self,
        client: ProtocolClient,
        max_retries: int = 3,
        backoff: float = 0.5,
        sender_id: str = "a2awatch",
    ) -> None:
        self._client = client
        self._sender_id = sender_id
        self._max_retries = max_retries
        self._backoff = backoff

    async def send(self, agent_id: AgentId, message: A2AMessage) -> A2AMessage:
        try:
            await self._client.get_agent_card(agent_id)
        except UnsupportedOperationError:
            _logger.debug("Client cannot fetch cards; sending to %s unchecked", agent_id)
        return await self._client.send_message(agent_id, message)

    async def send_with_retry(
        self,
        agent_id: AgentId,
        message: A2AMessage,
        max_retries: int | None = None,
    ) -> A2AMessage:
        """Send, retrying retryable failures with a linear backoff.

        Makes at most ``max_retries + 1`` attempts.
        """
        retries = self._max_retries if max_retries is None else max_retries
        last_error: Exception | None = None

        for attempt in range(retries + 1):
            if attempt:
                await asyncio.sleep(self._backoff * attempt)
            try:
                return await self.send(agent_id, message)
            except A2AError as exc:
                if exc.code not in RETRYABLE_CODES:
                    raise
                last_error = exc
            except TransportError as exc:
                last_error = exc
            _logger.debug(
                "Send to %s failed (attempt %d/%d): %s",
                agent_id, attempt + 1, retries + 1, last_error,
            )

        _logger.warning("Giving up on %s after %d attempts", agent_id, retries + 1)
        raise RetriesExhaustedError(
            f"Failed to send message to {agent_id} after {retries} retries: {last_error}"
        ) from last_error

    async def broadcast(
        self, agent_ids: list[AgentId], message: A2AMessage,
    ) -> tuple[dict[AgentId, A2AMessage], dict[AgentId, Exception]]:
        """Send one message to many agents concurrently.

        Returns ``(responses, errors)`` keyed by agent id; every agent
        appears in exactly one of the two.
        """
        results = await asyncio.gather(
            *(self.send(agent_id, message) for agent_id in agent_ids),
            return_exceptions=True,
        )
        responses: dict[AgentId, A2AMessage] = {}
        errors: dict[AgentId, Exception] = {}
        for agent_id, result in zip(agent_ids, results):
            if isinstance(result, Exception):
                errors[agent_id] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                responses[agent_id] = result
        return responses, errors

    # ── Structured requests ──────────────────────────────────

    async def send_structured(
        self,
        agent_id: AgentId,
        method: str,
        params: dict[str, Any] | None = None,
        conversation_id: str | None = None,
    ) -> A2AMessage:
        """Build a request message for ``method`` and send it with retries.

        A new conversation is started unless ``conversation_id`` is given.
        """
        message_id = new_id()
        message = A2AMessage(
            id=message_id,
            context=A2AContext(
                sender=self._sender_id,
                to=agent_id,
                conversation_id=conversation_id or new_id(),
                message_id=message_id,
            ),
            payload=A2APayload(method=method, params=params or {}),
        )
        return await self.send_with_retry(agent_id, message)

    async def execute_agent(self, agent_id: AgentId, command: str) -> A2AMessage:
        return await self.send_structured(agent_id, "execute-agent", {"command": command})

    async def request_status(self, agent_id: AgentId) -> A2AMessage:
        return await self.send_structured(agent_id, "status")

    async def list_agents(self, agent_id: AgentId) -> A2AMessage:
        """Ask ``agent_id`` for the agents it knows about."""
        return await self.send_structured(agent_id, "list-agents")
