"""Shared test fixtures — FakeProtocolClient for testing without HTTP calls."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from a2awatch.a2a.errors import AgentNotFoundError
from a2awatch.a2a.models import A2AMessage, A2ATask, AgentCard, TaskStatus
from a2awatch.a2a.protocol import ProtocolClient

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_task(
    status: TaskStatus | str = TaskStatus.RUNNING,
    task_id: str = "task-1",
    **kwargs,
) -> A2ATask:
    kwargs.setdefault("created_at", T0)
    kwargs.setdefault("modified_at", T0 + timedelta(seconds=5))
    return A2ATask(id=task_id, status=TaskStatus(status), **kwargs)


class FakeProtocolClient(ProtocolClient):
    """Protocol client that replays a script of tasks/errors. No network.

    Each ``get_task`` consumes the next script entry; once the script runs
    out the last entry repeats. Entries that are exceptions are raised.
    """

    def __init__(self, script: list | None = None, delay: float = 0.0):
        self._script = list(script or [make_task(TaskStatus.SUCCEEDED)])
        self._delay = delay
        self.calls: list[dict] = []  # record all calls for assertions
        self.in_flight = 0
        self.max_in_flight = 0
        self.poll_times: list[tuple[float, float]] = []
        self.missing_agents: set[str] = set()
        self.send_script: list = []
        self.sent: list[tuple[str, A2AMessage]] = []
        self.closed = False

    async def get_task(self, agent_id, task_id):
        self.calls.append({"op": "get_task", "agent_id": agent_id, "task_id": task_id})
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        started = time.monotonic()
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            index = min(len(self.get_calls) - 1, len(self._script) - 1)
            entry = self._script[index]
        finally:
            self.in_flight -= 1
            self.poll_times.append((started, time.monotonic()))
        if isinstance(entry, BaseException):
            raise entry
        return entry.model_copy(deep=True)

    async def list_tasks(self, agent_id, filters=None):
        self.calls.append({"op": "list_tasks", "agent_id": agent_id, "filters": filters})
        tasks = [e for e in self._script if isinstance(e, A2ATask)]
        status = (filters or {}).get("status")
        return [t for t in tasks if status is None or t.status.value == status]

    async def cancel_task(self, agent_id, task_id):
        self.calls.append({"op": "cancel_task", "agent_id": agent_id, "task_id": task_id})
        return make_task(TaskStatus.CANCELLED, task_id=task_id)

    async def send_message(self, agent_id, message):
        self.calls.append({"op": "send_message", "agent_id": agent_id})
        self.sent.append((agent_id, message))
        if self.send_script:
            entry = self.send_script.pop(0)
            if isinstance(entry, BaseException):
                raise entry
        return A2AMessage(type="response", in_response_to=message.id)

    async def get_agent_card(self, agent_id):
        self.calls.append({"op": "get_agent_card", "agent_id": agent_id})
        if agent_id in self.missing_agents:
            raise AgentNotFoundError(f"Agent not found: {agent_id}")
        return AgentCard(id=agent_id, name=agent_id.title())

    @property
    def get_calls(self) -> list[dict]:
        return [c for c in self.calls if c["op"] == "get_task"]

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()


@pytest.fixture
def fake_client():
    return FakeProtocolClient()


@pytest.fixture
def fake_client_with_script():
    def _factory(script: list, delay: float = 0.0) -> FakeProtocolClient:
        return FakeProtocolClient(script=script, delay=delay)
    return _factory
