"""Task Monitor — waits for remote A2A tasks to reach a terminal status.

One monitoring session is a polling loop over ``ProtocolClient.get_task``:

    POLLING ──terminal task──────────▶ SUCCEEDED (task returned as a value)
       │ ──non-transient error──────▶ FAILED    (error raised as-is)
       │ ──deadline─────────────────▶ TIMED_OUT (MonitorTimeoutError)
       │ ──asyncio cancellation─────▶ CANCELLED (CancelledError propagates)
       └──transient error / running─▶ POLLING

The first poll happens immediately; after that the monitor sleeps
``poll_interval`` seconds between the end of one poll and the start of the
next, so at most one ``get_task`` call is ever in flight per session.

Usage:
    monitor = TaskMonitor(client, poll_interval=2.0)
    task = await monitor.wait_for_completion_with_timeout("summarizer", "t1", 60)
    if task.status is TaskStatus.SUCCEEDED:
        ...
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Awaitable, Callable

from a2awatch.a2a.errors import is_transient
from a2awatch.a2a.models import A2ATask, TaskStatus
from a2awatch.a2a.protocol import ProtocolClient
from a2awatch.config import A2AWatchSettings
from a2awatch.exceptions import (
    MonitorCancelledError,
    MonitorTimeoutError,
    TaskNotCompletedError,
    TimestampsNotSetError,
)
from a2awatch.types import AgentId, TaskId

_logger = logging.getLogger(__name__)

MonitorCallback = Callable[
    [A2ATask | None, BaseException | None], Awaitable[None] | None
]


class MonitorState(str, Enum):
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass
class MonitorSession:
    """State of one in-flight wait. Owned by exactly one wait call."""

    agent_id: AgentId
    task_id: TaskId
    state: MonitorState = MonitorState.POLLING
    poll_count: int = 0
    last_error: BaseException | None = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class TaskMonitor:
    """Polls a remote agent until a task finishes.

    Holds no per-session state, so one monitor (and its client) can drive
    any number of concurrent sessions.

    Args:
        client: Any ``ProtocolClient`` implementation.
        poll_interval: Seconds between the end of one poll and the next.
        max_wait: Default deadline for ``wait_for_completion``; ``None``
            waits until the task finishes or the caller cancels.
    """

    def __init__(
        self,
        client: ProtocolClient,
        poll_interval: float = 5.0,
        max_wait: float | None = None,
    ) -> None:
        if poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        self._client = client
        self._poll_interval = poll_interval
        self._max_wait = max_wait

    @classmethod
    def from_settings(cls, client: ProtocolClient, config: A2AWatchSettings) -> TaskMonitor:
        return cls(client, poll_interval=config.poll_interval, max_wait=config.max_wait)

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    # ── Waiting ───────────────────────────────────────────────

    async def wait_for_completion(self, agent_id: AgentId, task_id: TaskId) -> A2ATask:
        """Block until the task reaches a terminal status and return it.

        Raises:
            A2AError: The first non-transient error reported while polling.
            TransportError: The agent could not be reached.
            MonitorTimeoutError: ``max_wait`` elapsed first.
            asyncio.CancelledError: The awaiting task was cancelled.
        """
        if self._max_wait is not None:
            return await self.wait_for_completion_with_timeout(
                agent_id, task_id, self._max_wait,
            )
        return await self._poll(MonitorSession(agent_id, task_id))

    async def wait_for_completion_with_timeout(
        self, agent_id: AgentId, task_id: TaskId, timeout: float,
    ) -> A2ATask:
        """Like ``wait_for_completion`` with an explicit deadline in seconds."""
        session = MonitorSession(agent_id, task_id)
        poll = asyncio.ensure_future(self._poll(session))
        try:
            done, _ = await asyncio.wait({poll}, timeout=timeout)
        except asyncio.CancelledError:
            poll.cancel()
            raise
        if poll in done:
            return poll.result()

        # Marked before cancelling so the poll loop does not report a cancel.
        session.state = MonitorState.TIMED_OUT
        poll.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await poll
        _logger.warning(
            "Timed out after %.1fs waiting for task %s on agent %s (%d polls)",
            timeout, task_id, agent_id, session.poll_count,
        )
        raise MonitorTimeoutError(
            f"Task {task_id} on agent {agent_id} did not finish within {timeout}s"
        )

    def monitor_async(
        self, agent_id: AgentId, task_id: TaskId, callback: MonitorCallback,
    ) -> asyncio.Task[None]:
        """Monitor a task in the background; ``callback(task, error)`` fires once.

        Must be called from a running event loop. The callback may be a plain
        function or a coroutine function. Cancelling the returned task
        delivers ``MonitorCancelledError`` to the callback.
        """
        once = _OneShot(callback)
        handle = asyncio.create_task(
            self._monitor(agent_id, task_id, once),
            name=f"monitor:{agent_id}/{task_id}",
        )

        def _on_done(done: asyncio.Task[None]) -> None:
            # A task cancelled before its first step never enters _monitor.
            if done.cancelled() and not once.fired:
                asyncio.ensure_future(once(None, _cancelled(agent_id, task_id)))

        handle.add_done_callback(_on_done)
        return handle

    async def _monitor(
        self, agent_id: AgentId, task_id: TaskId, once: _OneShot,
    ) -> None:
        task: A2ATask | None = None
        error: BaseException | None = None
        try:
            task = await self.wait_for_completion(agent_id, task_id)
        except asyncio.CancelledError:
            await once(None, _cancelled(agent_id, task_id))
            raise
        except Exception as exc:
            error = exc
        await once(task, error)

    async def _poll(self, session: MonitorSession) -> A2ATask:
        agent_id, task_id = session.agent_id, session.task_id
        _logger.info("Monitoring task %s on agent %s", task_id, agent_id)
        try:
            while True:
                session.poll_count += 1
                try:
                    task = await self._client.get_task(agent_id, task_id)
                except Exception as exc:
                    session.last_error = exc
                    if not is_transient(exc):
                        session.state = MonitorState.FAILED
                        _logger.warning(
                            "Monitoring task %s failed after %d polls: %s",
                            task_id, session.poll_count, exc,
                        )
                        raise
                    _logger.debug(
                        "Transient error polling task %s (poll %d): %s",
                        task_id, session.poll_count, exc,
                    )
                else:
                    if task.is_terminal:
                        session.state = MonitorState.SUCCEEDED
                        _logger.info(
                            "Task %s reached %s after %d polls (%.1fs)",
                            task_id, task.status.value,
                            session.poll_count, session.elapsed,
                        )
                        return task
                    _logger.debug(
                        "Task %s is %s (poll %d)",
                        task_id, task.status.value, session.poll_count,
                    )
                await asyncio.sleep(self._poll_interval)
        except asyncio.CancelledError:
            if session.state is MonitorState.POLLING:
                session.state = MonitorState.CANCELLED
                _logger.info("Monitoring of task %s cancelled", task_id)
            raise

    # ── Pass-through operations ──────────────────────────────

    async def get_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask:
        return await self._client.get_task(agent_id, task_id)

    async def list_tasks(
        self, agent_id: AgentId, filters: dict[str, str] | None = None,
    ) -> list[A2ATask]:
        return await self._client.list_tasks(agent_id, filters)

    async def cancel_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask:
        return await self._client.cancel_task(agent_id, task_id)

    async def monitor_agent_tasks(
        self, agent_id: AgentId, status: TaskStatus | str | None = None,
    ) -> list[A2ATask]:
        """List all tasks of an agent, optionally only those in ``status``."""
        filters: dict[str, str] = {}
        if status:
            filters["status"] = TaskStatus(status).value
        return await self._client.list_tasks(agent_id, filters)

    # ── Snapshot helpers (no network) ────────────────────────

    @staticmethod
    def is_completed(task: A2ATask | None) -> bool:
        return task is not None and task.is_terminal

    @staticmethod
    def execution_time(task: A2ATask) -> timedelta:
        """Time between the task's creation and its last modification."""
        if task.created_at is None or task.modified_at is None:
            raise TimestampsNotSetError(f"Task {task.id} timestamps are not set")
        return task.modified_at - task.created_at

    @classmethod
    def get_result(cls, task: A2ATask) -> A2ATask:
        """Return the finished task; raises if it is still in progress."""
        if not cls.is_completed(task):
            raise TaskNotCompletedError(
                f"Task {task.id} is not completed, current status: {task.status.value}"
            )
        return task


class _OneShot:
    """Invokes a monitor callback at most once."""

    def __init__(self, callback: MonitorCallback) -> None:
        self._callback = callback
        self.fired = False

    async def __call__(self, task: A2ATask | None, error: BaseException | None) -> None:
        if self.fired:
            return
        self.fired = True
        try:
            result = self._callback(task, error)
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.exception("Task monitor callback raised")


def _cancelled(agent_id: AgentId, task_id: TaskId) -> MonitorCancelledError:
    return MonitorCancelledError(
        f"Monitoring of task {task_id} on agent {agent_id} was cancelled"
    )
