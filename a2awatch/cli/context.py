"""CLI runtime context — bridges sync CLI to the async A2A client."""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine

from a2awatch.a2a.client import A2AClient
from a2awatch.a2a.monitor import TaskMonitor
from a2awatch.config import settings


def build_client() -> A2AClient:
    """Create an A2A client from the global settings."""
    return A2AClient.from_settings(settings)


def build_monitor(client: A2AClient, poll_interval: float | None = None) -> TaskMonitor:
    if poll_interval is None:
        return TaskMonitor.from_settings(client, settings)
    return TaskMonitor(client, poll_interval=poll_interval, max_wait=settings.max_wait)


def run_async(coro: Coroutine) -> Any:
    """Run an async coroutine from sync CLI code."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        # Already inside an event loop (e.g. embedded use)
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    else:
        return asyncio.run(coro)
