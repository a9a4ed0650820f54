"""A2A Client — issues protocol operations against a remote agent endpoint.

Follows the same httpx-based async pattern as the rest of a2awatch: one
``httpx.AsyncClient`` is handed in explicitly and shared by every call, so
a single client is safe to use from many monitoring sessions at once.

Usage:
    async with A2AClient.from_settings(settings) as client:
        task = await client.get_task("summarizer", "task-123")
        tasks = await client.list_tasks("summarizer", {"status": "running"})
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from a2awatch.a2a.errors import A2AError, ErrorCode, ParseError
from a2awatch.a2a.models import A2AMessage, A2ATask, AgentCard, ErrorDetail
from a2awatch.a2a.protocol import ProtocolClient
from a2awatch.config import A2AWatchSettings
from a2awatch.exceptions import TransportError
from a2awatch.types import AgentId, TaskId

_logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# HTTP status → error code when the body carries no recognized error.
_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.AUTHENTICATION_REQUIRED,
    403: ErrorCode.AUTHENTICATION_REQUIRED,
    408: ErrorCode.AGENT_TIMEOUT,
    422: ErrorCode.INVALID_PARAMS,
    429: ErrorCode.CONCURRENT_EXECUTION_LIMIT,
    504: ErrorCode.AGENT_TIMEOUT,
}


class A2AClient(ProtocolClient):
    """HTTP client for a remote A2A agent host.

    Args:
        base_url: Root URL of the agent host, e.g. ``https://agents.example.com``.
        auth_token: Bearer credential sent with every authenticated call.
        http: The ``httpx.AsyncClient`` used for all requests. The caller
            owns its configuration (timeouts, proxies, transport).
    """

    def __init__(self, base_url: str, auth_token: str, http: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth_token = auth_token
        self._http = http

    @classmethod
    def from_settings(cls, config: A2AWatchSettings) -> A2AClient:
        """Build a client and its HTTP transport from configuration."""
        http = httpx.AsyncClient(timeout=config.request_timeout)
        return cls(config.base_url, config.auth_token, http)

    @property
    def base_url(self) -> str:
        return self._base_url

    # ── Protocol operations ──────────────────────────────────

    async def send_message(self, agent_id: AgentId, message: A2AMessage) -> A2AMessage:
        """Send a message to an agent and return its response message."""
        data = await self._request(
            "POST", f"/agents/{agent_id}/v1/message:send",
            not_found=ErrorCode.AGENT_NOT_FOUND,
            json=message.model_dump(mode="json", by_alias=True),
        )
        return _parse(A2AMessage, data)

    async def get_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask:
        """Fetch the current snapshot of a task."""
        data = await self._request(
            "GET", f"/agents/{agent_id}/v1/tasks/{task_id}",
            not_found=ErrorCode.TASK_NOT_FOUND,
        )
        return _parse(A2ATask, data)

    async def list_tasks(
        self, agent_id: AgentId, filters: dict[str, str] | None = None,
    ) -> list[A2ATask]:
        """List an agent's tasks. Filters are sent as query parameters as-is."""
        data = await self._request(
            "GET", f"/agents/{agent_id}/v1/tasks",
            not_found=ErrorCode.AGENT_NOT_FOUND,
            params=filters or None,
        )
        if isinstance(data, dict):
            data = data.get("tasks", [])
        if not isinstance(data, list):
            raise ParseError("Expected a list of tasks")
        return [_parse(A2ATask, item) for item in data]

    async def cancel_task(self, agent_id: AgentId, task_id: TaskId) -> A2ATask:
        """Ask the agent to cancel a task; returns the task after cancellation."""
        data = await self._request(
            "POST", f"/agents/{agent_id}/v1/tasks/{task_id}:cancel",
            not_found=ErrorCode.TASK_NOT_FOUND,
            conflict=ErrorCode.TASK_NOT_CANCELABLE,
        )
        return _parse(A2ATask, data)

    async def get_agent_card(self, agent_id: AgentId) -> AgentCard:
        """Fetch the authenticated extended card of a hosted agent."""
        data = await self._request(
            "GET", f"/agents/{agent_id}/v1/card",
            not_found=ErrorCode.AGENT_NOT_FOUND,
        )
        return _parse(AgentCard, data)

    async def resolve_agent_card(self, url: str) -> AgentCard:
        """Fetch a public card from ``{url}/.well-known/agent-card.json``.

        This call is unauthenticated and may target any host.
        """
        data = await self._send(
            "GET", f"{url.rstrip('/')}/.well-known/agent-card.json",
            headers={"Accept": "application/json"},
            not_found=ErrorCode.AGENT_NOT_FOUND,
        )
        return _parse(AgentCard, data)

    # ── Lifecycle ────────────────────────────────────────────

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> A2AClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"A2AClient({self._base_url!r})"

    # ── Internals ────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        not_found: ErrorCode,
        conflict: ErrorCode = ErrorCode.INVALID_REQUEST,
        **kwargs: Any,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {self._auth_token}",
            "Accept": "application/json",
        }
        return await self._send(
            method, f"{self._base_url}{path}",
            headers=headers, not_found=not_found, conflict=conflict, **kwargs,
        )

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        not_found: ErrorCode,
        conflict: ErrorCode = ErrorCode.INVALID_REQUEST,
        **kwargs: Any,
    ) -> Any:
        _logger.debug("A2A %s %s", method, url)
        try:
            resp = await self._http.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if not resp.is_success:
            raise _error_for(resp, not_found=not_found, conflict=conflict)

        try:
            data = orjson.loads(resp.content)
        except orjson.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON in response from {url}") from exc

        # Some agents answer 200 with an error envelope.
        detail = _envelope_error(data)
        if detail is not None:
            raise A2AError.from_detail(detail)
        return data


def _error_for(
    resp: httpx.Response, *, not_found: ErrorCode, conflict: ErrorCode,
) -> A2AError:
    """Map a non-2xx response to exactly one protocol error."""
    detail = _error_detail(resp)
    if detail is not None and ErrorCode.parse(detail.code) is not ErrorCode.UNRECOGNIZED:
        return A2AError.from_detail(detail)

    status = resp.status_code
    if status == 404:
        code = not_found
    elif status == 409:
        code = conflict
    elif status in _STATUS_CODES:
        code = _STATUS_CODES[status]
    elif status >= 500:
        code = ErrorCode.INTERNAL_ERROR
    else:
        code = ErrorCode.INVALID_REQUEST

    message = detail.message if detail and detail.message else (
        f"Request failed with status {status}"
    )
    data = detail.data if detail else None
    return A2AError.from_code(code, message, data)


def _error_detail(resp: httpx.Response) -> ErrorDetail | None:
    """Extract ``{"error": {...}}`` from an error body, if there is one."""
    try:
        body = orjson.loads(resp.content)
    except orjson.JSONDecodeError:
        return None
    return _envelope_error(body)


def _envelope_error(body: Any) -> ErrorDetail | None:
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return None
    try:
        return ErrorDetail(**body["error"])
    except (ValidationError, TypeError):
        return None


def _parse(model: type[_ModelT], data: Any) -> _ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"Malformed {model.__name__} in response: {exc}") from exc
