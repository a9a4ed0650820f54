"""A2A error registry and protocol error types.

The numeric codes mirror the JSON-RPC 2.0 error space: generic codes in
-32700..-32600, A2A-specific codes in -32001..-32013. Callers branch on
``code`` (or the subclass), never on ``message``.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from a2awatch.a2a.models import ErrorDetail
from a2awatch.exceptions import A2AWatchError


class ErrorCode(IntEnum):
    # Standard JSON-RPC 2.0 errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # A2A-specific errors
    TASK_NOT_FOUND = -32001
    TASK_NOT_CANCELABLE = -32002
    PUSH_NOTIFICATION_NOT_SUPPORTED = -32003
    UNSUPPORTED_OPERATION = -32004
    CONTENT_TYPE_NOT_SUPPORTED = -32005
    AGENT_NOT_FOUND = -32006
    AGENT_EXECUTION_FAILED = -32007
    AUTHENTICATION_REQUIRED = -32008
    CONCURRENT_EXECUTION_LIMIT = -32009
    SENSITIVE_DATA_DETECTED = -32010
    AGENT_CONFIGURATION = -32011
    INVALID_AGENT_STATE = -32012
    AGENT_TIMEOUT = -32013

    # Anything the registry does not know
    UNRECOGNIZED = 0

    @classmethod
    def parse(cls, value: int) -> ErrorCode:
        try:
            return cls(value)
        except ValueError:
            return cls.UNRECOGNIZED


_DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.PARSE_ERROR: "Invalid JSON was received",
    ErrorCode.INVALID_REQUEST: "Invalid request",
    ErrorCode.METHOD_NOT_FOUND: "Method not found",
    ErrorCode.INVALID_PARAMS: "Invalid params",
    ErrorCode.INTERNAL_ERROR: "Internal error",
    ErrorCode.TASK_NOT_FOUND: "Task not found",
    ErrorCode.TASK_NOT_CANCELABLE: "Task cannot be cancelled",
    ErrorCode.PUSH_NOTIFICATION_NOT_SUPPORTED: "Push notifications not supported",
    ErrorCode.UNSUPPORTED_OPERATION: "Operation not supported by agent",
    ErrorCode.CONTENT_TYPE_NOT_SUPPORTED: "Content type not supported",
    ErrorCode.AGENT_NOT_FOUND: "Agent not found",
    ErrorCode.AGENT_EXECUTION_FAILED: "Agent execution failed",
    ErrorCode.AUTHENTICATION_REQUIRED: "Authentication required",
    ErrorCode.CONCURRENT_EXECUTION_LIMIT: "Concurrent execution limit exceeded",
    ErrorCode.SENSITIVE_DATA_DETECTED: "Sensitive data detected",
    ErrorCode.AGENT_CONFIGURATION: "Agent configuration error",
    ErrorCode.INVALID_AGENT_STATE: "Agent is in invalid state to process request",
    ErrorCode.AGENT_TIMEOUT: "Agent execution timed out",
    ErrorCode.UNRECOGNIZED: "Unrecognized error",
}

_BY_CODE: dict[ErrorCode, type[A2AError]] = {}


class A2AError(A2AWatchError):
    """A structured protocol failure reported by (or about) a remote agent."""

    code: ErrorCode = ErrorCode.UNRECOGNIZED

    def __init__(
        self,
        message: str = "",
        *,
        code: ErrorCode | int | None = None,
        data: Any = None,
    ) -> None:
        if code is not None:
            self.raw_code = int(code)
            self.code = ErrorCode.parse(self.raw_code)
        else:
            self.raw_code = int(self.code)
        self.message = message or _DEFAULT_MESSAGES[self.code]
        self.data = data
        super().__init__(f"A2A Error [{self.raw_code}]: {self.message}")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _BY_CODE.setdefault(cls.code, cls)

    @classmethod
    def from_code(
        cls, code: ErrorCode | int, message: str = "", data: Any = None,
    ) -> A2AError:
        """Build the error subclass registered for ``code``."""
        kind = _BY_CODE.get(ErrorCode.parse(int(code)), A2AError)
        return kind(message, code=code, data=data)

    @classmethod
    def from_detail(cls, detail: ErrorDetail) -> A2AError:
        return cls.from_code(detail.code, detail.message, detail.data)

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.raw_code, message=self.message, data=self.data)


# ── Generic band ──────────────────────────────────────────────


class ParseError(A2AError):
    code = ErrorCode.PARSE_ERROR


class InvalidRequestError(A2AError):
    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(A2AError):
    code = ErrorCode.METHOD_NOT_FOUND


class InvalidParamsError(A2AError):
    code = ErrorCode.INVALID_PARAMS


class InternalError(A2AError):
    code = ErrorCode.INTERNAL_ERROR


# ── Protocol band ─────────────────────────────────────────────


class TaskNotFoundError(A2AError):
    """Task doesn't exist or has expired from the agent's registry."""

    code = ErrorCode.TASK_NOT_FOUND


class TaskNotCancelableError(A2AError):
    """Task cannot be cancelled (already terminal)."""

    code = ErrorCode.TASK_NOT_CANCELABLE


class PushNotificationNotSupportedError(A2AError):
    code = ErrorCode.PUSH_NOTIFICATION_NOT_SUPPORTED


class UnsupportedOperationError(A2AError):
    code = ErrorCode.UNSUPPORTED_OPERATION


class ContentTypeNotSupportedError(A2AError):
    code = ErrorCode.CONTENT_TYPE_NOT_SUPPORTED


class AgentNotFoundError(A2AError):
    code = ErrorCode.AGENT_NOT_FOUND


class AgentExecutionFailedError(A2AError):
    code = ErrorCode.AGENT_EXECUTION_FAILED


class AuthenticationRequiredError(A2AError):
    code = ErrorCode.AUTHENTICATION_REQUIRED


class ConcurrentExecutionLimitError(A2AError):
    code = ErrorCode.CONCURRENT_EXECUTION_LIMIT


class SensitiveDataError(A2AError):
    code = ErrorCode.SENSITIVE_DATA_DETECTED


class AgentConfigurationError(A2AError):
    code = ErrorCode.AGENT_CONFIGURATION


class InvalidAgentStateError(A2AError):
    code = ErrorCode.INVALID_AGENT_STATE


class AgentTimeoutError(A2AError):
    code = ErrorCode.AGENT_TIMEOUT


# ── Classification ────────────────────────────────────────────


def is_transient(exc: BaseException) -> bool:
    """Return True if retrying the failed operation later might succeed.

    Only opaque internal failures on the remote side qualify. Well-defined
    conditions (not found, not cancelable, auth) and anything that is not a
    protocol error, transport failures included, are terminal.
    """
    return isinstance(exc, A2AError) and exc.code is ErrorCode.INTERNAL_ERROR
