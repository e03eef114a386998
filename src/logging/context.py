# src/logging/context.py — v1
"""Contextual logging support — attach operation, version token and request id to log records."""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per service call.
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_version_token: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "version_token", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    operation: str | None = None
    version_token: str | None = None
    request_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        operation=_operation.get(),
        version_token=_version_token.get(),
        request_id=_request_id.get(),
    )


def set_request_context(
    operation: str,
    version_token: str | None = None,
    request_id: str | None = None,
) -> str:
    """Set request-level context (called once per facade operation).

    Returns:
        The request id in effect, generated when not supplied.
    """
    request_id = request_id or uuid.uuid4().hex[:12]
    _operation.set(operation)
    _version_token.set(version_token)
    _request_id.set(request_id)
    return request_id


def clear_context() -> None:
    """Reset all context variables."""
    _operation.set(None)
    _version_token.set(None)
    _request_id.set(None)
