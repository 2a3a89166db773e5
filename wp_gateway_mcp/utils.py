"""Utility functions for response projection, cascades and error mapping."""

from __future__ import annotations

import json
import traceback
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from .config import ENVIRONMENT, logger
from .errors import (
    AuthorizationError,
    ConfigurationError,
    TenantNotFoundError,
    UpstreamError,
    UpstreamUnavailableError,
)

T = TypeVar("T")


async def first_match(probes: Iterable[Callable[[], Awaitable[T | None]]]) -> T | None:
    """Await probes in order and return the first non-None result.

    Later probes are never started once one has matched.
    """
    for probe in probes:
        result = await probe()
        if result is not None:
            return result
    return None


def rendered(obj: dict[str, Any], key: str) -> Any:
    """Read a WordPress ``{"rendered": ...}`` field, tolerating plain values."""
    value = obj.get(key)
    if isinstance(value, dict):
        return value.get("rendered", value.get("raw"))
    return value


def compact(**fields: Any) -> dict[str, Any]:
    """Keep only the fields that were supplied (not None)."""
    return {k: v for k, v in fields.items() if v is not None}


def to_text(result: Any) -> str:
    """Serialize a tool result for a text content block."""
    return json.dumps(result, indent=2, default=str)


def error_response(message: str, code: str = "error") -> dict[str, Any]:
    """Create a consistent error payload.

    Args:
        message: Human-readable error description.
        code: Error code for programmatic handling.

    Returns:
        Dict with error details.
    """
    return {"error": message, "code": code}


def handle_exception(e: Exception) -> tuple[int, dict[str, Any]]:
    """Map an exception to an HTTP status and JSON error payload.

    Logs detailed error information while returning sanitized messages to users.
    Outside production, the payload carries the traceback.

    Args:
        e: The exception to handle.

    Returns:
        Tuple of (http_status, payload).
    """
    if isinstance(e, AuthorizationError):
        return 401, error_response(str(e), "unauthorized")
    if isinstance(e, TenantNotFoundError):
        payload = error_response(str(e), "client_not_found")
        payload["known_clients"] = e.known
        return 404, payload
    if isinstance(e, ConfigurationError):
        return 400, error_response(str(e), "configuration_error")
    if isinstance(e, UpstreamError):
        logger.warning("Upstream error (%s): %s", e.status, e)
        payload = error_response(str(e), "upstream_error")
        payload["status"] = e.status
        payload["body"] = e.body
        return 502, _with_stack(payload, e)
    if isinstance(e, UpstreamUnavailableError):
        logger.warning("Upstream unavailable: %s", e)
        return 502, _with_stack(error_response(str(e), "upstream_unavailable"), e)
    if isinstance(e, ValueError):
        return 400, error_response(str(e), "invalid_request")
    # Unknown exception - log full details, return generic message
    logger.exception("Unexpected error: %s", e)
    return 500, _with_stack(error_response("An unexpected error occurred.", "internal_error"), e)


def _with_stack(payload: dict[str, Any], e: Exception) -> dict[str, Any]:
    if ENVIRONMENT != "production":
        payload["stack"] = "".join(
            traceback.format_exception(type(e), e, e.__traceback__)
        )
    return payload
