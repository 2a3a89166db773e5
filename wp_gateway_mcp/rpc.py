"""JSON-RPC 2.0 handling for the ``POST /mcp`` endpoint.

Clients that speak plain JSON-RPC over HTTP (rather than a full MCP session)
post single requests here. ``tools/call`` dispatches into the same FastMCP
tool registry used by the native transport, so every tool is validated by
its signature-derived argument model.
"""

from __future__ import annotations

import traceback
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import LATEST_PROTOCOL_VERSION

from .config import ENVIRONMENT, SERVER_NAME, SERVER_VERSION, logger
from .utils import to_text

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

# Alternate spellings accepted from callers, mapped to the tool parameter name
ARGUMENT_ALIASES = {
    "ID": "id",
    "postType": "post_type",
    "type": "post_type",
}


def normalize_arguments(params: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    """Flatten a ``tools/call`` params object into tool arguments.

    Accepts both ``{"name", "arguments": {...}}`` and arguments placed at the
    top level. The tenant selector ``client`` may appear at either level.

    Returns:
        Tuple of (client, arguments) with ``name`` and ``client`` removed.
    """
    args = {k: v for k, v in params.items() if k not in ("name", "arguments")}
    nested = params.get("arguments")
    if isinstance(nested, dict):
        args.update(nested)

    client = args.pop("client", None)

    for alias, target in ARGUMENT_ALIASES.items():
        if alias in args:
            value = args.pop(alias)
            args.setdefault(target, value)

    return client, args


def rpc_result(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def rpc_error(
    request_id: Any, code: int, message: str, exc: BaseException | None = None
) -> dict[str, Any]:
    """Build a JSON-RPC error envelope; the traceback is included outside production."""
    error: dict[str, Any] = {"code": code, "message": message}
    if exc is not None and ENVIRONMENT != "production":
        error["data"] = {
            "stack": "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        }
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


async def list_tools(mcp: FastMCP) -> dict[str, Any]:
    tools = await mcp.list_tools()
    return {
        "tools": [
            tool.model_dump(mode="json", by_alias=True, exclude_none=True)
            for tool in tools
        ]
    }


async def call_tool(mcp: FastMCP, params: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a ``tools/call`` request and wrap the result as MCP content.

    Raises:
        ToolError: Unknown tool, invalid arguments, or a failing tool.
    """
    name = params.get("name")
    client, args = normalize_arguments(params)
    if client:
        args["client"] = client

    logger.info("Tool call %s (args: %s)", name, ", ".join(sorted(args)) or "none")
    result = await mcp._tool_manager.call_tool(name, args)
    return {"content": [{"type": "text", "text": to_text(result)}], "data": result}


async def handle_rpc(mcp: FastMCP, message: Any) -> dict[str, Any]:
    """Answer one JSON-RPC request object.

    Never raises: every failure is reported as a JSON-RPC error.
    """
    if not isinstance(message, dict):
        return rpc_error(None, INTERNAL_ERROR, "Invalid request: expected a JSON object")

    request_id = message.get("id")
    method = message.get("method")
    params = message.get("params") or {}

    try:
        if method == "initialize":
            return rpc_result(
                request_id,
                {
                    "protocolVersion": LATEST_PROTOCOL_VERSION,
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                },
            )
        if method == "tools/list":
            return rpc_result(request_id, await list_tools(mcp))
        if method == "tools/call":
            return rpc_result(request_id, await call_tool(mcp, params))
        return rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
    except ToolError as e:
        # FastMCP wraps tool failures; report the underlying error
        cause = e.__cause__ or e
        logger.warning("Tool call failed: %s", cause)
        return rpc_error(request_id, INTERNAL_ERROR, str(cause), cause)
    except Exception as e:
        logger.exception("Unexpected JSON-RPC error: %s", e)
        return rpc_error(request_id, INTERNAL_ERROR, str(e), e)
