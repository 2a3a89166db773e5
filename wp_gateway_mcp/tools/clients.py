"""Client directory tools: list configured sites and refresh the cache."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..db import get_resolver


def register_client_tools(mcp):
    """Register client directory tools with the MCP server."""

    @mcp.tool(
        name="wp_list_clients",
        annotations={
            "title": "List WordPress Clients",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
    )
    async def wp_list_clients(ctx: Context = None) -> dict[str, Any]:
        """List all available WordPress clients.

        Clients come from the database directory when it is reachable and
        has entries, otherwise from the CLIENT{n}_WP_API_* environment
        variables. Credentials are never included.

        Returns:
            dict: Clients (id, name, domain, status, source), count and source.
        """
        clients = await get_resolver().list_tenants()
        return {
            "clients": clients,
            "count": len(clients),
            "source": clients[0]["source"] if clients else "none",
        }

    @mcp.tool(
        name="wp_refresh_clients",
        annotations={
            "title": "Refresh the WordPress Client Cache",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
    )
    async def wp_refresh_clients(ctx: Context = None) -> dict[str, Any]:
        """Force refresh the client cache from the database.

        Use after adding or editing a client so the change is visible
        before the cache expires.
        """
        resolver = get_resolver()
        if resolver.cache is None:
            return {"success": True, "count": 0, "message": "Using ENV fallback"}

        resolver.cache.invalidate()
        tenants = await resolver.cache.get()
        return {
            "success": True,
            "count": len(tenants or []),
            "message": (
                "Cache refreshed from database" if tenants is not None else "Using ENV fallback"
            ),
        }
