"""User tools for the WordPress REST API."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact


def register_user_tools(mcp):
    """Register user lookup tools with the MCP server."""

    @mcp.tool(
        name="wp_get_users",
        annotations={
            "title": "List WordPress Users",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_users(
        per_page: int = 10,
        page: int = 1,
        search: str | None = None,
        roles: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress users.

        Args:
            per_page: Number of users.
            page: Page number.
            search: Search term.
            roles: Filter by role (administrator, editor, author, etc).
            client: Client ID, name or domain (optional).

        Returns:
            dict: Users with id, name, username, email, roles and link.
        """
        wp = await get_wp_client(client)
        params = compact(per_page=per_page, page=page, search=search, roles=roles)
        users = await wp.get(f"{WP_API_NAMESPACE}/users", params)
        return {
            "users": [
                {
                    "id": u["id"],
                    "name": u.get("name"),
                    "username": u.get("slug"),
                    "email": u.get("email"),
                    "roles": u.get("roles"),
                    "link": u.get("link"),
                }
                for u in users
            ]
        }

    @mcp.tool(
        name="wp_get_user",
        annotations={
            "title": "Get a WordPress User",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_user(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific user by ID."""
        wp = await get_wp_client(client)
        user = await wp.get(f"{WP_API_NAMESPACE}/users/{id}")
        return {
            "id": user["id"],
            "name": user.get("name"),
            "username": user.get("slug"),
            "email": user.get("email"),
            "roles": user.get("roles"),
            "description": user.get("description"),
            "link": user.get("link"),
        }

    @mcp.tool(
        name="wp_get_current_user",
        annotations={
            "title": "Get the Authenticated WordPress User",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_current_user(
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get information about the user the client's credentials belong to.

        Useful for checking that an Application Password works.
        """
        wp = await get_wp_client(client)
        user = await wp.get(f"{WP_API_NAMESPACE}/users/me")
        return {
            "id": user["id"],
            "name": user.get("name"),
            "username": user.get("slug"),
            "email": user.get("email"),
            "roles": user.get("roles"),
        }
