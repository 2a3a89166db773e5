"""Page tools for the WordPress REST API."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact, rendered


def register_page_tools(mcp):
    """Register page CRUD tools with the MCP server."""

    @mcp.tool(
        name="wp_get_pages",
        annotations={
            "title": "List WordPress Pages",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_pages(
        per_page: int = 10,
        page: int = 1,
        search: str | None = None,
        status: str = "publish",
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress pages.

        Args:
            per_page: Number of pages to retrieve.
            page: Page number.
            search: Search term.
            status: Page status.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Pages with id, title and link.
        """
        wp = await get_wp_client(client)
        params = compact(per_page=per_page, page=page, status=status, search=search)
        pages = await wp.get(f"{WP_API_NAMESPACE}/pages", params)
        return {
            "pages": [
                {"id": p["id"], "title": rendered(p, "title"), "link": p.get("link")}
                for p in pages
            ]
        }

    @mcp.tool(
        name="wp_get_page",
        annotations={
            "title": "Get a WordPress Page",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_page(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific WordPress page by ID."""
        wp = await get_wp_client(client)
        page = await wp.get(f"{WP_API_NAMESPACE}/pages/{id}")
        return {
            "id": page["id"],
            "title": rendered(page, "title"),
            "content": rendered(page, "content"),
            "date": page.get("date"),
            "status": page.get("status"),
            "link": page.get("link"),
        }

    @mcp.tool(
        name="wp_create_page",
        annotations={
            "title": "Create a WordPress Page",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_page(
        title: str,
        content: str,
        status: str = "draft",
        parent: int | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new WordPress page.

        Args:
            title: Page title.
            content: Page content (HTML).
            status: Page status (publish, draft).
            parent: Parent page ID.
            client: Client ID, name or domain (optional).

        Returns:
            dict: New page id, link and status.
        """
        wp = await get_wp_client(client)
        page = await wp.post(
            f"{WP_API_NAMESPACE}/pages",
            compact(title=title, content=content, status=status, parent=parent),
        )
        return {"id": page["id"], "link": page.get("link"), "status": page.get("status")}

    @mcp.tool(
        name="wp_update_page",
        annotations={
            "title": "Update a WordPress Page",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_update_page(
        id: int,
        title: str | None = None,
        content: str | None = None,
        status: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Update an existing WordPress page. Only provided fields are sent."""
        wp = await get_wp_client(client)
        updates = compact(title=title, content=content, status=status)
        page = await wp.post(f"{WP_API_NAMESPACE}/pages/{id}", updates)
        return {"id": page["id"], "link": page.get("link"), "status": page.get("status")}

    @mcp.tool(
        name="wp_delete_page",
        annotations={
            "title": "Delete a WordPress Page",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_delete_page(
        id: int,
        force: bool = False,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Delete a WordPress page, optionally bypassing the trash."""
        wp = await get_wp_client(client)
        await wp.delete(f"{WP_API_NAMESPACE}/pages/{id}", {"force": str(force).lower()})
        return {"deleted": True, "id": id}
