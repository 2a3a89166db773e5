"""Category and tag tools for the WordPress REST API."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact


def register_taxonomy_tools(mcp):
    """Register category and tag tools with the MCP server."""

    @mcp.tool(
        name="wp_get_categories",
        annotations={
            "title": "List WordPress Categories",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_categories(
        per_page: int = 100,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress categories with their post counts."""
        wp = await get_wp_client(client)
        categories = await wp.get(f"{WP_API_NAMESPACE}/categories", {"per_page": per_page})
        return {
            "categories": [
                {"id": c["id"], "name": c.get("name"), "count": c.get("count")}
                for c in categories
            ]
        }

    @mcp.tool(
        name="wp_get_tags",
        annotations={
            "title": "List WordPress Tags",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_tags(
        per_page: int = 100,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress tags with their post counts."""
        wp = await get_wp_client(client)
        tags = await wp.get(f"{WP_API_NAMESPACE}/tags", {"per_page": per_page})
        return {
            "tags": [
                {"id": t["id"], "name": t.get("name"), "count": t.get("count")}
                for t in tags
            ]
        }

    @mcp.tool(
        name="wp_create_category",
        annotations={
            "title": "Create a WordPress Category",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_category(
        name: str,
        description: str | None = None,
        parent: int | None = None,
        slug: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new category.

        Args:
            name: Category name.
            description: Category description.
            parent: Parent category ID.
            slug: Category slug.
            client: Client ID, name or domain (optional).

        Returns:
            dict: New category id, name and slug.
        """
        wp = await get_wp_client(client)
        category = await wp.post(
            f"{WP_API_NAMESPACE}/categories",
            compact(
                name=name,
                description=description or None,
                parent=parent or None,
                slug=slug or None,
            ),
        )
        return {"id": category["id"], "name": category.get("name"), "slug": category.get("slug")}

    @mcp.tool(
        name="wp_create_tag",
        annotations={
            "title": "Create a WordPress Tag",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_tag(
        name: str,
        description: str | None = None,
        slug: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new tag."""
        wp = await get_wp_client(client)
        tag = await wp.post(
            f"{WP_API_NAMESPACE}/tags",
            compact(name=name, description=description or None, slug=slug or None),
        )
        return {"id": tag["id"], "name": tag.get("name"), "slug": tag.get("slug")}

    @mcp.tool(
        name="wp_update_category",
        annotations={
            "title": "Update a WordPress Category",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_update_category(
        id: int,
        name: str | None = None,
        description: str | None = None,
        parent: int | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Update an existing category.

        An empty description clears it; parent 0 moves the category to the top level.
        """
        wp = await get_wp_client(client)
        updates = compact(name=name or None, description=description, parent=parent)
        category = await wp.post(f"{WP_API_NAMESPACE}/categories/{id}", updates)
        return {"id": category["id"], "name": category.get("name")}

    @mcp.tool(
        name="wp_delete_category",
        annotations={
            "title": "Delete a WordPress Category",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_delete_category(
        id: int,
        force: bool = False,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Delete a category. WordPress requires force=true, since terms have no trash."""
        wp = await get_wp_client(client)
        await wp.delete(
            f"{WP_API_NAMESPACE}/categories/{id}", {"force": str(force).lower()}
        )
        return {"deleted": True, "id": id}
