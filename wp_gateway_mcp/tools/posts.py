"""Post tools for the WordPress REST API."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact, rendered


def register_post_tools(mcp):
    """Register post CRUD tools with the MCP server."""

    @mcp.tool(
        name="wp_get_posts",
        annotations={
            "title": "List WordPress Posts",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_posts(
        per_page: int = 10,
        page: int = 1,
        search: str | None = None,
        status: str = "publish",
        author: int | None = None,
        categories: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress posts with optional filters.

        Args:
            per_page: Number of posts to retrieve (max 100).
            page: Page number.
            search: Search term.
            status: Post status (publish, draft, etc).
            author: Author ID.
            categories: Category IDs (comma-separated).
            client: Client ID, name or domain (optional).

        Returns:
            dict: Posts with id, title, excerpt, date and link.
        """
        wp = await get_wp_client(client)
        params = compact(
            per_page=per_page,
            page=page,
            status=status,
            search=search,
            author=author,
            categories=categories,
        )
        posts = await wp.get(f"{WP_API_NAMESPACE}/posts", params)
        return {
            "posts": [
                {
                    "id": p["id"],
                    "title": rendered(p, "title"),
                    "excerpt": rendered(p, "excerpt"),
                    "date": p.get("date"),
                    "link": p.get("link"),
                }
                for p in posts
            ]
        }

    @mcp.tool(
        name="wp_get_post",
        annotations={
            "title": "Get a WordPress Post",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_post(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific WordPress post by ID.

        Args:
            id: Post ID.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Post title, content, excerpt, date, status and link.
        """
        wp = await get_wp_client(client)
        post = await wp.get(f"{WP_API_NAMESPACE}/posts/{id}")
        return {
            "id": post["id"],
            "title": rendered(post, "title"),
            "content": rendered(post, "content"),
            "excerpt": rendered(post, "excerpt"),
            "date": post.get("date"),
            "status": post.get("status"),
            "link": post.get("link"),
        }

    @mcp.tool(
        name="wp_create_post",
        annotations={
            "title": "Create a WordPress Post",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_post(
        title: str,
        content: str,
        status: str = "draft",
        excerpt: str | None = None,
        categories: list[int] | None = None,
        tags: list[int] | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new WordPress post.

        Args:
            title: Post title.
            content: Post content (HTML).
            status: Post status (publish, draft, pending).
            excerpt: Post excerpt.
            categories: Category IDs.
            tags: Tag IDs.
            client: Client ID, name or domain (optional).

        Returns:
            dict: New post id, link and status.
        """
        wp = await get_wp_client(client)
        post = await wp.post(
            f"{WP_API_NAMESPACE}/posts",
            compact(
                title=title,
                content=content,
                status=status,
                excerpt=excerpt,
                categories=categories,
                tags=tags,
            ),
        )
        return {"id": post["id"], "link": post.get("link"), "status": post.get("status")}

    @mcp.tool(
        name="wp_update_post",
        annotations={
            "title": "Update a WordPress Post",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_update_post(
        id: int,
        title: str | None = None,
        content: str | None = None,
        status: str | None = None,
        excerpt: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Update an existing WordPress post.

        Only the fields that are provided are sent.
        """
        wp = await get_wp_client(client)
        updates = compact(title=title, content=content, status=status, excerpt=excerpt)
        post = await wp.post(f"{WP_API_NAMESPACE}/posts/{id}", updates)
        return {"id": post["id"], "link": post.get("link"), "status": post.get("status")}

    @mcp.tool(
        name="wp_delete_post",
        annotations={
            "title": "Delete a WordPress Post",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_delete_post(
        id: int,
        force: bool = False,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Delete a WordPress post.

        Args:
            id: Post ID.
            force: Bypass trash and force deletion.
            client: Client ID, name or domain (optional).
        """
        wp = await get_wp_client(client)
        await wp.delete(f"{WP_API_NAMESPACE}/posts/{id}", {"force": str(force).lower()})
        return {"deleted": True, "id": id}
