"""Custom post type tools for the WordPress REST API."""

from __future__ import annotations

from typing import Annotated, Any

from mcp.server.fastmcp import Context
from pydantic import Field

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import rendered

# REST base of a post type, e.g. "product", "case_study", "team-member"
PostTypeSlug = Annotated[
    str,
    Field(description="Custom post type REST base.", pattern=r"^[A-Za-z0-9_-]+$"),
]


def register_custom_post_tools(mcp):
    """Register custom post type tools with the MCP server."""

    @mcp.tool(
        name="wp_get_custom_posts",
        annotations={
            "title": "List Custom Post Type Entries",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_custom_posts(
        post_type: PostTypeSlug,
        per_page: int = 10,
        page: int = 1,
        status: str = "publish",
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get posts from a custom post type.

        Args:
            post_type: Custom post type slug.
            per_page: Number of posts.
            page: Page number.
            status: Post status.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Entries with id, title and link.
        """
        wp = await get_wp_client(client)
        posts = await wp.get(
            f"{WP_API_NAMESPACE}/{post_type}",
            {"per_page": per_page, "page": page, "status": status},
        )
        return {
            "posts": [
                {
                    "id": p["id"],
                    "title": rendered(p, "title") or "Untitled",
                    "link": p.get("link"),
                }
                for p in posts
            ]
        }

    @mcp.tool(
        name="wp_get_custom_post",
        annotations={
            "title": "Get a Custom Post Type Entry",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_custom_post(
        post_type: PostTypeSlug,
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific custom post by ID."""
        wp = await get_wp_client(client)
        post = await wp.get(f"{WP_API_NAMESPACE}/{post_type}/{id}")
        return {
            "id": post["id"],
            "title": rendered(post, "title") or "Untitled",
            "content": rendered(post, "content"),
            "link": post.get("link"),
            "status": post.get("status"),
        }

    @mcp.tool(
        name="wp_create_custom_post",
        annotations={
            "title": "Create a Custom Post Type Entry",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_custom_post(
        post_type: PostTypeSlug,
        title: str,
        content: str,
        status: str = "draft",
        meta: dict[str, Any] | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new custom post.

        Custom meta fields are written through the ACF REST field.

        Args:
            post_type: Custom post type slug.
            title: Post title.
            content: Post content.
            status: Post status.
            meta: Custom meta fields (key-value pairs).
            client: Client ID, name or domain (optional).

        Returns:
            dict: New entry id, link and status.
        """
        wp = await get_wp_client(client)
        body: dict[str, Any] = {"title": title, "content": content, "status": status}
        if meta:
            body["acf"] = meta
        post = await wp.post(f"{WP_API_NAMESPACE}/{post_type}", body)
        return {"id": post["id"], "link": post.get("link"), "status": post.get("status")}
