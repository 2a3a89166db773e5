"""Comment tools for the WordPress REST API."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact, rendered


def register_comment_tools(mcp):
    """Register comment CRUD tools with the MCP server."""

    @mcp.tool(
        name="wp_get_comments",
        annotations={
            "title": "List WordPress Comments",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_comments(
        per_page: int = 10,
        page: int = 1,
        post: int | None = None,
        status: str = "approve",
        search: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress comments.

        Args:
            per_page: Number of comments.
            page: Page number.
            post: Limit to specific post ID.
            status: Comment status (approve, hold, spam).
            search: Search term.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Comments with post, author, content, date and status.
        """
        wp = await get_wp_client(client)
        params = compact(
            per_page=per_page, page=page, status=status, post=post, search=search
        )
        comments = await wp.get(f"{WP_API_NAMESPACE}/comments", params)
        return {
            "comments": [
                {
                    "id": c["id"],
                    "post": c.get("post"),
                    "author_name": c.get("author_name"),
                    "content": rendered(c, "content"),
                    "date": c.get("date"),
                    "status": c.get("status"),
                }
                for c in comments
            ]
        }

    @mcp.tool(
        name="wp_get_comment",
        annotations={
            "title": "Get a WordPress Comment",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_comment(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific comment by ID."""
        wp = await get_wp_client(client)
        comment = await wp.get(f"{WP_API_NAMESPACE}/comments/{id}")
        return {
            "id": comment["id"],
            "post": comment.get("post"),
            "author_name": comment.get("author_name"),
            "author_email": comment.get("author_email"),
            "content": rendered(comment, "content"),
            "date": comment.get("date"),
            "status": comment.get("status"),
        }

    @mcp.tool(
        name="wp_create_comment",
        annotations={
            "title": "Create a WordPress Comment",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_create_comment(
        post: int,
        content: str,
        author_name: str | None = None,
        author_email: str | None = None,
        parent: int | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Create a new comment on a post.

        Args:
            post: Post ID.
            content: Comment content.
            author_name: Comment author name.
            author_email: Comment author email.
            parent: Parent comment ID for replies.
            client: Client ID, name or domain (optional).
        """
        wp = await get_wp_client(client)
        comment = await wp.post(
            f"{WP_API_NAMESPACE}/comments",
            compact(
                post=post,
                content=content,
                author_name=author_name,
                author_email=author_email,
                parent=parent or None,
            ),
        )
        return {"id": comment["id"], "status": comment.get("status")}

    @mcp.tool(
        name="wp_update_comment",
        annotations={
            "title": "Update a WordPress Comment",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_update_comment(
        id: int,
        content: str | None = None,
        status: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Update an existing comment (content or status: approve, hold, spam, trash)."""
        wp = await get_wp_client(client)
        comment = await wp.post(
            f"{WP_API_NAMESPACE}/comments/{id}", compact(content=content, status=status)
        )
        return {"id": comment["id"], "status": comment.get("status")}

    @mcp.tool(
        name="wp_delete_comment",
        annotations={
            "title": "Delete a WordPress Comment",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_delete_comment(
        id: int,
        force: bool = False,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Delete a comment."""
        wp = await get_wp_client(client)
        await wp.delete(
            f"{WP_API_NAMESPACE}/comments/{id}", {"force": str(force).lower()}
        )
        return {"deleted": True, "id": id}
