"""Media library tools for the WordPress REST API."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact, rendered


def _media_summary(m: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": m["id"],
        "title": rendered(m, "title"),
        "url": m.get("source_url"),
        "media_type": m.get("media_type"),
        "mime_type": m.get("mime_type"),
    }


def register_media_tools(mcp):
    """Register media library tools with the MCP server."""

    @mcp.tool(
        name="wp_get_media",
        annotations={
            "title": "List WordPress Media",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_media(
        per_page: int = 10,
        page: int = 1,
        media_type: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress media files.

        Args:
            per_page: Number of media items.
            page: Page number.
            media_type: Media type (image, video, etc).
            client: Client ID, name or domain (optional).

        Returns:
            dict: Media items with id, title, url, media_type and mime_type.
        """
        wp = await get_wp_client(client)
        params = compact(per_page=per_page, page=page, media_type=media_type)
        media = await wp.get(f"{WP_API_NAMESPACE}/media", params)
        return {"media": [_media_summary(m) for m in media]}

    @mcp.tool(
        name="wp_get_media_item",
        annotations={
            "title": "Get a WordPress Media Item",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_media_item(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific media item by ID, including its alt text."""
        wp = await get_wp_client(client)
        media = await wp.get(f"{WP_API_NAMESPACE}/media/{id}")
        return {**_media_summary(media), "alt_text": media.get("alt_text")}

    @mcp.tool(
        name="wp_upload_media",
        annotations={
            "title": "Upload a WordPress Media File",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def wp_upload_media(
        filename: str,
        base64_content: str,
        title: str | None = None,
        alt_text: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Upload a media file (base64 encoded).

        The file is sent as the raw request body. Title and alt text, when
        given, are applied with a follow-up update.

        Args:
            filename: File name, used for the attachment's Content-Disposition.
            base64_content: Base64 encoded file content.
            title: Media title.
            alt_text: Alt text for images.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Uploaded media id, url, slug, guid, title and alt_text.
        """
        try:
            payload = base64.b64decode(base64_content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"base64_content is not valid base64: {e}") from e

        wp = await get_wp_client(client)
        media = await wp.post(
            f"{WP_API_NAMESPACE}/media",
            content=payload,
            headers={
                "Content-Disposition": f'attachment; filename="{filename}"',
                "Content-Type": "application/octet-stream",
            },
        )

        updates = compact(title=title, alt_text=alt_text)
        if updates:
            media = await wp.post(f"{WP_API_NAMESPACE}/media/{media['id']}", updates)

        return {
            "id": media["id"],
            "url": media.get("source_url"),
            "slug": media.get("slug"),
            "guid": rendered(media, "guid"),
            "title": rendered(media, "title"),
            "alt_text": media.get("alt_text") or "",
        }

    @mcp.tool(
        name="wp_update_media",
        annotations={
            "title": "Update WordPress Media Metadata",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_update_media(
        id: int,
        title: str | None = None,
        alt_text: str | None = None,
        caption: str | None = None,
        description: str | None = None,
        post: int | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Update media item metadata (title, alt text, caption, description).

        Args:
            id: Media ID.
            title: Media title.
            alt_text: Alternative text for images.
            caption: Media caption.
            description: Media description.
            post: Post ID to attach media to.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Updated media id, url, title and alt_text.
        """
        updates: dict[str, Any] = {}
        if title:
            updates["title"] = {"raw": title}
        if alt_text is not None:
            updates["alt_text"] = alt_text
        if caption:
            updates["caption"] = {"raw": caption}
        if description:
            updates["description"] = {"raw": description}
        if post is not None:
            updates["post"] = post

        if not updates:
            raise ValueError("No fields to update. Provide at least one valid field.")

        wp = await get_wp_client(client)
        media = await wp.post(
            f"{WP_API_NAMESPACE}/media/{id}", updates, params={"context": "edit"}
        )
        return {
            "id": media["id"],
            "url": media.get("source_url"),
            "title": rendered(media, "title"),
            "alt_text": media.get("alt_text"),
        }

    @mcp.tool(
        name="wp_delete_media",
        annotations={
            "title": "Delete a WordPress Media Item",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_delete_media(
        id: int,
        force: bool = False,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Delete a media item."""
        wp = await get_wp_client(client)
        await wp.delete(f"{WP_API_NAMESPACE}/media/{id}", {"force": str(force).lower()})
        return {"deleted": True, "id": id}
