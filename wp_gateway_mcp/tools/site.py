"""Site information and universal content lookup tools."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from ..config import WP_API_NAMESPACE, logger
from ..content import find_content, get_special_pages
from ..db import get_resolver, get_wp_client
from ..models import ContentLocator
from ..wordpress import WordPressClient


async def get_site_info(wp: WordPressClient) -> dict[str, Any]:
    """Fetch general site settings, including the special page IDs.

    Used by wp_get_site_info and the /api/site-data route.

    Args:
        wp: Client bound to the tenant.

    Returns:
        Dict of the settings relevant to content lookup and display.
    """
    settings = await wp.get(f"{WP_API_NAMESPACE}/settings")
    return {
        "title": settings.get("title"),
        "description": settings.get("description"),
        "url": settings.get("url"),
        "timezone": settings.get("timezone"),
        "language": settings.get("language"),
        "date_format": settings.get("date_format"),
        "time_format": settings.get("time_format"),
        "show_on_front": settings.get("show_on_front"),
        "page_on_front": settings.get("page_on_front") or 0,
        "page_for_posts": settings.get("page_for_posts") or 0,
        "posts_per_page": settings.get("posts_per_page") or 10,
        "default_category": settings.get("default_category") or 1,
        "default_post_format": settings.get("default_post_format") or "0",
    }


def register_site_tools(mcp):
    """Register site information tools with the MCP server."""

    @mcp.tool(
        name="wp_get_site_info",
        annotations={
            "title": "Get WordPress Site Information",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_site_info(
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WordPress site information and settings including special page IDs.

        Args:
            client: Client ID, name or domain (optional).

        Returns:
            dict: Title, description, url, locale and reading settings.
        """
        wp = await get_wp_client(client)
        return await get_site_info(wp)

    @mcp.tool(
        name="wp_get_special_pages",
        annotations={
            "title": "Get WordPress Special Pages",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_special_pages(
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get special WordPress pages (homepage, blog page, privacy policy) with details.

        A page that is configured but cannot be fetched is reported with an
        error entry rather than failing the call.
        """
        wp = await get_wp_client(client)
        return await get_special_pages(wp)

    @mcp.tool(
        name="wp_get_post_types",
        annotations={
            "title": "List WordPress Post Types",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_get_post_types(
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get all available post types and their REST bases."""
        wp = await get_wp_client(client)
        types = await wp.get(f"{WP_API_NAMESPACE}/types")
        return {
            "post_types": [
                {
                    "slug": key,
                    "name": t.get("name"),
                    "description": t.get("description"),
                    "hierarchical": t.get("hierarchical"),
                    "rest_base": t.get("rest_base"),
                }
                for key, t in types.items()
            ]
        }

    @mcp.tool(
        name="wp_find_content",
        annotations={
            "title": "Find WordPress Content by ID, Slug, URL or Search",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wp_find_content(
        id: int | None = None,
        slug: str | None = None,
        url: str | None = None,
        search: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Find any post or page, including the homepage, blog and privacy pages.

        Tries, in order: direct ID lookup (posts, then pages), the special
        pages configured in the site settings, then a slug or text search over
        posts and pages. When no client is given and a URL is, the client is
        detected from the URL's domain.

        Args:
            id: Post or page ID.
            slug: Content slug (e.g. 'about-us', 'home', 'blog').
            url: Full content URL; its last path segment is used as slug.
            search: Free-text search term.
            client: Client ID, name or domain (optional).

        Returns:
            dict: found=True with type, id, title, slug, content, url, date and
            status (plus specialType for special pages), or found=False with
            the search parameters used.
        """
        locator = ContentLocator(id=id, slug=slug, url=url, search=search)
        if locator.is_empty:
            raise ValueError(
                "Missing search parameter. Provide one of: id, slug, url, or search"
            )

        if not client and locator.url:
            client = await get_resolver().detect_by_url(locator.url)
            if client:
                logger.info("Auto-detected client from URL domain: %s", client)

        wp = await get_wp_client(client)
        result = await find_content(locator, wp)
        return result.to_dict()
