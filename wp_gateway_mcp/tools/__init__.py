"""MCP tool implementations for the WordPress and WooCommerce REST APIs."""

from .clients import register_client_tools
from .comments import register_comment_tools
from .custom_posts import register_custom_post_tools
from .media import register_media_tools
from .pages import register_page_tools
from .posts import register_post_tools
from .site import register_site_tools
from .taxonomy import register_taxonomy_tools
from .users import register_user_tools
from .woocommerce import register_woocommerce_tools

__all__ = [
    "register_post_tools",
    "register_page_tools",
    "register_media_tools",
    "register_comment_tools",
    "register_user_tools",
    "register_custom_post_tools",
    "register_taxonomy_tools",
    "register_site_tools",
    "register_client_tools",
    "register_woocommerce_tools",
]


def register_all_tools(mcp):
    """Register all tools with the MCP server."""
    register_post_tools(mcp)
    register_page_tools(mcp)
    register_media_tools(mcp)
    register_comment_tools(mcp)
    register_user_tools(mcp)
    register_custom_post_tools(mcp)
    register_taxonomy_tools(mcp)
    register_site_tools(mcp)
    register_client_tools(mcp)
    register_woocommerce_tools(mcp)
