"""WordPress Gateway MCP Server.

A multi-tenant MCP gateway to the WordPress and WooCommerce REST APIs of many
client sites. Sites are registered in a PostgreSQL client directory (or in
environment variables) and selected per call by ID, name or domain.
"""

from .server import main, mcp

__all__ = ["mcp", "main"]
__version__ = "3.0.0"
