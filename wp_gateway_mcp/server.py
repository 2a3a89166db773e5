"""WordPress Gateway MCP Server entry point."""

from __future__ import annotations

import uvicorn
from mcp.server.fastmcp import FastMCP

from .config import HOST, MCP_TRANSPORT, PORT, SERVER_NAME, logger
from .db import app_lifespan
from .gateway import create_app
from .tools import register_all_tools

# Create the MCP server
mcp = FastMCP(SERVER_NAME, lifespan=app_lifespan)

# Register all tools
register_all_tools(mcp)


def main():
    """Run the gateway over HTTP, or as a native MCP server with MCP_TRANSPORT=stdio."""
    if MCP_TRANSPORT == "stdio":
        mcp.run()
        return

    logger.info("WordPress Gateway listening on %s:%s", HOST, PORT)
    uvicorn.run(create_app(mcp), host=HOST, port=PORT)


if __name__ == "__main__":
    main()
