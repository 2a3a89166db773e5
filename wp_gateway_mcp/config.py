"""Configuration and constants for the WordPress Gateway MCP Server."""

from __future__ import annotations

import logging
import os
import sys

# ---------------------------------------------------------------------------
# Configuration from environment variables
# ---------------------------------------------------------------------------

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
API_KEY = os.getenv("API_KEY", "")  # empty = protected routes are open

DATABASE_URL = os.getenv("DATABASE_URL", "")  # empty = env tenants only
CLIENTS_TABLE = os.getenv("WP_CLIENTS_TABLE", "clients")
CACHE_TTL = float(os.getenv("CLIENT_CACHE_TTL", "300"))
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "5"))
DB_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "5"))

REQUEST_TIMEOUT = float(os.getenv("WP_REQUEST_TIMEOUT", "30"))

ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
MCP_TRANSPORT = os.getenv("MCP_TRANSPORT", "http")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SERVER_NAME = "wp_gateway_mcp"
SERVER_VERSION = "3.0.0"

# Numbered env tenants: CLIENT1_WP_API_URL .. CLIENT20_WP_API_URL
MAX_ENV_CLIENTS = 20

WP_API_NAMESPACE = "/wp/v2"
WC_API_NAMESPACE = "/wc/v3"

HTTP_ENDPOINTS = [
    "GET /health",
    "GET /api/clients",
    "GET /api/find?slug=...&client=...",
    "GET /api/site-data?client=...",
    "POST /mcp",
]

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("wp_gateway_mcp")
logging.basicConfig(level=LOG_LEVEL, stream=sys.stderr)

# Security warning for open HTTP routes
if not API_KEY:
    logger.warning(
        "API_KEY is not set. /api/* and /mcp accept unauthenticated requests. "
        "Set API_KEY environment variable for production use."
    )
