"""Client directory connection pool, tenant lookup and server lifecycle."""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool, PoolTimeout
from pydantic import ValidationError

from .config import (
    CACHE_TTL,
    CLIENTS_TABLE,
    DATABASE_URL,
    DB_CONNECT_TIMEOUT,
    DB_POOL_MAX,
    logger,
)
from .errors import ConfigurationError
from .models import TenantConfig
from .tenants import TenantCache, TenantResolver, tenant_from_row
from .wordpress import WordPressClient

# WooCommerce key columns are optional; tables without them yield NULL keys
CLIENTS_QUERY = sql.SQL(
    """
    SELECT c.id, c.name, c.wordpress_url, c.wordpress_username,
           c.wordpress_app_password, c.wordpress_client_id, c.status,
           to_jsonb(c) ->> 'woocommerce_consumer_key' AS woocommerce_consumer_key,
           to_jsonb(c) ->> 'woocommerce_consumer_secret' AS woocommerce_consumer_secret
    FROM {table} AS c
    WHERE name IS NOT NULL
      AND wordpress_url IS NOT NULL
      AND wordpress_url != ''
      AND wordpress_username IS NOT NULL
      AND wordpress_app_password IS NOT NULL
      AND deleted_at IS NULL
    ORDER BY name
    """
)

# Global state (set during lifespan)
_pool: AsyncConnectionPool | None = None
_resolver: TenantResolver | None = None
_http: httpx.AsyncClient | None = None


def get_resolver() -> TenantResolver:
    """Get the tenant resolver, raising if not initialized.

    Raises:
        RuntimeError: If the server is not yet initialized.
    """
    if _resolver is None:
        raise RuntimeError(
            "Client directory not initialized. Server may still be starting up."
        )
    return _resolver


def set_resolver(resolver: TenantResolver | None) -> None:
    """Install the process-wide resolver (used by the lifespan and tests)."""
    global _resolver
    _resolver = resolver


def bind_client(tenant: TenantConfig) -> WordPressClient:
    """Bind a WordPress client to a tenant, sharing the lifespan HTTP client."""
    return WordPressClient(tenant, http=_http)


async def get_wp_client(client: str | None = None) -> WordPressClient:
    """Resolve a tenant identifier and bind a WordPress client to it."""
    return bind_client(await get_resolver().resolve(client))


async def fetch_tenants(pool: AsyncConnectionPool) -> list[TenantConfig]:
    """Read every usable tenant row from the client directory.

    The connection is released before any WordPress call is made. Rows that
    cannot be turned into a tenant are logged and skipped.
    """
    query = CLIENTS_QUERY.format(table=sql.Identifier(CLIENTS_TABLE))
    async with pool.connection() as conn, conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(query)
        rows = await cur.fetchall()

    tenants = []
    for row in rows:
        try:
            tenants.append(tenant_from_row(row))
        except (AttributeError, TypeError, ValidationError) as e:
            logger.warning("Skipping client row %s: %s", row.get("id"), e)
    return tenants


async def open_pool() -> AsyncConnectionPool | None:
    """Open the client directory pool, or return None when not configured.

    A failed first connection is logged; the pool keeps retrying in the
    background and the environment tenants serve requests meanwhile.
    """
    if not DATABASE_URL:
        logger.info("DATABASE_URL not set; using ENV client configuration")
        return None

    pool = AsyncConnectionPool(
        DATABASE_URL,
        min_size=1,
        max_size=DB_POOL_MAX,
        timeout=DB_CONNECT_TIMEOUT,
        kwargs={"connect_timeout": int(DB_CONNECT_TIMEOUT)},
        open=False,
    )
    # Opened without waiting: the pool stays open and keeps reconnecting
    await pool.open(wait=False)
    try:
        async with pool.connection(timeout=DB_CONNECT_TIMEOUT):
            pass
        logger.info("PostgreSQL client directory connected")
    except (PoolTimeout, psycopg.OperationalError) as e:
        logger.warning("PostgreSQL connection failed: %s", e)
        logger.info("Falling back to ENV configuration")
    return pool


@asynccontextmanager
async def app_lifespan(app):
    """Create and teardown the client directory, tenant resolver and HTTP client.

    Refuses to start when no usable default tenant can be resolved.

    Args:
        app: The FastMCP or Starlette application (required by lifespan protocol).
    """
    global _pool, _http

    _http = httpx.AsyncClient()
    try:
        _pool = await open_pool()
        cache = None
        if _pool is not None:
            pool = _pool
            cache = TenantCache(lambda: fetch_tenants(pool), ttl=CACHE_TTL)
        set_resolver(TenantResolver(cache))

        default = await get_resolver().resolve()
        if not default.is_usable:
            raise ConfigurationError(
                f"Default client '{default.id or default.name}' is missing "
                f"{', '.join(default.missing_fields)}. Configure DATABASE_URL "
                "or WP_API_URL, WP_API_USERNAME and WP_API_PASSWORD."
            )
        logger.info("Default client: %s (%s)", default.name, default.source.value)

        yield {"resolver": get_resolver()}
    except ConfigurationError as e:
        logger.error("No WordPress clients configured: %s", e)
        raise
    finally:
        set_resolver(None)
        await _http.aclose()
        _http = None
        if _pool is not None:
            await _pool.close()
            logger.info("Connection pool closed")
            _pool = None
