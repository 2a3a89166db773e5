"""Multi-tenant client directory: sources, TTL cache and resolver.

Tenants come from two places:

- the PostgreSQL ``clients`` table (cached for ``CACHE_TTL`` seconds), and
- numbered environment variable groups (``WP_API_*``, ``CLIENT1_WP_API_*`` ..
  ``CLIENT20_WP_API_*``), rebuilt on every call.

The resolver tries the database first and falls back to the environment.
"""

from __future__ import annotations

import os
import re
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import psycopg
from psycopg_pool import PoolTimeout

from .config import CACHE_TTL, MAX_ENV_CLIENTS, logger
from .domains import domains_overlap, fuzzy_domain_match, normalize_domain
from .errors import ConfigurationError, TenantNotFoundError
from .models import TenantConfig, TenantSource
from .utils import first_match

# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def _slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def tenant_from_row(row: Mapping[str, Any]) -> TenantConfig:
    """Build a tenant from a ``clients`` table row."""
    name = row["name"]
    client_id = row.get("wordpress_client_id") or _slugify(name)
    return TenantConfig(
        id=str(client_id),
        name=name,
        base_url=row.get("wordpress_url") or "",
        username=row.get("wordpress_username") or "",
        app_password=row.get("wordpress_app_password") or "",
        wc_key=row.get("woocommerce_consumer_key"),
        wc_secret=row.get("woocommerce_consumer_secret"),
        status=row.get("status"),
        source=TenantSource.DATABASE,
    )


def load_env_tenants(environ: Mapping[str, str] | None = None) -> list[TenantConfig]:
    """Build the default tenant plus up to MAX_ENV_CLIENTS numbered tenants.

    A tenant is included only when its URL variable is set.
    """
    env = os.environ if environ is None else environ
    tenants: list[TenantConfig] = []

    if env.get("WP_API_URL"):
        tenants.append(
            TenantConfig(
                id="default",
                name="Default",
                base_url=env["WP_API_URL"],
                username=env.get("WP_API_USERNAME", ""),
                app_password=env.get("WP_API_PASSWORD", ""),
                wc_key=env.get("WC_CONSUMER_KEY") or None,
                wc_secret=env.get("WC_CONSUMER_SECRET") or None,
                source=TenantSource.ENV,
            )
        )

    for i in range(1, MAX_ENV_CLIENTS + 1):
        prefix = f"CLIENT{i}"
        url = env.get(f"{prefix}_WP_API_URL")
        if not url:
            continue
        tenants.append(
            TenantConfig(
                id=f"client{i}",
                name=f"Client {i}",
                base_url=url,
                username=env.get(f"{prefix}_WP_API_USERNAME", ""),
                app_password=env.get(f"{prefix}_WP_API_PASSWORD", ""),
                wc_key=env.get(f"{prefix}_WC_CONSUMER_KEY") or None,
                wc_secret=env.get(f"{prefix}_WC_CONSUMER_SECRET") or None,
                source=TenantSource.ENV,
            )
        )

    return tenants


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TenantCache:
    """Time-bounded snapshot of the database tenant list.

    A failed refresh returns None for that call and keeps the previous
    snapshot in place; stale data is never served. Concurrent refreshes are
    not serialized (last writer wins).
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[TenantConfig]]],
        ttl: float = CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._ttl = ttl
        self._clock = clock
        self._value: list[TenantConfig] | None = None
        self._fetched_at: float | None = None
        self.healthy: bool | None = None

    async def get(self) -> list[TenantConfig] | None:
        now = self._clock()
        if (
            self._value is not None
            and self._fetched_at is not None
            and now - self._fetched_at < self._ttl
        ):
            return self._value

        try:
            tenants = await self._fetch()
        except (psycopg.Error, PoolTimeout, OSError) as e:
            logger.error("Error loading clients from database: %s", e)
            self.healthy = False
            return None

        self._value = tenants
        self._fetched_at = now
        self.healthy = True
        logger.info("Loaded %d WordPress clients from database", len(tenants))
        return tenants

    def invalidate(self) -> None:
        self._value = None
        self._fetched_at = None
        logger.info("Client cache invalidated")


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TenantResolver:
    """Select exactly one tenant for an optional identifier.

    Args:
        cache: Database tenant cache, or None when no database is configured.
        environ: Environment mapping read on every call (defaults to os.environ).
    """

    def __init__(
        self,
        cache: TenantCache | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.cache = cache
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    async def database_tenants(self) -> list[TenantConfig]:
        if self.cache is None:
            return []
        return await self.cache.get() or []

    def env_tenants(self) -> list[TenantConfig]:
        return load_env_tenants(self.environ)

    async def known_tenants(self) -> list[TenantConfig]:
        """Database tenants when there are any, else env tenants."""
        return await self.database_tenants() or self.env_tenants()

    async def list_tenants(self) -> list[dict[str, Any]]:
        """Credential-free listing of the active tenant source."""
        return [t.summary() for t in await self.known_tenants()]

    async def resolve(self, identifier: str | None = None) -> TenantConfig:
        """Resolve a tenant by ID, name or domain.

        Raises:
            TenantNotFoundError: The identifier matched none of the known tenants.
            ConfigurationError: No tenant is configured at all.
        """
        identifier = identifier.strip() if identifier else None
        db_tenants = await self.database_tenants()
        env_tenants = self.env_tenants()

        tenant = await first_match(
            [
                lambda: self._match_database(db_tenants, identifier),
                lambda: self._match_env(env_tenants, identifier),
            ]
        )
        if tenant is not None:
            return tenant

        known = [t.summary() for t in db_tenants + env_tenants]
        if known:
            selector = identifier or self.environ.get("ACTIVE_CLIENT") or "default"
            raise TenantNotFoundError(selector, known)
        raise ConfigurationError(
            "No WordPress clients configured. Set DATABASE_URL for the client "
            "directory, or WP_API_URL, WP_API_USERNAME and WP_API_PASSWORD."
        )

    async def _match_database(
        self, tenants: list[TenantConfig], identifier: str | None
    ) -> TenantConfig | None:
        if not tenants:
            return None
        if identifier is None:
            return tenants[0]

        wanted_domain = normalize_domain(identifier)
        for tenant in tenants:
            if tenant.id == identifier:
                logger.info("Resolved client '%s' by id (database)", identifier)
                return tenant
            if tenant.name.lower() == identifier.lower():
                logger.info("Resolved client '%s' by name (database)", identifier)
                return tenant
            if wanted_domain and tenant.domain == wanted_domain:
                logger.info("Resolved client '%s' by domain (database)", identifier)
                return tenant
        return None

    async def _match_env(
        self, tenants: list[TenantConfig], identifier: str | None
    ) -> TenantConfig | None:
        if not tenants:
            return None
        logger.debug("Using ENV fallback for client config")

        selector = identifier or self.environ.get("ACTIVE_CLIENT") or "default"
        if selector == "default":
            return next((t for t in tenants if t.id == "default"), tenants[0])

        lowered = selector.lower()
        for tenant in tenants:
            if tenant.id == lowered:
                logger.info("Resolved client '%s' by id (env)", selector)
                return tenant

        for tenant in tenants:
            rule = fuzzy_domain_match(tenant.domain, selector)
            if rule:
                logger.info(
                    "Resolved client '%s' to %s by %s match (env)",
                    selector,
                    tenant.id,
                    rule,
                )
                return tenant
        return None

    async def detect_by_url(self, url_like: str | None) -> str | None:
        """Return the ID of the first tenant whose domain overlaps the URL's.

        Overlap is substring-or-superset, so ambiguous domains resolve to the
        first listed tenant.
        """
        target = normalize_domain(url_like)
        if not target:
            return None
        for tenant in await self.known_tenants():
            if domains_overlap(tenant.domain, target):
                return tenant.id
        return None
