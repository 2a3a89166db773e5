"""Tests for tenant sources, the TTL cache and the resolver."""

import psycopg
import pytest

from wp_gateway_mcp.errors import ConfigurationError, TenantNotFoundError
from wp_gateway_mcp.models import TenantConfig, TenantSource
from wp_gateway_mcp.tenants import (
    TenantCache,
    TenantResolver,
    load_env_tenants,
    tenant_from_row,
)


def db_tenant(id, name, url):
    return TenantConfig(
        id=id,
        name=name,
        base_url=url,
        username="api",
        app_password="secret",
        source=TenantSource.DATABASE,
    )


class CountingFetch:
    """Async fetch callable that records how often it ran."""

    def __init__(self, tenants=None, error=None):
        self.tenants = tenants or []
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tenants)


class TestTenantFromRow:
    """Tests for building tenants from client table rows."""

    def test_uses_wordpress_client_id(self):
        row = {
            "id": 7,
            "name": "Acme Corp",
            "wordpress_url": "acme.example.com/",
            "wordpress_username": "api",
            "wordpress_app_password": "secret",
            "wordpress_client_id": "acme",
            "woocommerce_consumer_key": "ck",
            "woocommerce_consumer_secret": "cs",
            "status": "active",
        }
        tenant = tenant_from_row(row)
        assert tenant.id == "acme"
        assert tenant.base_url == "https://acme.example.com"
        assert tenant.has_woocommerce
        assert tenant.source is TenantSource.DATABASE

    def test_id_falls_back_to_slugified_name(self):
        row = {
            "name": "Acme  Corp",
            "wordpress_url": "https://acme.example.com",
            "wordpress_username": "api",
            "wordpress_app_password": "secret",
        }
        assert tenant_from_row(row).id == "acme-corp"


class TestLoadEnvTenants:
    """Tests for environment tenants."""

    def test_default_and_numbered(self, env):
        tenants = load_env_tenants(env)
        assert [t.id for t in tenants] == ["default", "client1", "client3"]
        assert all(t.source is TenantSource.ENV for t in tenants)

    def test_woocommerce_keys(self, env):
        by_id = {t.id: t for t in load_env_tenants(env)}
        assert by_id["client3"].has_woocommerce
        assert not by_id["client1"].has_woocommerce

    def test_requires_url(self):
        assert load_env_tenants({"CLIENT2_WP_API_USERNAME": "someone"}) == []


class TestTenantCache:
    """Tests for the TTL cache."""

    @pytest.mark.asyncio
    async def test_ttl(self, clock):
        """Values are reused inside the TTL and refetched after it."""
        fetch = CountingFetch([db_tenant("a", "A", "https://a.com")])
        cache = TenantCache(fetch, ttl=300, clock=clock)

        first = await cache.get()
        clock.now = 299
        assert await cache.get() is first
        assert fetch.calls == 1

        clock.now = 301
        await cache.get()
        assert fetch.calls == 2

    @pytest.mark.asyncio
    async def test_failure_returns_none(self, clock):
        fetch = CountingFetch(error=psycopg.OperationalError("connection refused"))
        cache = TenantCache(fetch, ttl=300, clock=clock)

        assert await cache.get() is None
        assert cache.healthy is False

    @pytest.mark.asyncio
    async def test_failed_refresh_does_not_serve_stale(self, clock):
        fetch = CountingFetch([db_tenant("a", "A", "https://a.com")])
        cache = TenantCache(fetch, ttl=300, clock=clock)
        await cache.get()

        fetch.error = psycopg.OperationalError("gone")
        clock.now = 400
        assert await cache.get() is None

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, clock):
        fetch = CountingFetch([db_tenant("a", "A", "https://a.com")])
        cache = TenantCache(fetch, ttl=300, clock=clock)
        await cache.get()

        cache.invalidate()
        await cache.get()
        assert fetch.calls == 2
        assert cache.healthy is True


class TestResolverDatabase:
    """Tests for resolution against database tenants."""

    @pytest.fixture
    def resolver(self, clock):
        tenants = [
            db_tenant("beta", "Beta Shop", "https://beta.com"),
            db_tenant("alpha", "Alpha Inc", "https://www.alpha.org"),
        ]
        return TenantResolver(TenantCache(CountingFetch(tenants), clock=clock), environ={})

    @pytest.mark.asyncio
    async def test_by_id_regardless_of_order(self, resolver):
        assert (await resolver.resolve("alpha")).id == "alpha"
        assert (await resolver.resolve("beta")).id == "beta"

    @pytest.mark.asyncio
    async def test_by_name_case_insensitive(self, resolver):
        assert (await resolver.resolve("alpha inc")).id == "alpha"

    @pytest.mark.asyncio
    async def test_by_domain(self, resolver):
        assert (await resolver.resolve("https://alpha.org/about")).id == "alpha"

    @pytest.mark.asyncio
    async def test_no_identifier_returns_first(self, resolver):
        assert (await resolver.resolve()).id == "beta"

    @pytest.mark.asyncio
    async def test_unknown_lists_every_tenant(self, resolver):
        with pytest.raises(TenantNotFoundError) as exc_info:
            await resolver.resolve("gamma")

        known = {t["id"] for t in exc_info.value.known}
        assert known == {"alpha", "beta"}
        assert "alpha (alpha.org)" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_default_without_env_tenants(self, resolver):
        """'default' names no database tenant; the error lists the ones that exist."""
        with pytest.raises(TenantNotFoundError) as exc_info:
            await resolver.resolve("default")

        assert exc_info.value.identifier == "default"
        assert {t["id"] for t in exc_info.value.known} == {"alpha", "beta"}


class TestResolverEnv:
    """Tests for the environment fallback."""

    @pytest.mark.asyncio
    async def test_database_down_falls_back_to_env(self, env, clock):
        cache = TenantCache(
            CountingFetch(error=psycopg.OperationalError("down")), clock=clock
        )
        resolver = TenantResolver(cache, environ=env)
        tenant = await resolver.resolve("client1")
        assert tenant.id == "client1"
        assert tenant.source is TenantSource.ENV

    @pytest.mark.asyncio
    async def test_default(self, env):
        assert (await TenantResolver(environ=env).resolve()).id == "default"

    @pytest.mark.asyncio
    async def test_active_client(self, env):
        resolver = TenantResolver(environ={**env, "ACTIVE_CLIENT": "client3"})
        assert (await resolver.resolve()).id == "client3"

    @pytest.mark.asyncio
    async def test_id_is_case_insensitive(self, env):
        assert (await TenantResolver(environ=env).resolve("CLIENT3")).id == "client3"

    @pytest.mark.asyncio
    async def test_fuzzy_domain(self, env):
        resolver = TenantResolver(environ=env)
        assert (await resolver.resolve("shop-example-com")).id == "client3"

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, env):
        with pytest.raises(TenantNotFoundError):
            await TenantResolver(environ=env).resolve("warehouse")

    @pytest.mark.asyncio
    async def test_nothing_configured(self):
        with pytest.raises(ConfigurationError):
            await TenantResolver(environ={}).resolve()

    @pytest.mark.asyncio
    async def test_env_reread_each_call(self, env):
        environ = dict(env)
        resolver = TenantResolver(environ=environ)
        environ["CLIENT5_WP_API_URL"] = "https://new.example.net"
        assert (await resolver.resolve("client5")).id == "client5"


class TestDetectByUrl:
    """Tests for URL-based client detection."""

    @pytest.mark.asyncio
    async def test_detects_numbered_client(self):
        environ = {
            "CLIENT1_WP_API_URL": "https://blog.acme.io",
            "CLIENT3_WP_API_URL": "https://shop.example.com",
        }
        resolver = TenantResolver(environ=environ)
        assert await resolver.detect_by_url("https://shop.example.com/any/path") == "client3"

    @pytest.mark.asyncio
    async def test_no_match(self, env):
        assert await TenantResolver(environ=env).detect_by_url("https://other.net") is None

    @pytest.mark.asyncio
    async def test_empty_url(self, env):
        assert await TenantResolver(environ=env).detect_by_url("") is None
