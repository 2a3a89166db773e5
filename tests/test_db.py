"""Tests for the client directory query and server lifecycle."""

from contextlib import asynccontextmanager

import pytest
from psycopg_pool import PoolTimeout

from wp_gateway_mcp import db
from wp_gateway_mcp.errors import ConfigurationError
from wp_gateway_mcp.models import TenantSource
from wp_gateway_mcp.tenants import TenantCache

ACME_ROW = {
    "id": 1,
    "name": "Acme",
    "wordpress_url": "https://acme.com",
    "wordpress_username": "api",
    "wordpress_app_password": "secret",
    "wordpress_client_id": "acme",
    "woocommerce_consumer_key": None,
    "woocommerce_consumer_secret": None,
    "status": "active",
}


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    async def execute(self, query):
        self.executed.append(query)

    async def fetchall(self):
        return self.rows


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor

    @asynccontextmanager
    async def cursor(self, row_factory=None):
        yield self._cursor


class FakePool:
    """Stands in for psycopg_pool.AsyncConnectionPool."""

    def __init__(self, rows):
        self.cur = FakeCursor(rows)
        self.in_use = False

    @asynccontextmanager
    async def connection(self, timeout=None):
        self.in_use = True
        try:
            yield FakeConnection(self.cur)
        finally:
            self.in_use = False


class FlakyPool(FakePool):
    """Pool whose database is unreachable for the first few connections."""

    failures = 2

    def __init__(self, conninfo, **kwargs):
        super().__init__([ACME_ROW])
        self.conninfo = conninfo
        self.kwargs = kwargs
        self.remaining_failures = self.failures
        self.closed = True
        self.opened_with_wait = None

    async def open(self, wait=False, timeout=30.0):
        self.closed = False
        self.opened_with_wait = wait

    async def close(self):
        self.closed = True

    @asynccontextmanager
    async def connection(self, timeout=None):
        if self.remaining_failures:
            self.remaining_failures -= 1
            raise PoolTimeout("couldn't get a connection after 5.00 sec")
        async with super().connection(timeout) as conn:
            yield conn


WP_ENV = ("WP_API_URL", "WP_API_USERNAME", "WP_API_PASSWORD", "ACTIVE_CLIENT")


@pytest.fixture
def clean_env(monkeypatch):
    """No database and no env tenants unless a test sets them."""
    monkeypatch.setattr(db, "DATABASE_URL", "")
    for name in WP_ENV:
        monkeypatch.delenv(name, raising=False)
    for i in range(1, 21):
        monkeypatch.delenv(f"CLIENT{i}_WP_API_URL", raising=False)
    return monkeypatch


class TestFetchTenants:
    """Tests for reading the clients table."""

    @pytest.mark.asyncio
    async def test_rows_become_tenants(self):
        pool = FakePool([ACME_ROW])

        tenants = await db.fetch_tenants(pool)

        assert [t.id for t in tenants] == ["acme"]
        assert tenants[0].source is TenantSource.DATABASE
        assert not pool.in_use
        assert len(pool.cur.executed) == 1

    @pytest.mark.asyncio
    async def test_unusable_rows_are_skipped(self):
        pool = FakePool(
            [
                dict(ACME_ROW, id=2, name=None),
                dict(ACME_ROW, id=3, name=None, wordpress_client_id=None),
                ACME_ROW,
            ]
        )

        tenants = await db.fetch_tenants(pool)

        assert [t.id for t in tenants] == ["acme"]

    @pytest.mark.asyncio
    async def test_row_without_woocommerce_columns(self):
        row = {k: v for k, v in ACME_ROW.items() if not k.startswith("woocommerce_")}

        tenants = await db.fetch_tenants(FakePool([row]))

        assert not tenants[0].has_woocommerce

    def test_query_shape(self):
        text = db.CLIENTS_QUERY.as_string(None)
        assert "name IS NOT NULL" in text
        assert "to_jsonb(c) ->> 'woocommerce_consumer_key'" in text


class TestOpenPool:
    """Tests for opening the client directory pool."""

    @pytest.mark.asyncio
    async def test_failed_startup_recovers(self, monkeypatch, clock):
        """A database that is down at startup is picked up by a later refresh."""
        monkeypatch.setattr(db, "DATABASE_URL", "postgresql://api@127.0.0.1:5432/clients")
        monkeypatch.setattr(db, "AsyncConnectionPool", FlakyPool)

        pool = await db.open_pool()

        assert not pool.closed
        assert pool.opened_with_wait is False

        cache = TenantCache(lambda: db.fetch_tenants(pool), clock=clock)
        assert await cache.get() is None
        assert cache.healthy is False

        tenants = await cache.get()
        assert [t.id for t in tenants] == ["acme"]
        assert cache.healthy is True

    @pytest.mark.asyncio
    async def test_not_configured(self, clean_env):
        assert await db.open_pool() is None


class TestLifespan:
    """Tests for app_lifespan."""

    @pytest.mark.asyncio
    async def test_env_only_startup(self, clean_env):
        clean_env.setenv("WP_API_URL", "https://main-site.org")
        clean_env.setenv("WP_API_USERNAME", "admin")
        clean_env.setenv("WP_API_PASSWORD", "pass")

        async with db.app_lifespan(None) as state:
            assert state["resolver"] is db.get_resolver()
            assert (await db.get_resolver().resolve()).id == "default"
            assert db.bind_client(db.get_resolver().env_tenants()[0])._http is db._http
            assert not db._http.is_closed

        with pytest.raises(RuntimeError):
            db.get_resolver()
        assert db._http is None

    @pytest.mark.asyncio
    async def test_refuses_incomplete_default(self, clean_env):
        clean_env.setenv("WP_API_URL", "https://main-site.org")

        with pytest.raises(ConfigurationError, match="missing username, app_password"):
            async with db.app_lifespan(None):
                pass

    @pytest.mark.asyncio
    async def test_refuses_without_clients(self, clean_env):
        with pytest.raises(ConfigurationError):
            async with db.app_lifespan(None):
                pass
