"""Pytest configuration and shared fixtures."""

from functools import partial

import httpx
import pytest

from wp_gateway_mcp import db
from wp_gateway_mcp.models import TenantConfig, TenantSource
from wp_gateway_mcp.tenants import TenantResolver
from wp_gateway_mcp.wordpress import WordPressClient


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeWordPress:
    """In-memory WordPress REST API served through httpx.MockTransport.

    Routes are keyed by (method, path). A route body may be a callable taking
    the request, for responses that depend on query parameters. Unknown
    routes answer 404 like WordPress does.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"code": "rest_no_route", "message": "No route was found"}
            )
        status, body = route
        if callable(body):
            body = body(request)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list:
        return [r.url.path for r in self.requests]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_wp():
    return FakeWordPress()


@pytest.fixture
def tenant():
    """A usable tenant without WooCommerce keys."""
    return TenantConfig(
        id="acme",
        name="Acme",
        base_url="https://acme.example.com",
        username="editor",
        app_password="abcd efgh ijkl mnop",
        source=TenantSource.DATABASE,
    )


@pytest.fixture
def wp(tenant, fake_wp):
    return WordPressClient(tenant, transport=fake_wp.transport)


@pytest.fixture
def env():
    """Environment with a default tenant and two numbered tenants."""
    return {
        "WP_API_URL": "https://main-site.org",
        "WP_API_USERNAME": "admin",
        "WP_API_PASSWORD": "main-pass",
        "CLIENT1_WP_API_URL": "https://blog.acme.io",
        "CLIENT1_WP_API_USERNAME": "blogger",
        "CLIENT1_WP_API_PASSWORD": "blog-pass",
        "CLIENT3_WP_API_URL": "https://shop.example.com",
        "CLIENT3_WP_API_USERNAME": "shopkeeper",
        "CLIENT3_WP_API_PASSWORD": "shop-pass",
        "CLIENT3_WC_CONSUMER_KEY": "ck_123",
        "CLIENT3_WC_CONSUMER_SECRET": "cs_456",
    }


@pytest.fixture
def installed_resolver(env, fake_wp, monkeypatch):
    """Install an env-only resolver and route WordPress calls to fake_wp."""
    resolver = TenantResolver(cache=None, environ=env)
    db.set_resolver(resolver)
    bound = partial(WordPressClient, transport=fake_wp.transport)
    monkeypatch.setattr(db, "WordPressClient", bound)
    yield resolver
    db.set_resolver(None)
