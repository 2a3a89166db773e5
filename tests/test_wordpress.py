"""Tests for the upstream REST executor."""

import base64

import httpx
import pytest

from wp_gateway_mcp.errors import (
    ConfigurationError,
    UpstreamError,
    UpstreamUnavailableError,
    WooCommerceCredentialsError,
)
from wp_gateway_mcp.models import TenantConfig, TenantSource
from wp_gateway_mcp.wordpress import WordPressClient


class TestClientSetup:
    """Tests for client construction."""

    def test_incomplete_tenant_rejected(self):
        tenant = TenantConfig(
            id="half", name="Half", base_url="https://half.com", source=TenantSource.ENV
        )
        with pytest.raises(ConfigurationError, match="missing username, app_password"):
            WordPressClient(tenant)

    def test_api_root_has_single_wp_json(self):
        tenant = TenantConfig(
            name="X",
            base_url="https://x.com/wp-json/",
            username="u",
            app_password="p",
            source=TenantSource.ENV,
        )
        assert WordPressClient(tenant).api_root == "https://x.com/wp-json"


class TestRequests:
    """Tests for authenticated requests."""

    @pytest.mark.asyncio
    async def test_basic_auth_for_wordpress(self, wp, fake_wp):
        fake_wp.add("GET", "/wp-json/wp/v2/posts/42", {"id": 42})

        assert await wp.get("/wp/v2/posts/42") == {"id": 42}

        request = fake_wp.requests[0]
        expected = base64.b64encode(b"editor:abcd efgh ijkl mnop").decode()
        assert request.headers["authorization"] == f"Basic {expected}"
        assert request.headers["accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_shared_http_client(self, tenant, fake_wp):
        """A caller-owned client is reused across requests and left open."""
        fake_wp.add("GET", "/wp-json/wp/v2/posts/1", {"id": 1})

        async with httpx.AsyncClient(transport=fake_wp.transport) as http:
            client = WordPressClient(tenant, http=http)
            await client.get("/wp/v2/posts/1")
            await client.get("/wp/v2/posts/1")
            assert not http.is_closed

        assert len(fake_wp.requests) == 2
        assert fake_wp.requests[1].headers["authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_woocommerce_without_keys_sends_nothing(self, wp, fake_wp):
        with pytest.raises(WooCommerceCredentialsError):
            await wp.get("/wc/v3/orders")
        assert fake_wp.requests == []

    @pytest.mark.asyncio
    async def test_woocommerce_uses_consumer_keys(self, tenant, fake_wp):
        shop = tenant.model_copy(update={"wc_key": "ck_1", "wc_secret": "cs_2"})
        client = WordPressClient(shop, transport=fake_wp.transport)
        fake_wp.add("GET", "/wp-json/wc/v3/orders", [])

        await client.get("/wc/v3/orders", {"status": "processing"})

        request = fake_wp.requests[0]
        assert request.url.params["consumer_key"] == "ck_1"
        assert request.url.params["consumer_secret"] == "cs_2"
        assert request.url.params["status"] == "processing"
        assert "authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_error_status(self, wp, fake_wp):
        fake_wp.add(
            "GET",
            "/wp-json/wp/v2/posts/9",
            {"code": "rest_post_invalid_id", "message": "Invalid post ID."},
            status=404,
        )
        with pytest.raises(UpstreamError) as exc_info:
            await wp.get("/wp/v2/posts/9")

        assert exc_info.value.status == 404
        assert exc_info.value.body["code"] == "rest_post_invalid_id"
        assert "WordPress API error (404)" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self, tenant):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        client = WordPressClient(tenant, transport=transport)
        with pytest.raises(UpstreamError, match="Invalid JSON from WordPress"):
            await client.get("/wp/v2/posts")

    @pytest.mark.asyncio
    async def test_empty_body(self, tenant):
        transport = httpx.MockTransport(lambda request: httpx.Response(204))
        client = WordPressClient(tenant, transport=transport)
        assert await client.delete("/wp/v2/posts/1") is None

    @pytest.mark.asyncio
    async def test_connection_failure(self, tenant):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = WordPressClient(tenant, transport=httpx.MockTransport(refuse))
        with pytest.raises(UpstreamUnavailableError):
            await client.get("/wp/v2/posts")

    @pytest.mark.asyncio
    async def test_try_get_misses_on_error_status(self, wp, fake_wp):
        assert await wp.try_get("/wp/v2/pages/5") is None
        assert fake_wp.paths == ["/wp-json/wp/v2/pages/5"]

    @pytest.mark.asyncio
    async def test_post_sends_json(self, wp, fake_wp):
        fake_wp.add("POST", "/wp-json/wp/v2/posts", lambda r: {"id": 1, "sent": r.read().decode()})

        result = await wp.post("/wp/v2/posts", {"title": "Hi"})

        assert '"title"' in result["sent"]
        assert fake_wp.requests[0].headers["content-type"] == "application/json"
