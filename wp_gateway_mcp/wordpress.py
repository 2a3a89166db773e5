"""Authenticated client for a tenant's WordPress and WooCommerce REST API."""

from __future__ import annotations

import json
from typing import Any

import httpx

from .config import REQUEST_TIMEOUT, WC_API_NAMESPACE, logger
from .errors import (
    ConfigurationError,
    UpstreamError,
    UpstreamUnavailableError,
    WooCommerceCredentialsError,
)
from .models import TenantConfig


class WordPressClient:
    """Issue REST calls against one tenant's ``/wp-json`` root.

    WordPress endpoints authenticate with HTTP Basic (Application Password).
    WooCommerce endpoints (``/wc/...``) authenticate with consumer key/secret
    query parameters instead, since WooCommerce reads Basic credentials as
    consumer keys.

    Example usage:
        wp = WordPressClient(tenant)
        post = await wp.get("/wp/v2/posts/42")
        orders = await wp.get("/wc/v3/orders", params={"status": "processing"})

    Raises:
        ConfigurationError: The tenant lacks a URL, username or app password.
    """

    def __init__(
        self,
        tenant: TenantConfig,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        if not tenant.is_usable:
            raise ConfigurationError(
                f"Invalid client configuration for: {tenant.id or tenant.name} "
                f"(missing {', '.join(tenant.missing_fields)})"
            )
        self.tenant = tenant
        self.api_root = tenant.api_root
        self._timeout = timeout
        self._transport = transport
        # Shared, caller-owned client; without one each request opens its own
        self._http = http

    @staticmethod
    def is_woocommerce(path: str) -> bool:
        return path.startswith("/wc/")

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make an authenticated request and return the parsed JSON body.

        Args:
            method: HTTP method (GET, POST, DELETE).
            path: Path below ``/wp-json`` (e.g. '/wp/v2/posts/42').
            params: Query parameters.
            json_body: JSON request body.
            content: Raw request body (media uploads).
            headers: Extra request headers.

        Returns:
            Parsed JSON response, or None for an empty body.

        Raises:
            WooCommerceCredentialsError: WooCommerce path without consumer keys.
            UpstreamError: Non-2xx response, or 2xx with invalid JSON.
            UpstreamUnavailableError: Connection failure or timeout.
        """
        query = dict(params or {})
        auth: httpx.Auth | None
        if self.is_woocommerce(path):
            if not self.tenant.has_woocommerce:
                raise WooCommerceCredentialsError(
                    f"WooCommerce credentials are not configured for client "
                    f"'{self.tenant.id or self.tenant.name}'. Set the WooCommerce "
                    "consumer key and secret for this client."
                )
            query["consumer_key"] = self.tenant.wc_key
            query["consumer_secret"] = self.tenant.wc_secret
            auth = None
        else:
            auth = httpx.BasicAuth(self.tenant.username, self.tenant.app_password)

        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        url = f"{self.api_root}{path}"
        send = {
            "params": query or None,
            "json": json_body,
            "content": content,
            "headers": request_headers,
            "auth": auth,
            "timeout": self._timeout,
        }
        try:
            if self._http is not None:
                response = await self._http.request(method, url, **send)
            else:
                async with httpx.AsyncClient(transport=self._transport) as client:
                    response = await client.request(method, url, **send)
        except httpx.TimeoutException as e:
            raise UpstreamUnavailableError(
                f"WordPress request timed out after {self._timeout}s: {method} {path}"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(f"WordPress request failed: {e}") from e

        return self._parse(response, method, path)

    def _parse(self, response: httpx.Response, method: str, path: str) -> Any:
        text = response.text
        try:
            data = json.loads(text) if text else None
        except ValueError:
            if response.is_success:
                raise UpstreamError(
                    f"Invalid JSON from WordPress: {text[:100]}",
                    status=response.status_code,
                    body=text,
                ) from None
            data = text

        if not response.is_success:
            logger.warning(
                "WordPress API error %s on %s %s", response.status_code, method, path
            )
            raise UpstreamError(
                f"WordPress API error ({response.status_code}): {json.dumps(data)}",
                status=response.status_code,
                body=data,
            )
        return data

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        return await self.request("POST", path, params=params, json_body=json_body, **kwargs)

    async def put(self, path: str, json_body: Any = None) -> Any:
        return await self.request("PUT", path, json_body=json_body)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def try_get(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET that reports an upstream error response as None.

        Used by lookups that fall through to the next candidate. Connection
        failures still raise.
        """
        try:
            return await self.get(path, params=params)
        except UpstreamError as e:
            logger.debug("Lookup %s missed: %s", path, e)
            return None
