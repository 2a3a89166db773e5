"""HTTP surface: health check, convenience routes and the JSON-RPC endpoint."""

from __future__ import annotations

import asyncio
import hmac
import json

from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .config import API_KEY, HTTP_ENDPOINTS, SERVER_VERSION, logger
from .content import find_content, get_special_pages
from .db import app_lifespan, bind_client, get_resolver
from .errors import AuthorizationError
from .models import ContentLocator
from .rpc import PARSE_ERROR, handle_rpc, rpc_error
from .tools.site import get_site_info
from .utils import handle_exception


def check_api_key(request: Request, api_key: str | None = None) -> None:
    """Require the shared secret as ``X-API-Key`` or ``Authorization: Bearer``.

    Does nothing when no key is configured.

    Raises:
        AuthorizationError: The key is missing or does not match.
    """
    if api_key is None:
        api_key = API_KEY
    if not api_key:
        return
    supplied = request.headers.get("x-api-key")
    if not supplied:
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer":
            supplied = token.strip()
    if not supplied or not hmac.compare_digest(supplied, api_key):
        raise AuthorizationError()


def error_json(e: Exception) -> JSONResponse:
    status, payload = handle_exception(e)
    return JSONResponse(payload, status_code=status)


async def health(request: Request) -> JSONResponse:
    resolver = get_resolver()
    tenants = await resolver.known_tenants()
    if resolver.cache is None:
        database = "not configured"
    elif resolver.cache.healthy:
        database = "connected"
    else:
        database = "unavailable"
    return JSONResponse(
        {
            "status": "ok",
            "version": SERVER_VERSION,
            "clients": len(tenants),
            "source": tenants[0].source.value if tenants else "none",
            "database": database,
        }
    )


async def list_clients(request: Request) -> JSONResponse:
    try:
        check_api_key(request)
        clients = await get_resolver().list_tenants()
    except Exception as e:
        return error_json(e)
    return JSONResponse({"clients": clients, "count": len(clients)})


async def find(request: Request) -> JSONResponse:
    """Resolve content from query parameters, auto-detecting the client from ``url``."""
    try:
        check_api_key(request)
        query = request.query_params
        raw_id = query.get("id")
        locator = ContentLocator(
            id=int(raw_id) if raw_id else None,
            slug=query.get("slug"),
            url=query.get("url"),
            search=query.get("search"),
        )
        if locator.is_empty:
            raise ValueError(
                "Missing search parameter. Provide one of: id, slug, url, or search"
            )

        resolver = get_resolver()
        client = query.get("client")
        auto_detected = False
        if not client and locator.url:
            client = await resolver.detect_by_url(locator.url)
            auto_detected = client is not None
            if auto_detected:
                logger.info("Auto-detected client from URL domain: %s", client)

        tenant = await resolver.resolve(client)
        result = await find_content(locator, bind_client(tenant))
    except Exception as e:
        return error_json(e)

    payload = result.to_dict()
    payload["_meta"] = {
        "client": tenant.id,
        "source": tenant.source.value,
        "autoDetected": auto_detected,
    }
    return JSONResponse(payload)


async def site_data(request: Request) -> JSONResponse:
    """Site settings and special pages in one response."""
    try:
        check_api_key(request)
        tenant = await get_resolver().resolve(request.query_params.get("client"))
        wp = bind_client(tenant)
        site, pages = await asyncio.gather(get_site_info(wp), get_special_pages(wp))
    except Exception as e:
        return error_json(e)

    return JSONResponse(
        {
            "site": site,
            "pages": pages,
            "_meta": {"client": tenant.id, "source": tenant.source.value},
        }
    )


async def not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        {"error": "Not found", "endpoints": HTTP_ENDPOINTS}, status_code=404
    )


def create_app(mcp: FastMCP) -> Starlette:
    """Build the Starlette application serving ``mcp`` over HTTP.

    Args:
        mcp: FastMCP server whose tools back ``POST /mcp``.
    """

    async def rpc_endpoint(request: Request) -> JSONResponse:
        try:
            check_api_key(request)
        except AuthorizationError as e:
            return error_json(e)

        try:
            message = json.loads(await request.body())
        except ValueError as e:
            return JSONResponse(rpc_error(None, PARSE_ERROR, "Parse error", e))
        return JSONResponse(await handle_rpc(mcp, message))

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/api/clients", list_clients, methods=["GET"]),
        Route("/api/find", find, methods=["GET"]),
        Route("/api/site-data", site_data, methods=["GET"]),
        Route("/mcp", rpc_endpoint, methods=["POST"]),
    ]
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    ]
    return Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={404: not_found},
        lifespan=app_lifespan,
    )
