"""WooCommerce product and order tools (REST API v3).

These endpoints authenticate with the client's WooCommerce consumer key and
secret; clients without them fail before any request is sent.
"""

from __future__ import annotations

from typing import Any, Literal

from mcp.server.fastmcp import Context

from ..config import WC_API_NAMESPACE
from ..db import get_wp_client
from ..utils import compact

OrderStatus = Literal[
    "pending",
    "processing",
    "on-hold",
    "completed",
    "cancelled",
    "refunded",
    "failed",
]


def _product_summary(p: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": p["id"],
        "name": p.get("name"),
        "sku": p.get("sku"),
        "price": p.get("price"),
        "status": p.get("status"),
        "stock_status": p.get("stock_status"),
        "permalink": p.get("permalink"),
    }


def _order_summary(o: dict[str, Any]) -> dict[str, Any]:
    billing = o.get("billing") or {}
    return {
        "id": o["id"],
        "number": o.get("number"),
        "status": o.get("status"),
        "total": o.get("total"),
        "currency": o.get("currency"),
        "date_created": o.get("date_created"),
        "customer": " ".join(
            part for part in (billing.get("first_name"), billing.get("last_name")) if part
        ),
        "email": billing.get("email"),
    }


def register_woocommerce_tools(mcp):
    """Register WooCommerce tools with the MCP server."""

    @mcp.tool(
        name="wc_get_products",
        annotations={
            "title": "List WooCommerce Products",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wc_get_products(
        per_page: int = 10,
        page: int = 1,
        search: str | None = None,
        status: str | None = None,
        sku: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WooCommerce products.

        Args:
            per_page: Number of products.
            page: Page number.
            search: Search term.
            status: Product status (publish, draft, private).
            sku: Filter by SKU.
            client: Client ID, name or domain (optional).

        Returns:
            dict: Products with id, name, sku, price, status and stock status.
        """
        wp = await get_wp_client(client)
        params = compact(per_page=per_page, page=page, search=search, status=status, sku=sku)
        products = await wp.get(f"{WC_API_NAMESPACE}/products", params)
        return {"products": [_product_summary(p) for p in products]}

    @mcp.tool(
        name="wc_get_product",
        annotations={
            "title": "Get a WooCommerce Product",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wc_get_product(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific WooCommerce product by ID."""
        wp = await get_wp_client(client)
        product = await wp.get(f"{WC_API_NAMESPACE}/products/{id}")
        return {
            **_product_summary(product),
            "regular_price": product.get("regular_price"),
            "sale_price": product.get("sale_price"),
            "stock_quantity": product.get("stock_quantity"),
            "short_description": product.get("short_description"),
            "categories": [c.get("name") for c in product.get("categories") or []],
        }

    @mcp.tool(
        name="wc_get_orders",
        annotations={
            "title": "List WooCommerce Orders",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wc_get_orders(
        per_page: int = 10,
        page: int = 1,
        status: str | None = None,
        after: str | None = None,
        before: str | None = None,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get WooCommerce orders.

        Args:
            per_page: Number of orders.
            page: Page number.
            status: Order status (processing, completed, etc).
            after: Only orders created after this ISO 8601 date.
            before: Only orders created before this ISO 8601 date.
            client: Client ID, name or domain (optional).
        """
        wp = await get_wp_client(client)
        params = compact(
            per_page=per_page, page=page, status=status, after=after, before=before
        )
        orders = await wp.get(f"{WC_API_NAMESPACE}/orders", params)
        return {"orders": [_order_summary(o) for o in orders]}

    @mcp.tool(
        name="wc_get_order",
        annotations={
            "title": "Get a WooCommerce Order",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wc_get_order(
        id: int,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Get a specific WooCommerce order by ID, with its line items."""
        wp = await get_wp_client(client)
        order = await wp.get(f"{WC_API_NAMESPACE}/orders/{id}")
        return {
            **_order_summary(order),
            "line_items": [
                {
                    "product_id": item.get("product_id"),
                    "name": item.get("name"),
                    "quantity": item.get("quantity"),
                    "total": item.get("total"),
                }
                for item in order.get("line_items") or []
            ],
            "shipping": order.get("shipping"),
        }

    @mcp.tool(
        name="wc_update_order_status",
        annotations={
            "title": "Update a WooCommerce Order Status",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def wc_update_order_status(
        id: int,
        status: OrderStatus,
        client: str | None = None,
        ctx: Context = None,
    ) -> dict[str, Any]:
        """Set the status of a WooCommerce order."""
        wp = await get_wp_client(client)
        order = await wp.put(f"{WC_API_NAMESPACE}/orders/{id}", {"status": status})
        return {"id": order["id"], "status": order.get("status")}
