"""Exception types raised by the gateway."""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigurationError(GatewayError):
    """No usable tenant is configured, or the selected tenant is incomplete."""


class TenantNotFoundError(GatewayError):
    """A specific tenant identifier matched nothing.

    Attributes:
        identifier: The identifier that was requested.
        known: Listing entries ({id, name, domain, source}) for every known tenant.
    """

    def __init__(self, identifier: str, known: list[dict[str, Any]]):
        self.identifier = identifier
        self.known = known
        if known:
            listing = ", ".join(
                f"{t['id']} ({t.get('domain') or 'no domain'})" for t in known
            )
        else:
            listing = "none"
        super().__init__(
            f"Client '{identifier}' not found. Known clients: {listing}. "
            "Pass one of these IDs, a client name, or a site domain as 'client'."
        )


class AuthorizationError(GatewayError):
    """The shared API key was missing or wrong."""

    def __init__(self, message: str = "Unauthorized: Invalid API Key"):
        super().__init__(message)


class UpstreamUnavailableError(GatewayError):
    """WordPress could not be reached (connection failure or timeout)."""


class UpstreamError(GatewayError):
    """WordPress answered with a non-2xx status or an unparseable body.

    Attributes:
        status: HTTP status code, or None when no request was sent.
        body: Parsed JSON body, or the raw text when it was not JSON.
    """

    def __init__(self, message: str, status: int | None = None, body: Any = None):
        self.status = status
        self.body = body
        super().__init__(message)


class WooCommerceCredentialsError(UpstreamError):
    """A WooCommerce endpoint was called for a tenant without consumer keys."""
