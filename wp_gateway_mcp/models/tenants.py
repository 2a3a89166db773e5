"""Tenant record model shared by the database and environment sources."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domains import normalize_domain
from .base import TenantSource


class TenantConfig(BaseModel):
    """One managed WordPress site and the credentials used to reach it."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str | None = Field(default=None, description="Stable tenant identifier.")
    name: str = Field(..., description="Display name.")
    base_url: str = Field(default="", description="Site root URL.")
    username: str = Field(default="", description="WordPress username.")
    app_password: str = Field(
        default="",
        description="WordPress Application Password (scoped REST credential).",
        repr=False,
    )
    wc_key: str | None = Field(
        default=None, description="WooCommerce consumer key.", repr=False
    )
    wc_secret: str | None = Field(
        default=None, description="WooCommerce consumer secret.", repr=False
    )
    status: str | None = Field(default=None, description="Lifecycle flag.")
    source: TenantSource = Field(..., description="Provenance (diagnostics only).")

    @field_validator("base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, v: str | None) -> str:
        if not v:
            return ""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            v = f"https://{v}"
        return v

    @property
    def api_root(self) -> str:
        """REST root with exactly one ``/wp-json`` segment."""
        if "/wp-json" in self.base_url:
            return self.base_url
        return f"{self.base_url}/wp-json"

    @property
    def domain(self) -> str:
        return normalize_domain(self.base_url)

    @property
    def missing_fields(self) -> list[str]:
        """Required credential fields that are empty."""
        required = {
            "base_url": self.base_url,
            "username": self.username,
            "app_password": self.app_password,
        }
        return [field for field, value in required.items() if not value]

    @property
    def is_usable(self) -> bool:
        return not self.missing_fields

    @property
    def has_woocommerce(self) -> bool:
        return bool(self.wc_key and self.wc_secret)

    def summary(self) -> dict:
        """Credential-free listing entry."""
        entry = {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "source": self.source.value,
        }
        if self.status is not None:
            entry["status"] = self.status
        return entry
