"""Pydantic models for tenants and content lookup."""

from .base import ContentType, SpecialPageType, TenantSource
from .content import ContentLocator, ResolvedContent
from .tenants import TenantConfig

__all__ = [
    # Base
    "TenantSource",
    "ContentType",
    "SpecialPageType",
    # Tenants
    "TenantConfig",
    # Content lookup
    "ContentLocator",
    "ResolvedContent",
]
