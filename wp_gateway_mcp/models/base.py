"""Base types and enums shared by the gateway models."""

from __future__ import annotations

from enum import Enum


class TenantSource(str, Enum):
    """Where a tenant record came from."""

    DATABASE = "database"
    ENV = "env"


class ContentType(str, Enum):
    """WordPress content kinds searched by the content cascade."""

    POST = "post"
    PAGE = "page"


class SpecialPageType(str, Enum):
    """Pages designated in the site settings rather than by content queries."""

    HOMEPAGE = "homepage"
    BLOG_PAGE = "blog_page"
    PRIVACY_POLICY = "privacy_policy"
