"""Models for the universal content lookup."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..domains import slug_from_url
from .base import ContentType, SpecialPageType


class ContentLocator(BaseModel):
    """Sparse, user-supplied reference to a piece of content."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    id: int | None = Field(default=None, description="Post or page ID.", ge=1)
    slug: str | None = Field(default=None, description="Content slug.", max_length=200)
    url: str | None = Field(
        default=None,
        description="Full content URL; the last path segment is used as slug.",
        max_length=2000,
    )
    search: str | None = Field(
        default=None, description="Free-text search term.", max_length=200
    )

    @field_validator("slug", "url", "search")
    @classmethod
    def blank_as_missing(cls, v: str | None) -> str | None:
        return v or None

    @property
    def is_empty(self) -> bool:
        return not (self.id or self.slug or self.url or self.search)

    @property
    def effective_slug(self) -> str | None:
        """Explicit slug, else the slug derived from ``url``."""
        return self.slug or slug_from_url(self.url)


class ResolvedContent(BaseModel):
    """Outcome of the content cascade."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    found: bool
    type: ContentType | None = None
    id: int | None = None
    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    url: str | None = None
    date: str | None = None
    status: str | None = None
    special_type: SpecialPageType | None = None
    is_special_page: bool | None = None
    message: str | None = None
    search_params: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and without unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
