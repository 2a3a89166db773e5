"""Universal content lookup across posts, pages and special pages.

Users reference WordPress content loosely: a "page" might be an ordinary
page, a post, or the static front page configured in the site settings.
``find_content`` resolves such references with an ordered cascade:

1. direct ID lookup (posts, then pages)
2. special pages from the site settings (homepage, blog page, privacy policy)
3. slug or free-text search (posts, then pages)

Each lookup is a probe returning a result or None; the first hit wins.
"""

from __future__ import annotations

from functools import partial
from typing import Any, NamedTuple

from .config import WP_API_NAMESPACE, logger
from .models import ContentLocator, ContentType, ResolvedContent, SpecialPageType
from .utils import first_match, rendered
from .wordpress import WordPressClient


class SpecialPage(NamedTuple):
    """A settings-designated page and the slugs that address it."""

    type: SpecialPageType
    setting: str
    aliases: tuple[str, ...]


SPECIAL_PAGES = [
    SpecialPage(SpecialPageType.HOMEPAGE, "page_on_front", ("home", "homepage")),
    SpecialPage(SpecialPageType.BLOG_PAGE, "page_for_posts", ("blog",)),
    SpecialPage(
        SpecialPageType.PRIVACY_POLICY,
        "wp_page_for_privacy_policy",
        ("privacy", "privacy-policy"),
    ),
]

COLLECTIONS = {ContentType.POST: "posts", ContentType.PAGE: "pages"}


def special_page_id(settings: dict[str, Any], page: SpecialPage) -> int | None:
    """Return the configured page ID for a special page, if any.

    A front page only counts when the site shows a static page on front.
    """
    if page.type is SpecialPageType.HOMEPAGE and settings.get("show_on_front") != "page":
        return None
    return settings.get(page.setting) or None


def to_resolved(
    item: dict[str, Any],
    content_type: ContentType,
    special: SpecialPageType | None = None,
) -> ResolvedContent:
    """Project a WordPress post/page object onto ResolvedContent."""
    return ResolvedContent(
        found=True,
        type=content_type,
        id=item.get("id"),
        title=rendered(item, "title"),
        slug=item.get("slug"),
        content=rendered(item, "content"),
        excerpt=rendered(item, "excerpt") if content_type is ContentType.POST else None,
        url=item.get("link"),
        date=item.get("date"),
        status=item.get("status"),
        special_type=special,
        is_special_page=True if special else None,
    )


async def _by_id(
    wp: WordPressClient, content_type: ContentType, content_id: int
) -> ResolvedContent | None:
    item = await wp.try_get(f"{WP_API_NAMESPACE}/{COLLECTIONS[content_type]}/{content_id}")
    if not item:
        return None
    return to_resolved(item, content_type)


async def _special_page(
    wp: WordPressClient,
    settings: dict[str, Any],
    page: SpecialPage,
    slug: str,
) -> ResolvedContent | None:
    page_id = special_page_id(settings, page)
    if not page_id:
        return None
    item = await wp.try_get(f"{WP_API_NAMESPACE}/pages/{page_id}")
    if not item:
        return None
    if item.get("slug") != slug and slug not in page.aliases:
        return None
    return to_resolved(item, ContentType.PAGE, special=page.type)


async def _special_pages(wp: WordPressClient, slug: str) -> ResolvedContent | None:
    settings = await wp.try_get(f"{WP_API_NAMESPACE}/settings")
    if not isinstance(settings, dict):
        logger.debug("Site settings unavailable; skipping special pages")
        return None
    return await first_match(
        partial(_special_page, wp, settings, page, slug) for page in SPECIAL_PAGES
    )


async def _first_listed(
    wp: WordPressClient, content_type: ContentType, params: dict[str, Any]
) -> ResolvedContent | None:
    items = await wp.try_get(f"{WP_API_NAMESPACE}/{COLLECTIONS[content_type]}", params)
    if not items:
        return None
    return to_resolved(items[0], content_type)


def build_probes(locator: ContentLocator, wp: WordPressClient) -> list:
    """Ordered lookups for a locator; only the stages it can use are included."""
    probes = []
    slug = locator.effective_slug

    if locator.id:
        probes += [
            partial(_by_id, wp, ContentType.POST, locator.id),
            partial(_by_id, wp, ContentType.PAGE, locator.id),
        ]

    if slug and not locator.search:
        probes.append(partial(_special_pages, wp, slug))

    params: dict[str, Any] = {"per_page": 1}
    if slug:
        params["slug"] = slug
    elif locator.search:
        params["search"] = locator.search
    if len(params) > 1:
        probes += [
            partial(_first_listed, wp, ContentType.POST, params),
            partial(_first_listed, wp, ContentType.PAGE, params),
        ]

    return probes


async def find_content(locator: ContentLocator, wp: WordPressClient) -> ResolvedContent:
    """Locate content by ID, slug, URL or search term.

    Args:
        locator: What the caller knows about the content.
        wp: Client bound to the tenant to search.

    Returns:
        ResolvedContent with found=True on the first hit, otherwise a miss
        that echoes the normalized search parameters.
    """
    result = await first_match(build_probes(locator, wp))
    if result is not None:
        return result

    return ResolvedContent(
        found=False,
        message="Content not found in posts, pages, or special pages",
        search_params={
            "slug": locator.effective_slug,
            "search": locator.search,
            "id": locator.id,
        },
    )


async def get_special_pages(wp: WordPressClient) -> dict[str, Any]:
    """Describe every special page configured in the site settings.

    Pages that cannot be fetched are reported with an error entry instead of
    failing the whole call.
    """
    settings = await wp.get(f"{WP_API_NAMESPACE}/settings")
    pages: dict[str, Any] = {}

    for page in SPECIAL_PAGES:
        page_id = special_page_id(settings, page)
        if not page_id:
            if page.type is SpecialPageType.HOMEPAGE:
                pages[page.type.value] = {
                    "type": "posts",
                    "description": "Homepage shows latest posts",
                }
            continue

        item = await wp.try_get(f"{WP_API_NAMESPACE}/pages/{page_id}")
        if item is None:
            pages[page.type.value] = {
                "id": page_id,
                "error": "Page not found or not accessible",
            }
            continue
        pages[page.type.value] = {
            "id": item.get("id"),
            "title": rendered(item, "title"),
            "slug": item.get("slug"),
            "url": item.get("link"),
            "status": item.get("status"),
            "type": "page",
        }

    pages["_settings"] = {
        "show_on_front": settings.get("show_on_front"),
        "posts_per_page": settings.get("posts_per_page"),
        "default_category": settings.get("default_category"),
    }
    return pages
