"""Hostname normalization and domain matching helpers."""

from __future__ import annotations

from urllib.parse import urlsplit


def normalize_domain(url_like: str | None) -> str:
    """Extract a lowercase hostname without a leading ``www.``.

    Accepts bare domains ("example.com/path"), full URLs and anything in
    between. Never raises; unparseable input degrades to a plain string split.
    """
    if not url_like:
        return ""
    value = url_like.strip()
    if not value.lower().startswith(("http://", "https://")):
        value = f"https://{value}"
    try:
        host = urlsplit(value).hostname or ""
    except ValueError:
        host = ""
    if not host:
        host = url_like.strip().lower().split("://")[-1].split("/")[0]
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def leading_label(domain: str) -> str:
    """Return the first dot-delimited label of a domain ("shop" for shop.example.com)."""
    return domain.split(".", 1)[0]


def domains_overlap(candidate: str, target: str) -> bool:
    """Substring-or-superset match used for URL-based tenant detection."""
    if not candidate or not target:
        return False
    return candidate in target or target in candidate


def fuzzy_domain_match(candidate: str, identifier: str) -> str | None:
    """Match an env tenant domain against a slug-like identifier.

    Hyphens in the identifier are read as dots, so "example-com" targets
    "example.com". Returns the name of the rule that matched, or None.
    """
    target = normalize_domain(identifier.replace("-", "."))
    if not candidate or not target:
        return None
    if candidate == target:
        return "domain"
    if leading_label(target) in candidate or leading_label(candidate) in target:
        return "domain-label"
    return None


def slug_from_url(url: str | None) -> str | None:
    """Return the last non-empty path segment of a URL.

    A bare site root ("https://example.com/") maps to "home".
    """
    if not url:
        return None
    value = url.strip()
    if "://" not in value:
        value = f"https://{value}"
    try:
        path = urlsplit(value).path
    except ValueError:
        path = url
    segments = [part for part in path.split("/") if part]
    if not segments:
        return "home"
    return segments[-1]
