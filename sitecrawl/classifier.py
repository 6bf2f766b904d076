from __future__ import annotations

from urllib.parse import urlsplit

from .rules import DEFAULT_RULES, RuleSet


def is_listing_page(url: str, rules: RuleSet = DEFAULT_RULES) -> bool:
    """Return True when the URL has the shape of a section root or one of its pages.

    Only the path (plus query, for ``?page=N`` pagination) is inspected; the
    page body plays no part in the decision.
    """
    parts = urlsplit(url)
    target = parts.path or "/"
    if parts.query:
        target = f"{target}?{parts.query}"
    return any(pattern.search(target) for pattern in rules.listing_patterns)


def is_content_url(url: str, rules: RuleSet = DEFAULT_RULES) -> bool:
    """Return True for date-stamped or slug paths under a known content root."""
    path = urlsplit(url).path or "/"
    if is_listing_page(url, rules):
        return False
    return any(pattern.search(path) for pattern in rules.content_url_patterns)
