"""Rule tables driving the extraction heuristics.

Every heuristic in the engine (content location, noise removal, content-type
classification, URL exclusion, listing detection, link affordances) reads its
patterns from a ``RuleSet``. Ordered tables are evaluated first-match-wins, so
their order is part of their behaviour.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern, Tuple

from .models import ContentType

SECTION_ROOTS = r"(?:blog|news|articles?|posts|stories|insights|resources|guides?|docs|podcasts?)"


@dataclass(frozen=True)
class ContentTypeRule:
    """Match when any URL, title or content token occurs in the lowercased text."""

    content_type: ContentType
    url_tokens: Tuple[str, ...] = ()
    title_tokens: Tuple[str, ...] = ()
    content_tokens: Tuple[str, ...] = ()

    def matches(self, title: str, content: str, url: str) -> bool:
        return (
            any(tok in url for tok in self.url_tokens)
            or any(tok in title for tok in self.title_tokens)
            or any(tok in content for tok in self.content_tokens)
        )


CONTENT_TYPE_RULES: Tuple[ContentTypeRule, ...] = (
    ContentTypeRule(ContentType.BLOG, url_tokens=("blog",), title_tokens=("blog",)),
    ContentTypeRule(ContentType.DOCUMENTATION, url_tokens=("/docs/",), title_tokens=("documentation",)),
    ContentTypeRule(ContentType.ARTICLE, url_tokens=("/article/",), title_tokens=("article",)),
    ContentTypeRule(ContentType.GUIDE, url_tokens=("/guide/",), title_tokens=("guide",)),
    ContentTypeRule(ContentType.TRANSCRIPT, content_tokens=("transcript",)),
    ContentTypeRule(ContentType.PODCAST_TRANSCRIPT, url_tokens=("/podcast/",)),
)

# Most specific first.
CONTENT_SELECTORS: Tuple[str, ...] = (
    "article",
    '[role="main"]',
    "main",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".article-body",
    ".post-body",
    ".blog-post",
    ".story-body",
    ".markdown-body",
    "#content",
    ".content",
    ".main-content",
    ".post",
    ".entry",
)

NOISE_SELECTORS: Tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "template",
    "iframe",
    "nav",
    "header",
    "footer",
    "aside",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    ".ad",
    ".ads",
    ".advert",
    ".advertisement",
    ".sidebar",
    "#sidebar",
    ".comments",
    "#comments",
    ".comment",
    ".cookie-banner",
    ".newsletter",
    ".share",
    ".social-share",
)

HEADING_SELECTORS: Tuple[str, ...] = (
    "h1",
    ".entry-title",
    ".post-title",
    '[itemprop="headline"]',
)

EXCLUDED_URL_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\.(?:jpe?g|png|gif|svg|webp|ico|bmp|pdf|docx?|xlsx?|pptx?|zip|rar|gz|tar|7z|mp3|mp4|wav|avi|mov|webm|exe|dmg)$", re.I),
    re.compile(r"/api/", re.I),
    re.compile(r"/admin/", re.I),
    re.compile(r"/(?:login|logout|signin|signup|register|auth)(?:/|$)", re.I),
    re.compile(r"/search(?:/|$)", re.I),
    re.compile(r"/tags?/", re.I),
    re.compile(r"/categor(?:y|ies)/", re.I),
)

LISTING_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(rf"^/{SECTION_ROOTS}/?$", re.I),
    re.compile(rf"^/{SECTION_ROOTS}/page/\d+/?$", re.I),
    re.compile(rf"^/{SECTION_ROOTS}/?\?(?:.*&)?page=\d+", re.I),
)

CONTENT_URL_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"/\d{4}/\d{1,2}(?:/\d{1,2})?/[\w%-]+", re.I),
    re.compile(rf"^/{SECTION_ROOTS}/[\w%-]+(?:/[\w%-]+)*/?$", re.I),
)

AFFORDANCE_PHRASES: Tuple[str, ...] = (
    "read more",
    "continue reading",
    "full article",
    "read full story",
    "read the full",
    "read article",
    "read post",
    "learn more",
    "view post",
)

SKIPPED_SCHEMES: Tuple[str, ...] = ("javascript:", "mailto:", "tel:", "data:", "ftp:")


@dataclass(frozen=True)
class RuleSet:
    """One parameterization of the crawl engine."""

    content_selectors: Tuple[str, ...] = CONTENT_SELECTORS
    noise_selectors: Tuple[str, ...] = NOISE_SELECTORS
    heading_selectors: Tuple[str, ...] = HEADING_SELECTORS
    content_type_rules: Tuple[ContentTypeRule, ...] = CONTENT_TYPE_RULES
    default_content_type: ContentType = ContentType.OTHER
    excluded_url_patterns: Tuple[Pattern[str], ...] = EXCLUDED_URL_PATTERNS
    listing_patterns: Tuple[Pattern[str], ...] = LISTING_PATTERNS
    content_url_patterns: Tuple[Pattern[str], ...] = CONTENT_URL_PATTERNS
    affordance_phrases: Tuple[str, ...] = AFFORDANCE_PHRASES
    skipped_schemes: Tuple[str, ...] = SKIPPED_SCHEMES
    article_min_length: int = 200
    page_min_length: int = 100
    max_content_length: int = 20000
    max_title_length: int = 500
    tracking_params: frozenset = field(
        default_factory=lambda: frozenset({"utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content", "gclid", "fbclid"})
    )


DEFAULT_RULES = RuleSet()
