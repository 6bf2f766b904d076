"""Author extraction and author-derived identities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from bs4 import BeautifulSoup

from .links import parse_html

MAX_AUTHOR_LENGTH = 100
BYLINE_RE = re.compile(r"\b[Bb]y\s+([A-Z][a-z]+\s+[A-Z][a-z]+)")
BY_PREFIX_RE = re.compile(r"^by\s+", re.I)


def _meta_content(soup: BeautifulSoup, selector: str) -> Optional[str]:
    tag = soup.select_one(selector)
    return tag.get("content") if tag else None


def _author_element(soup: BeautifulSoup) -> Optional[str]:
    for element in soup.select('[class*="author"]'):
        text = BY_PREFIX_RE.sub("", element.get_text(" ", strip=True))
        if text and len(text) <= MAX_AUTHOR_LENGTH:
            return text
    return None


def _byline(soup: BeautifulSoup) -> Optional[str]:
    match = BYLINE_RE.search(soup.get_text(" "))
    return match.group(1) if match else None


@dataclass(frozen=True)
class AuthorRule:
    name: str
    find: Callable[[BeautifulSoup], Optional[str]]


AUTHOR_RULES: Tuple[AuthorRule, ...] = (
    AuthorRule("meta-author", lambda soup: _meta_content(soup, 'meta[name="author" i]')),
    AuthorRule("article-author", lambda soup: _meta_content(soup, 'meta[property="article:author" i]')),
    AuthorRule("author-class", _author_element),
    AuthorRule("byline", _byline),
)


def extract_author(html: Union[str, BeautifulSoup], rules: Tuple[AuthorRule, ...] = AUTHOR_RULES) -> Optional[str]:
    """Return the first author found by the ordered rules, trimmed, or None."""
    soup = parse_html(html)
    for rule in rules:
        found = rule.find(soup)
        if found and found.strip():
            return " ".join(found.split())
    return None


def derive_identity(author: str) -> str:
    """Deterministic 32-bit rolling hash of the author name, as ``user_<digits>``.

    Iterates UTF-16 code units with ``h = h * 31 + unit`` wrapped to a signed
    32-bit integer; the absolute value is rendered. Collisions are possible.
    """
    h = 0
    encoded = author.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return f"user_{abs(h)}"
