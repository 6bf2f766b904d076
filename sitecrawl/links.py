from __future__ import annotations

import logging
from typing import List, Tuple, Union
from urllib.parse import urldefrag, urljoin, urlsplit

from bs4 import BeautifulSoup

from .classifier import is_content_url, is_listing_page
from .frontier import canonicalize_url
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)


def parse_html(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "html.parser")


class LinkExtractor:
    """Harvests same-domain, non-excluded links from a page.

    Output is deduplicated and keeps document order, so link discovery is
    deterministic for a given page.
    """

    def __init__(self, domain: str, rules: RuleSet = DEFAULT_RULES) -> None:
        self._domain = domain.lower()
        self._rules = rules

    @property
    def domain(self) -> str:
        return self._domain

    def is_same_domain(self, url: str) -> bool:
        try:
            host = (urlsplit(url).hostname or "").lower()
        except ValueError:
            return False
        return host == self._domain or host.endswith(f".{self._domain}")

    def is_excluded(self, url: str) -> bool:
        path = urlsplit(url).path
        return any(pattern.search(path) for pattern in self._rules.excluded_url_patterns)

    def extract_links(self, html: Union[str, BeautifulSoup], base_url: str, listing: bool = False) -> List[str]:
        """Resolve and filter anchors (and ``data-url`` triggers) on a page.

        With ``listing=True`` a link is kept only when its URL has a content
        shape or its anchor text is a known affordance such as "read more".
        """
        soup = parse_html(html)
        links: List[str] = []
        seen = set()

        for href, text in self._candidates(soup):
            url = self._resolve(href, base_url)
            if url is None or url in seen:
                continue
            if listing and not (is_content_url(url, self._rules) or self._is_affordance(text)):
                continue
            seen.add(url)
            links.append(url)

        return links

    def extract_listing_links(self, html: Union[str, BeautifulSoup], base_url: str) -> Tuple[List[str], List[str]]:
        """Split a listing page's links into (articles, sections).

        Articles are content links to scrape next; sections are further
        listing pages such as pagination.
        """
        soup = parse_html(html)
        articles = [u for u in self.extract_links(soup, base_url, listing=True) if not is_listing_page(u, self._rules)]
        sections = [u for u in self.extract_links(soup, base_url) if is_listing_page(u, self._rules)]
        return articles, sections

    def _candidates(self, soup: BeautifulSoup):
        for anchor in soup.select("a[href], [data-url]"):
            href = anchor.get("href") if anchor.name == "a" else None
            if href is None:
                href = anchor.get("data-url")
            text = anchor.get_text(" ", strip=True) or anchor.get("aria-label", "") or anchor.get("title", "")
            if href:
                yield href, text

    def _resolve(self, href: str, base_url: str):
        href = href.strip()
        if not href or href.startswith("#"):
            return None
        if href.lower().startswith(self._rules.skipped_schemes):
            return None
        try:
            absolute, _fragment = urldefrag(urljoin(base_url, href))
            if urlsplit(absolute).scheme not in ("http", "https"):
                return None
        except ValueError:
            logger.debug("Skipping malformed href %r on %s", href, base_url)
            return None
        if not self.is_same_domain(absolute) or self.is_excluded(absolute):
            return None
        return canonicalize_url(absolute)

    def _is_affordance(self, text: str) -> bool:
        lowered = " ".join(text.lower().split())
        return any(phrase in lowered for phrase in self._rules.affordance_phrases)
