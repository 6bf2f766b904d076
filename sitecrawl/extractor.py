from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from .errors import ContentTooShort, ParseFailure
from .identity import derive_identity, extract_author
from .links import parse_html
from .models import ExtractedItem
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

_INLINE_WS_RE = re.compile(r"[ \t\f\v\r\u00a0\u200b]+")

BLOCK_TAGS = [
    "p", "div", "section", "article", "main", "blockquote", "pre", "figure", "figcaption",
    "ul", "ol", "li", "dl", "dt", "dd", "table", "tr", "td", "th",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr",
]


def clean_text(text: str) -> str:
    """Collapse runs of whitespace to single spaces, blank lines to single newlines, and trim."""
    if not text:
        return ""
    lines = (_INLINE_WS_RE.sub(" ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def mark_block_boundaries(soup: BeautifulSoup) -> None:
    """Put a newline around each block element so inline markup stays on one line."""
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(BLOCK_TAGS):
        block.insert_before("\n")
        block.insert_after("\n")


def classify_content_type(title: str, content: str, url: str, rules: RuleSet = DEFAULT_RULES) -> str:
    """Evaluate the content-type rules in order; the first match wins."""
    lowered = (title.lower(), content.lower(), url.lower())
    for rule in rules.content_type_rules:
        if rule.matches(*lowered):
            return rule.content_type.value
    return rules.default_content_type.value


class ContentExtractor:
    """Turns a content page into an ExtractedItem.

    The body is located with a selector waterfall over a noise-stripped
    document; the first candidate whose cleaned text clears the page threshold
    wins, otherwise the whole body is used.
    """

    def __init__(self, rules: RuleSet = DEFAULT_RULES) -> None:
        self._rules = rules

    def extract(self, html: str, url: str, from_listing: bool = False) -> Optional[ExtractedItem]:
        """Return the item, or None when the page cannot be parsed or is too short."""
        try:
            return self.extract_or_raise(html, url, from_listing=from_listing)
        except (ParseFailure, ContentTooShort) as exc:
            logger.info("No item for %s: %s", url, exc)
            return None

    def extract_or_raise(self, html: str, url: str, from_listing: bool = False) -> ExtractedItem:
        soup = self._parse(html, url)
        threshold = self.threshold(from_listing)

        title = self.extract_title(soup)
        author = extract_author(soup)

        self.strip_noise(soup)
        content = self.extract_body(soup, threshold)
        if len(content) < threshold:
            raise ContentTooShort(url, len(content), threshold)

        content = content[: self._rules.max_content_length]
        return ExtractedItem(
            title=title,
            content=content,
            content_type=classify_content_type(title, content, url, self._rules),
            source_url=url,
            author=author,
            identity_id=derive_identity(author) if author else None,
        )

    def threshold(self, from_listing: bool) -> int:
        return self._rules.article_min_length if from_listing else self._rules.page_min_length

    def extract_title(self, soup: BeautifulSoup) -> str:
        for selector in self._rules.heading_selectors:
            heading = soup.select_one(selector)
            if heading:
                text = " ".join(heading.get_text(" ", strip=True).split())
                if text:
                    return text[: self._rules.max_title_length]
        if soup.title and soup.title.string:
            text = " ".join(soup.title.string.split())
            if text:
                return text[: self._rules.max_title_length]
        return "Untitled"

    def strip_noise(self, soup: BeautifulSoup) -> None:
        for selector in self._rules.noise_selectors:
            for element in soup.select(selector):
                if not element.decomposed:
                    element.decompose()

    def extract_body(self, soup: BeautifulSoup, threshold: int) -> str:
        mark_block_boundaries(soup)
        for selector in self._rules.content_selectors:
            for candidate in soup.select(selector):
                text = clean_text(candidate.get_text(""))
                if len(text) >= threshold:
                    logger.debug("Content located with selector %r", selector)
                    return text

        body = soup.body or soup
        return clean_text(body.get_text(""))

    @staticmethod
    def _parse(html: str, url: str) -> BeautifulSoup:
        if not html or not html.strip():
            raise ParseFailure(f"empty document for {url}")
        try:
            return parse_html(html)
        except Exception as exc:  # noqa: BLE001
            raise ParseFailure(f"could not parse {url}: {type(exc).__name__}") from exc
