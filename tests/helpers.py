"""Shared fixtures for the crawl tests: canned pages and an offline fetcher."""

from typing import Dict, Iterable, List, Optional, Tuple

from sitecrawl.errors import FetchFailure
from sitecrawl.models import CrawlConfig

SENTENCE = "This is a sentence about crawling websites. "
ARTICLE_TEXT = SENTENCE * 14  # 616 characters


def article_page(
    title: str,
    body: str = ARTICLE_TEXT,
    links: Iterable[Tuple[str, str]] = (),
    author: Optional[str] = None,
) -> str:
    anchors = "".join(f'<a href="{href}">{text}</a>' for href, text in links)
    meta = f'<meta name="author" content="{author}">' if author else ""
    return (
        f"<html><head><title>{title}</title>{meta}</head><body>"
        f"<article><h1>{title}</h1><p>{body}</p></article>"
        f"<div class='links'>{anchors}</div>"
        "</body></html>"
    )


def listing_page(links: Iterable[Tuple[str, str]]) -> str:
    anchors = "".join(f'<li><a href="{href}">{text}</a></li>' for href, text in links)
    return f"<html><head><title>Blog</title></head><body><ul>{anchors}</ul></body></html>"


class FakeFetcher:
    """Serves pages from a dict; missing URLs fail like an exhausted fallback chain."""

    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = pages
        self.requested: List[str] = []
        self.last_attempts: list = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        html = self.pages.get(url)
        if html is None:
            raise FetchFailure(url, [])
        return html


def make_config(seed_url: str = "https://example.com/", **overrides) -> CrawlConfig:
    values = dict(max_pages=50, delay_seconds=0.0, max_depth=3, respect_robots=False)
    values.update(overrides)
    return CrawlConfig(seed_url=seed_url, **values)
