from __future__ import annotations

from typing import Sequence

from .models import FetchAttempt


class CrawlError(Exception):
    """Base class for every error raised by the crawl engine."""


class InvalidSeedUrl(CrawlError):
    """The seed URL cannot be crawled. Fatal before the crawl starts."""


class FetchFailure(CrawlError):
    """Every fetch strategy failed for one URL."""

    def __init__(self, url: str, attempts: Sequence[FetchAttempt] = ()) -> None:
        self.url = url
        self.attempts = list(attempts)
        reasons = ", ".join(f"{a.strategy}={a.error_type}" for a in self.attempts) or "no strategies"
        super().__init__(f"all fetch strategies failed for {url} ({reasons})")


class ParseFailure(CrawlError):
    """The HTML could not be turned into a document."""


class ContentTooShort(CrawlError):
    """Extracted text is below the page's minimum length."""

    def __init__(self, url: str, length: int, threshold: int) -> None:
        self.url = url
        self.length = length
        self.threshold = threshold
        super().__init__(f"content too short for {url}: {length} < {threshold}")


class TransportFailure(CrawlError):
    """Top-level request handling failed."""
