from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

MAX_PAGES_CEILING = 1000


class ContentType(str, Enum):
    BLOG = "blog"
    DOCUMENTATION = "documentation"
    ARTICLE = "article"
    GUIDE = "guide"
    TRANSCRIPT = "transcript"
    PODCAST_TRANSCRIPT = "podcast_transcript"
    OTHER = "other"


@dataclass(frozen=True)
class CrawlConfig:
    seed_url: str
    max_pages: int = 50
    delay_seconds: float = 1.0
    max_depth: int = 3
    respect_robots: bool = True
    placeholder_on_failure: bool = False
    direct_timeout: float = 10.0
    proxy_timeout: float = 15.0
    robots_timeout: float = 5.0


@dataclass(frozen=True)
class FrontierEntry:
    url: str
    depth: int = 0
    from_listing: bool = False


@dataclass(frozen=True)
class ExtractedItem:
    title: str
    content: str
    content_type: str
    source_url: str
    author: Optional[str] = None
    identity_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; optional fields are omitted when unset."""
        data: Dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "content_type": self.content_type,
            "source_url": self.source_url,
        }
        if self.author:
            data["author"] = self.author
        if self.identity_id:
            data["user_id"] = self.identity_id
        return data


@dataclass(frozen=True)
class CrawlResult:
    team_id: str
    items: List[ExtractedItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"team_id": self.team_id, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class FetchAttempt:
    strategy: str
    url: str
    success: bool
    status_code: Optional[int]
    latency_ms: int
    body: Optional[str]
    error_type: Optional[str]


@dataclass(frozen=True)
class PageEvent:
    kind: str
    url: str
    depth: int
    processed: int
    queued: int
    latency_ms: int = 0
    item: Optional[ExtractedItem] = None
    error_type: Optional[str] = None
    links_found: int = 0


@dataclass(frozen=True)
class CrawlStats:
    pages_processed: int
    items_extracted: int
    listing_pages: int
    failures: int
    skipped: int
    avg_latency_ms: float
