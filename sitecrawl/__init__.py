"""Single-domain crawl and extraction engine.

Crawls one site from a seed URL, extracts readable content and authorship
from each page, classifies it, and returns a structured result set.

Key modules:
    models          -- CrawlConfig, FrontierEntry, ExtractedItem, CrawlResult dataclasses
    errors          -- CrawlError taxonomy
    config          -- building and validating CrawlConfig from payloads and env
    rules           -- RuleSet pattern tables driving every heuristic
    frontier        -- Frontier queue with priority head and visited set
    base            -- FetchStrategy abstract pipeline
    fetchers        -- direct, impersonated and proxy strategies, FallbackFetcher
    factory         -- building the default fallback chain
    classifier      -- listing-page and content-URL shape checks
    links           -- LinkExtractor for same-domain link harvesting
    extractor       -- ContentExtractor and content-type classification
    identity        -- author extraction and author-derived identities
    rate_limiter    -- RateLimiter spacing fetches, interruptible by stop
    controller      -- CrawlController state machine
    metrics         -- MetricsCollector listener producing CrawlStats
    output          -- JSON/CSV/Markdown rendering, validation, JsonlStorage
    server          -- FastAPI transport endpoint
"""

from .config import config_from_mapping
from .controller import CrawlController, CrawlPhase, CrawlState
from .errors import ContentTooShort, CrawlError, FetchFailure, InvalidSeedUrl, ParseFailure, TransportFailure
from .models import CrawlConfig, CrawlResult, ExtractedItem, FrontierEntry

__all__ = [
    "ContentTooShort",
    "CrawlConfig",
    "CrawlController",
    "CrawlError",
    "CrawlPhase",
    "CrawlResult",
    "CrawlState",
    "ExtractedItem",
    "FetchFailure",
    "FrontierEntry",
    "InvalidSeedUrl",
    "ParseFailure",
    "TransportFailure",
    "config_from_mapping",
]
