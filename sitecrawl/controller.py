from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit
from urllib.robotparser import RobotFileParser

from .base import FetchStrategy
from .classifier import is_listing_page
from .config import validate_seed_url
from .errors import ContentTooShort, FetchFailure, ParseFailure
from .extractor import ContentExtractor
from .factory import build_fetcher
from .fetchers import BROWSER_HEADERS, DirectFetch, FallbackFetcher
from .frontier import Frontier
from .links import LinkExtractor
from .models import MAX_PAGES_CEILING, ContentType, CrawlConfig, CrawlResult, ExtractedItem, FrontierEntry, PageEvent
from .rate_limiter import RateLimiter
from .rules import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

Listener = Callable[[PageEvent], None]


class CrawlPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    CAPPED = "capped"
    STOPPED = "stopped"
    DONE = "done"


@dataclass
class CrawlState:
    """Everything one crawl accumulates. Owned by a single controller."""

    frontier: Frontier
    items: List[ExtractedItem] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)
    processed: int = 0
    phase: CrawlPhase = CrawlPhase.IDLE


def team_id_for(domain: str) -> str:
    """``www.example.co.uk`` -> ``example_co_uk``."""
    if domain.startswith("www."):
        domain = domain[len("www."):]
    return domain.replace(".", "_")


class CrawlController:
    """Single-threaded crawl loop over one domain.

    Idle -> Running -> (Draining | Capped | Stopped) -> Done. Each step pops
    one frontier entry, fetches it, and either harvests a listing page's
    article links (pushed to the head of the frontier) or extracts a content
    page and queues its links at the tail. Per-page failures are recorded and
    never end the crawl.
    """

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Optional[FallbackFetcher] = None,
        rules: RuleSet = DEFAULT_RULES,
        listeners: Iterable[Listener] = (),
        robots_strategy: Optional[FetchStrategy] = None,
    ) -> None:
        self._config = config
        self._domain = validate_seed_url(config.seed_url)
        self._rules = rules
        self._stop_event = threading.Event()
        self._fetcher = fetcher or build_fetcher(config)
        self._limiter = RateLimiter(config.delay_seconds, self._stop_event)
        self._links = LinkExtractor(self._domain, rules)
        self._extractor = ContentExtractor(rules)
        self._listeners: List[Listener] = list(listeners)
        self._robots_strategy = robots_strategy or DirectFetch(timeout=config.robots_timeout)
        self._max_pages = min(config.max_pages, MAX_PAGES_CEILING)

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def team_id(self) -> str:
        return team_id_for(self._domain)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def stop(self) -> None:
        """Ask the loop to finish after the current page. Results so far are kept."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def new_state(self) -> CrawlState:
        return CrawlState(frontier=Frontier(max_depth=self._config.max_depth))

    def start(self, state: CrawlState) -> None:
        """Seed the frontier and run the advisory robots.txt check."""
        state.frontier.push(FrontierEntry(url=self._config.seed_url, depth=0))
        state.phase = CrawlPhase.RUNNING
        logger.info("Starting crawl of %s (max_pages=%d, max_depth=%d)", self._config.seed_url, self._max_pages, self._config.max_depth)
        if self._config.respect_robots:
            self.check_robots()

    def run(self, state: Optional[CrawlState] = None) -> CrawlResult:
        """Crawl until the frontier drains, the page cap is hit or stop() is called."""
        state = state or self.new_state()
        if state.phase is CrawlPhase.IDLE:
            self.start(state)
        while self.step(state):
            pass
        return self.finish(state)

    def finish(self, state: CrawlState) -> CrawlResult:
        logger.info(
            "Crawl %s: processed %d pages, extracted %d items, %d failures",
            state.phase.value,
            state.processed,
            len(state.items),
            len(state.failures),
        )
        state.phase = CrawlPhase.DONE
        return CrawlResult(team_id=self.team_id, items=list(state.items))

    def step(self, state: CrawlState) -> bool:
        """Process at most one frontier entry. Returns False once the crawl is over."""
        if self._stop_event.is_set():
            state.phase = CrawlPhase.STOPPED
            return False
        if state.processed >= self._max_pages:
            state.phase = CrawlPhase.CAPPED
            return False

        entry = state.frontier.pop()
        if entry is None:
            state.phase = CrawlPhase.DRAINING
            return False
        if state.frontier.is_visited(entry.url) or entry.depth > self._config.max_depth:
            return True

        if not self._limiter.acquire():
            state.phase = CrawlPhase.STOPPED
            return False

        state.frontier.mark_visited(entry.url)
        state.processed += 1
        logger.info("Crawling page %d/%d: %s", state.processed, self._max_pages, entry.url)

        try:
            self._process(state, entry)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while processing %s", entry.url)
            state.failures.append((entry.url, type(exc).__name__))
            self._emit(state, "failed", entry, error_type=type(exc).__name__)
        return True

    def check_robots(self) -> Optional[bool]:
        """Fetch robots.txt and log whether the seed is allowed. Advisory only."""
        parts = urlsplit(self._config.seed_url)
        robots_url = f"{parts.scheme}://{parts.netloc}/robots.txt"
        attempt = self._robots_strategy.run(robots_url)
        if not attempt.success or attempt.body is None:
            logger.info("No robots.txt found or accessible at %s (%s)", robots_url, attempt.error_type)
            return None

        parser = RobotFileParser()
        parser.parse(attempt.body.splitlines())
        allowed = parser.can_fetch(BROWSER_HEADERS["User-Agent"], self._config.seed_url)
        logger.info("Found robots.txt (%d characters); seed allowed=%s", len(attempt.body), allowed)
        if not allowed:
            logger.warning("robots.txt disallows %s; continuing (advisory only)", self._config.seed_url)
        return allowed

    def _process(self, state: CrawlState, entry: FrontierEntry) -> None:
        try:
            html = self._fetcher.fetch(entry.url)
        except FetchFailure as exc:
            self._on_fetch_failure(state, entry, exc)
            return

        latency_ms = self._last_latency_ms()

        if is_listing_page(entry.url, self._rules):
            articles, sections = self._links.extract_listing_links(html, entry.url)
            if articles:
                queued = state.frontier.push_many(
                    [FrontierEntry(url=u, depth=entry.depth + 1, from_listing=True) for u in articles],
                    priority=True,
                )
                state.frontier.push_many([FrontierEntry(url=u, depth=entry.depth + 1) for u in sections])
                logger.info("Listing page %s: %d article links queued first", entry.url, queued)
                self._emit(state, "listing", entry, latency_ms=latency_ms, links_found=queued)
                return
            logger.info("Listing-shaped page %s has no article links, extracting it as content", entry.url)

        item, error_type = None, None
        try:
            item = self._extractor.extract_or_raise(html, entry.url, from_listing=entry.from_listing)
        except (ParseFailure, ContentTooShort) as exc:
            error_type = type(exc).__name__
            logger.info("No item for %s: %s", entry.url, exc)

        queued = state.frontier.push_many(
            [FrontierEntry(url=u, depth=entry.depth + 1) for u in self._links.extract_links(html, entry.url)]
        )

        if item is None:
            self._emit(state, "skipped", entry, latency_ms=latency_ms, error_type=error_type, links_found=queued)
            return

        state.items.append(item)
        logger.info("Extracted content: %r", item.title)
        self._emit(state, "extracted", entry, latency_ms=latency_ms, item=item, links_found=queued)

    def _on_fetch_failure(self, state: CrawlState, entry: FrontierEntry, exc: FetchFailure) -> None:
        latency_ms = sum(a.latency_ms for a in exc.attempts)
        if self._config.placeholder_on_failure and entry.depth == 0 and not state.items:
            logger.warning("All fetch methods failed for seed %s, adding placeholder item", entry.url)
            item = self._placeholder_item(entry.url, exc)
            state.items.append(item)
            self._emit(state, "placeholder", entry, latency_ms=latency_ms, item=item, error_type="FetchFailure")
            return

        logger.warning("Skipping %s: %s", entry.url, exc)
        state.failures.append((entry.url, "FetchFailure"))
        self._emit(state, "failed", entry, latency_ms=latency_ms, error_type="FetchFailure")

    def _placeholder_item(self, url: str, exc: FetchFailure) -> ExtractedItem:
        attempts = "\n".join(f"- {a.strategy}: {a.error_type}" for a in exc.attempts) or "- no fetch strategies configured"
        content = (
            "The page could not be fetched with any available method, so this item "
            "stands in for it and shows the expected output format.\n"
            f"Target URL: {url}\n"
            f"Domain: {self._domain}\n"
            f"Attempts:\n{attempts}"
        )
        return ExtractedItem(
            title="Placeholder Content - Site Unreachable",
            content=content,
            content_type=ContentType.DOCUMENTATION.value,
            source_url=url,
        )

    def _last_latency_ms(self) -> int:
        return sum(a.latency_ms for a in getattr(self._fetcher, "last_attempts", []))

    def _emit(self, state: CrawlState, kind: str, entry: FrontierEntry, **details) -> None:
        event = PageEvent(
            kind=kind,
            url=entry.url,
            depth=entry.depth,
            processed=state.processed,
            queued=len(state.frontier),
            **details,
        )
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Crawl listener %r failed on %s", listener, entry.url)
