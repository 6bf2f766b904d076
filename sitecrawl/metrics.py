from __future__ import annotations

from collections import Counter
from dataclasses import asdict
from threading import Lock
from typing import Dict, List

from .models import CrawlStats, PageEvent


class MetricsCollector:
    """Crawl listener that aggregates page events into CrawlStats.

    Register it with the controller; it is called synchronously as each page
    completes."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[PageEvent] = []

    def __call__(self, event: PageEvent) -> None:
        self.record(event)

    def record(self, event: PageEvent) -> None:
        with self._lock:
            self._events.append(event)

    def snapshot(self) -> CrawlStats:
        """Return aggregated counts over every recorded event."""
        with self._lock:
            events = list(self._events)
        kinds = Counter(e.kind for e in events)
        fetched = [e for e in events if e.kind != "failed"]
        avg_latency_ms = (sum(e.latency_ms for e in fetched) / len(fetched)) if fetched else 0.0

        return CrawlStats(
            pages_processed=len(events),
            items_extracted=kinds["extracted"] + kinds["placeholder"],
            listing_pages=kinds["listing"],
            failures=kinds["failed"],
            skipped=kinds["skipped"],
            avg_latency_ms=avg_latency_ms,
        )

    def export_json(self) -> List[Dict]:
        """Export recorded events as plain dictionaries."""
        with self._lock:
            return [asdict(e) for e in self._events]
