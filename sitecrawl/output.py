from __future__ import annotations

import csv
import io
import json
import queue
import threading
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import CrawlResult, ExtractedItem, PageEvent

CSV_HEADERS = ["source", "url", "content", "author", "content_type", "title"]
FORMATS = ("json", "csv", "markdown")


def to_json(result: CrawlResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


def to_csv(result: CrawlResult) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for item in result.items:
        writer.writerow([result.team_id, item.source_url, item.content, item.author or "", item.content_type, item.title])
    return buf.getvalue()


def to_markdown(result: CrawlResult, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        f"# {result.team_id} - Scraped Content",
        "",
        f"Generated on: {generated_at.isoformat()}",
        f"Total items: {len(result.items)}",
        "",
        "---",
        "",
    ]
    for index, item in enumerate(result.items, start=1):
        lines.append(f"## {index}. {item.title}")
        lines.append("")
        lines.append(f"**Source:** {item.source_url}")
        lines.append(f"**Type:** {item.content_type}")
        if item.author:
            lines.append(f"**Author:** {item.author}")
        lines.extend(["", item.content, "", "---", ""])
    return "\n".join(lines)


def render(result: CrawlResult, fmt: str) -> str:
    if fmt == "json":
        return to_json(result)
    if fmt == "csv":
        return to_csv(result)
    if fmt == "markdown":
        return to_markdown(result)
    raise ValueError(f"Unknown output format: {fmt}")


def write_result(result: CrawlResult, path: str, fmt: str = "json") -> None:
    text = render(result, fmt)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def validate_result(result: CrawlResult) -> List[str]:
    """Return one message per missing required field; empty when the result is valid."""
    errors: List[str] = []
    if not result.team_id:
        errors.append("Missing team_id")
    for index, item in enumerate(result.items):
        for name in ("title", "content", "source_url", "content_type"):
            if not getattr(item, name):
                errors.append(f"Item {index}: Missing {name}")
    return errors


def generate_report(result: CrawlResult) -> str:
    """Markdown summary: item count, average length, type mix and top authors."""
    total = len(result.items)
    lines = [f"# Scraping Report for {result.team_id}", "", f"**Total Items:** {total}"]
    if not total:
        return "\n".join(lines) + "\n"

    avg_length = sum(len(item.content) for item in result.items) / total
    lines.append(f"**Average Content Length:** {round(avg_length)} characters")
    lines.extend(["", "## Content Types"])
    for content_type, count in Counter(item.content_type for item in result.items).items():
        lines.append(f"- {content_type}: {count} items ({count / total * 100:.1f}%)")

    authors = Counter(item.author for item in result.items if item.author)
    if authors:
        lines.extend(["", "## Top Authors"])
        for author, count in authors.most_common(10):
            lines.append(f"- {author}: {count} items")
    return "\n".join(lines) + "\n"


class StorageBase(ABC):
    """Crawl listener that persists each page event carrying an item."""

    @abstractmethod
    def write(self, item: ExtractedItem, event: Optional[PageEvent] = None) -> None:
        """Persist a single extracted item, with the event that produced it when known."""

    @abstractmethod
    def close(self) -> None:
        """Flush pending writes and release resources."""

    def __call__(self, event: PageEvent) -> None:
        if event.item is not None:
            self.write(event.item, event)


def item_record(item: ExtractedItem, event: Optional[PageEvent] = None) -> Dict[str, Any]:
    """One JSON Lines record: wire fields plus where and how the item was found."""
    record: Dict[str, Any] = {
        "scraped_at": datetime.now(timezone.utc).isoformat(),
        "event": event.kind if event else "extracted",
    }
    if event is not None:
        record["depth"] = event.depth
        record["page"] = event.processed
    record.update(item.to_dict())
    return record


class JsonlStorage(StorageBase):
    """Streams items to a JSON Lines file while the crawl runs.

    Records are serialized on the caller's thread and appended by a writer
    thread, so a slow disk never holds up the crawl loop.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lines: queue.Queue[Optional[str]] = queue.Queue()
        self._thread = threading.Thread(target=self._drain, name="jsonl-writer", daemon=True)
        self._thread.start()

    def write(self, item: ExtractedItem, event: Optional[PageEvent] = None) -> None:
        self._lines.put(json.dumps(item_record(item, event), ensure_ascii=False))

    def close(self) -> None:
        self._lines.put(None)
        self._thread.join(timeout=5)

    def _drain(self) -> None:
        with open(self._path, "a", encoding="utf-8") as f:
            for line in iter(self._lines.get, None):
                f.write(line + "\n")
                f.flush()
