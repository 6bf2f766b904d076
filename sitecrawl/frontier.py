from __future__ import annotations

from collections import deque
from typing import Deque, FrozenSet, Iterable, Iterator, List, Optional, Set
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .models import FrontierEntry
from .rules import DEFAULT_RULES

TRACKING_PARAMS: FrozenSet[str] = DEFAULT_RULES.tracking_params


def canonicalize_url(url: str, tracking_params: Iterable[str] = TRACKING_PARAMS) -> str:
    """Normalize a URL so equivalent spellings dedupe to one visited-set key.

    Lowercases scheme and host, drops the fragment and tracking parameters,
    sorts the remaining query and turns an empty path into ``/``.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower() or "https"
    netloc = parts.netloc.lower()
    path = parts.path or "/"
    drop = set(tracking_params)
    query_pairs = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k.lower() not in drop]
    query_pairs.sort()
    return urlunsplit((scheme, netloc, path, urlencode(query_pairs), ""))


class Frontier:
    """FIFO work queue of frontier entries with a priority head and a visited set.

    Normal pushes append to the tail. Priority pushes insert at the head so
    articles found on a listing page are processed before breadth-first
    discovery continues. Not thread-safe; owned by a single controller.
    """

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self._queue: Deque[FrontierEntry] = deque()
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()
        self._max_depth = max_depth

    def push(self, entry: FrontierEntry, priority: bool = False) -> bool:
        """Queue one entry. Returns False when it was rejected as visited, queued or too deep."""
        return self.push_many([entry], priority=priority) == 1

    def push_many(self, entries: Iterable[FrontierEntry], priority: bool = False) -> int:
        """Queue entries keeping their order within the tier. Returns how many were accepted."""
        accepted: List[FrontierEntry] = []
        for entry in entries:
            key = canonicalize_url(entry.url)
            if self._max_depth is not None and entry.depth > self._max_depth:
                continue
            if key in self._visited:
                continue
            if key in self._queued and not priority:
                continue
            self._queued.add(key)
            accepted.append(FrontierEntry(url=key, depth=entry.depth, from_listing=entry.from_listing))

        if priority:
            self._queue.extendleft(reversed(accepted))
        else:
            self._queue.extend(accepted)
        return len(accepted)

    def pop(self) -> Optional[FrontierEntry]:
        """Return the next entry, or None once the queue is drained.

        The URL leaves the queued set here; from then on the visited set keeps
        it out of the queue.
        """
        if not self._queue:
            return None
        entry = self._queue.popleft()
        self._queued.discard(entry.url)
        return entry

    def mark_visited(self, url: str) -> None:
        self._visited.add(canonicalize_url(url))

    def is_visited(self, url: str) -> bool:
        return canonicalize_url(url) in self._visited

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[FrontierEntry]:
        return iter(list(self._queue))
