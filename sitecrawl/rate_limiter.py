from __future__ import annotations

import threading
import time
from typing import Optional


class RateLimiter:
    """Spaces fetches at least ``delay_seconds`` apart.

    acquire() waits until the next fetch is allowed. The wait is done on the
    stop event, so a stop request ends it immediately."""

    def __init__(self, delay_seconds: float, stop_event: Optional[threading.Event] = None) -> None:
        self._interval = max(0.0, float(delay_seconds))
        self._stop_event = stop_event or threading.Event()
        self._next_allowed = 0.0

    def acquire(self) -> bool:
        """Block until the next fetch is permitted. Returns False if stopped while waiting."""
        if self._stop_event.is_set():
            return False
        if self._interval <= 0:
            return True
        now = time.monotonic()
        if now < self._next_allowed:
            if self._stop_event.wait(self._next_allowed - now):
                return False
        self._next_allowed = time.monotonic() + self._interval
        return True

    @property
    def interval(self) -> float:
        return self._interval
