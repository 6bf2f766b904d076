from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import FetchAttempt


class FetchStrategy(ABC):
    """Abstract base class defining one way of fetching a page.

    run() never raises:
    - Any 2xx status with a usable body is a success.
    - Non-2xx responses are recorded as ``HTTP_<status>``.
    - Exceptions (timeouts, connection errors, bad proxy payloads) are
      recorded by class name.
    """

    name = "fetch"

    def __init__(self, timeout: float = 10.0, min_body_length: int = 1) -> None:
        self._timeout = timeout
        self._min_body_length = min_body_length

    def run(self, url: str) -> FetchAttempt:
        start_ms = self._now_ms()
        status_code = None

        try:
            self.validate(url)
            response = self.request(url)
            status_code = getattr(response, "status_code", None)

            if status_code is None or not 200 <= int(status_code) < 300:
                return self._attempt(url, start_ms, status_code, None, f"HTTP_{status_code}")

            body = self.read_body(response)
            if not isinstance(body, str) or len(body) < self._min_body_length:
                return self._attempt(url, start_ms, status_code, None, "EmptyBody")

            return self._attempt(url, start_ms, status_code, body, None)

        except Exception as exc:  # noqa: BLE001
            return self._attempt(url, start_ms, status_code, None, type(exc).__name__)

    def validate(self, url: str) -> None:
        if not url:
            raise ValueError("url is required")

    @abstractmethod
    def request(self, url: str) -> Any:
        ...

    def read_body(self, response: Any) -> Optional[str]:
        return getattr(response, "text", None)

    @property
    def timeout(self) -> float:
        return self._timeout

    def _attempt(
        self,
        url: str,
        start_ms: int,
        status_code: Optional[int],
        body: Optional[str],
        error_type: Optional[str],
    ) -> FetchAttempt:
        return FetchAttempt(
            strategy=self.name,
            url=url,
            success=error_type is None,
            status_code=status_code,
            latency_ms=self._now_ms() - start_ms,
            body=body,
            error_type=error_type,
        )

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
