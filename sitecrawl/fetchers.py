from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from curl_cffi import requests as curl_requests
import requests

from .base import FetchStrategy
from .errors import FetchFailure
from .models import FetchAttempt

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
}

MIN_PROXY_BODY_LENGTH = 101


@dataclass(frozen=True)
class ProxyEndpoint:
    """A proxy that fetches ``prefix + quote(url)``.

    When ``json_field`` is set the proxy wraps the page in a JSON document and
    the HTML lives under that key.
    """

    name: str
    prefix: str
    json_field: Optional[str] = None

    def rewrite(self, url: str) -> str:
        return self.prefix + quote(url, safe="")


DEFAULT_PROXIES: List[ProxyEndpoint] = [
    ProxyEndpoint("allorigins", "https://api.allorigins.win/get?url=", json_field="contents"),
    ProxyEndpoint("corsproxy", "https://corsproxy.io/?"),
    ProxyEndpoint("cors-anywhere", "https://cors-anywhere.herokuapp.com/"),
]


class DirectFetch(FetchStrategy):
    """Plain GET with a fixed browser-like header set."""

    name = "direct"

    def request(self, url: str) -> Any:
        return requests.get(url, headers=BROWSER_HEADERS, timeout=self._timeout, allow_redirects=True)


class ImpersonatedFetch(FetchStrategy):
    """GET through curl_cffi presenting a Chrome TLS fingerprint."""

    name = "impersonated"

    def __init__(self, impersonate: str = "chrome120", *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._impersonate = impersonate

    def request(self, url: str) -> Any:
        session = curl_requests.Session()
        try:
            return session.get(
                url,
                headers={k: v for k, v in BROWSER_HEADERS.items() if k != "User-Agent"},
                impersonate=self._impersonate,
                timeout=self._timeout,
                allow_redirects=True,
            )
        finally:
            session.close()


class ProxyFetch(FetchStrategy):
    """GET the URL through a rewriting proxy endpoint."""

    def __init__(self, endpoint: ProxyEndpoint, *args, **kwargs) -> None:
        kwargs.setdefault("min_body_length", MIN_PROXY_BODY_LENGTH)
        super().__init__(*args, **kwargs)
        self._endpoint = endpoint
        self.name = f"proxy:{endpoint.name}"

    def request(self, url: str) -> Any:
        return requests.get(self._endpoint.rewrite(url), headers=BROWSER_HEADERS, timeout=self._timeout)

    def read_body(self, response: Any) -> Optional[str]:
        if not self._endpoint.json_field:
            return response.text
        payload = response.json()
        if isinstance(payload, dict):
            return payload.get(self._endpoint.json_field) or payload.get("data")
        return None


class FallbackFetcher:
    """Tries each strategy in order and returns the first usable body.

    Every attempt is bounded by its strategy's own timeout, so a fetch never
    blocks longer than the sum of the chain's timeouts.
    """

    def __init__(self, strategies: Iterable[FetchStrategy]) -> None:
        self._strategies = list(strategies)
        self.last_attempts: List[FetchAttempt] = []

    def fetch(self, url: str) -> str:
        """Return the page HTML or raise FetchFailure with every failed attempt."""
        attempts: List[FetchAttempt] = []
        for strategy in self._strategies:
            attempt = strategy.run(url)
            attempts.append(attempt)
            if attempt.success and attempt.body is not None:
                if len(attempts) > 1:
                    logger.info("Fetched %s via %s after %d failed attempts", url, attempt.strategy, len(attempts) - 1)
                self.last_attempts = attempts
                return attempt.body
            logger.warning("Fetch via %s failed for %s: %s", attempt.strategy, url, attempt.error_type)

        self.last_attempts = attempts
        raise FetchFailure(url, attempts)

    @property
    def strategies(self) -> List[FetchStrategy]:
        return list(self._strategies)
