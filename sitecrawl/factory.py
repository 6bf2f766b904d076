from __future__ import annotations

from typing import Iterable, List, Optional

from .base import FetchStrategy
from .fetchers import DEFAULT_PROXIES, DirectFetch, FallbackFetcher, ImpersonatedFetch, ProxyEndpoint, ProxyFetch
from .models import CrawlConfig


def build_strategies(
    direct_timeout: float = 10.0,
    proxy_timeout: float = 15.0,
    proxies: Optional[Iterable[ProxyEndpoint]] = None,
    impersonate: bool = True,
) -> List[FetchStrategy]:
    """Build the ordered fallback chain: direct, impersonated, then one entry per proxy."""
    strategies: List[FetchStrategy] = [DirectFetch(timeout=direct_timeout)]
    if impersonate:
        strategies.append(ImpersonatedFetch(timeout=direct_timeout))
    endpoints = DEFAULT_PROXIES if proxies is None else list(proxies)
    strategies.extend(ProxyFetch(endpoint, timeout=proxy_timeout) for endpoint in endpoints)
    return strategies


def build_fetcher(
    config: CrawlConfig,
    proxies: Optional[Iterable[ProxyEndpoint]] = None,
    impersonate: bool = True,
) -> FallbackFetcher:
    return FallbackFetcher(
        build_strategies(
            direct_timeout=config.direct_timeout,
            proxy_timeout=config.proxy_timeout,
            proxies=proxies,
            impersonate=impersonate,
        )
    )
