from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from .errors import InvalidSeedUrl
from .models import MAX_PAGES_CEILING, CrawlConfig

DEFAULTS: Dict[str, Any] = {
    "max_pages": 50,
    "delay_seconds": 1.0,
    "max_depth": 3,
    "respect_robots": True,
    "placeholder_on_failure": False,
    "direct_timeout": 10.0,
    "proxy_timeout": 15.0,
    "robots_timeout": 5.0,
}

# Transport payload keys (camelCase) to CrawlConfig fields.
PAYLOAD_KEYS = {
    "targetUrl": "seed_url",
    "seedUrl": "seed_url",
    "maxPages": "max_pages",
    "maxDepth": "max_depth",
    "respectRobots": "respect_robots",
    "placeholderOnFailure": "placeholder_on_failure",
}

ENV_KEYS = {
    "SITECRAWL_MAX_PAGES": "max_pages",
    "SITECRAWL_DELAY_SECONDS": "delay_seconds",
    "SITECRAWL_MAX_DEPTH": "max_depth",
    "SITECRAWL_RESPECT_ROBOTS": "respect_robots",
    "SITECRAWL_PLACEHOLDER": "placeholder_on_failure",
    "SITECRAWL_DIRECT_TIMEOUT": "direct_timeout",
    "SITECRAWL_PROXY_TIMEOUT": "proxy_timeout",
    "SITECRAWL_ROBOTS_TIMEOUT": "robots_timeout",
}

_INT_FIELDS = {"max_pages", "max_depth"}
_FLOAT_FIELDS = {"delay_seconds", "direct_timeout", "proxy_timeout", "robots_timeout"}
_BOOL_FIELDS = {"respect_robots", "placeholder_on_failure"}


def validate_seed_url(url: Any) -> str:
    """Return the seed's hostname, or raise InvalidSeedUrl."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidSeedUrl("Invalid target URL: seed URL is required")
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError as exc:
        raise InvalidSeedUrl(f"Invalid target URL: {url}") from exc
    if parts.scheme not in ("http", "https") or not host:
        raise InvalidSeedUrl(f"Invalid target URL: {url}")
    return host.lower()


def _coerce(key: str, value: Any) -> Any:
    if key in _BOOL_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if key in _INT_FIELDS:
        return int(value)
    if key in _FLOAT_FIELDS:
        return float(value)
    return value


def config_from_mapping(data: Mapping[str, Any], base: Optional[Mapping[str, Any]] = None) -> CrawlConfig:
    """Build a CrawlConfig from a transport payload or snake_case mapping.

    ``delayMs`` is converted to seconds, ``maxPages`` is clamped to the hard
    ceiling and the seed URL is validated.
    """
    values: Dict[str, Any] = dict(DEFAULTS)
    if base:
        values.update(base)

    for key, value in data.items():
        if value is None:
            continue
        if key == "delayMs":
            values["delay_seconds"] = float(value) / 1000.0
        elif key in PAYLOAD_KEYS:
            values[PAYLOAD_KEYS[key]] = value
        elif key == "seed_url" or key in DEFAULTS:
            values[key] = value

    seed_url = values.get("seed_url")
    validate_seed_url(seed_url)

    try:
        fields = {k: _coerce(k, v) for k, v in values.items() if k in DEFAULTS}
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid crawl configuration: {exc}") from exc

    fields["max_pages"] = max(0, min(fields["max_pages"], MAX_PAGES_CEILING))
    fields["max_depth"] = max(0, fields["max_depth"])
    fields["delay_seconds"] = max(0.0, fields["delay_seconds"])
    return CrawlConfig(seed_url=seed_url.strip(), **fields)


def config_from_env(seed_url: str, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> CrawlConfig:
    """Defaults, then ``SITECRAWL_*`` environment variables, then explicit overrides."""
    environ = os.environ if environ is None else environ
    base = {field: environ[var] for var, field in ENV_KEYS.items() if var in environ}
    data = {k: v for k, v in overrides.items() if v is not None}
    data["seed_url"] = seed_url
    return config_from_mapping(data, base=base)
