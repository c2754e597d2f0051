"""Upstream (game backend) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook
from .storage import StorageConfig, get_storage_config

DEFAULT_UPSTREAM_TOKEN_URL = (
    "https://account-public-service-prod.ol.epicgames.com/account/api/oauth/token"
)
DEFAULT_UPSTREAM_API_BASE_URL = "https://fngw-mcp-gc-livefn.ol.epicgames.com/fortnite/api"
UPSTREAM_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class UpstreamConfig:
    """Client credentials and endpoints of the upstream content service."""

    client_id: str
    client_secret: str
    token_url: str
    resilience: ResilienceConfig
    auth_resilience: ResilienceConfig


def get_upstream_config(
    *,
    storage: StorageConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> UpstreamConfig:
    values = require_env_vars(("UPSTREAM_CLIENT_ID", "UPSTREAM_CLIENT_SECRET"))
    storage_config = storage or get_storage_config()
    base_url = os.getenv("UPSTREAM_API_BASE_URL") or DEFAULT_UPSTREAM_API_BASE_URL

    return UpstreamConfig(
        client_id=values["UPSTREAM_CLIENT_ID"],
        client_secret=values["UPSTREAM_CLIENT_SECRET"],
        token_url=os.getenv("UPSTREAM_TOKEN_URL") or DEFAULT_UPSTREAM_TOKEN_URL,
        resilience=ResilienceConfig(
            name="upstream",
            base_url=base_url.rstrip("/") + "/",
            timeout_seconds=UPSTREAM_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            # RFC 9111 caching only, no forced TTL
            cache=CacheConfig(
                backend="sqlite",
                sqlite_path=str(storage_config.http_cache_path()),
                should_cache=cache_predicate,
            ),
        ),
        auth_resilience=ResilienceConfig(
            name="upstream-auth",
            timeout_seconds=UPSTREAM_TIMEOUT_SECONDS,
        ),
    )
