"""OAuth client-credentials token provider for the upstream API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from hotfixmirror.adapters.http_resilience import ResilientClient
from hotfixmirror.adapters.kv_cache import InMemoryKeyValueCache
from hotfixmirror.domain.errors import AuthError

from .schema import TokenResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from hotfixmirror.config.http_resilience import ResilienceConfig
    from hotfixmirror.config.upstream import UpstreamConfig
    from hotfixmirror.domain.ports.persistence import KeyValueCache

log = getLogger(__name__)

TOKEN_CACHE_KEY = "client_credentials"
DEFAULT_EXPIRES_IN_SECONDS = 3600.0
EXPIRY_MARGIN = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class CachedToken(TokenResponse):
    expires_at: datetime


@dataclass(slots=True)
class ClientCredentialsProvider:
    """Exchange client credentials for a bearer token, reusing it until shortly before expiry."""

    config: UpstreamConfig
    cache: KeyValueCache = field(default_factory=InMemoryKeyValueCache)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    clock: Callable[[], datetime] = field(default=_utcnow)

    def get_token(self) -> str:
        cached = self._cached_token()
        if cached is not None:
            log.debug("Using cached upstream access token")
            return cached.access_token

        token = asyncio.run(self._request_token_async())
        expires_in = DEFAULT_EXPIRES_IN_SECONDS if token.expires_in is None else token.expires_in
        entry = CachedToken(
            **token.model_dump(),
            expires_at=self.clock() + timedelta(seconds=expires_in),
        )
        self.cache.put(TOKEN_CACHE_KEY, entry.model_dump_json(), ttl_seconds=expires_in)
        log.info("Obtained upstream access token (expires in %ss)", int(expires_in))
        return token.access_token

    def _cached_token(self) -> CachedToken | None:
        raw = self.cache.get(TOKEN_CACHE_KEY)
        if raw is None:
            return None
        try:
            cached = CachedToken.model_validate_json(raw)
        except ValidationError:
            log.warning("Discarding unreadable cached access token")
            return None
        if cached.expires_at - EXPIRY_MARGIN <= self.clock():
            return None
        return cached

    async def _request_token_async(self) -> TokenResponse:
        async with self.client_factory(self.config.auth_resilience) as client:
            try:
                response = await client.post(
                    self.config.token_url,
                    data={"grant_type": "client_credentials"},
                    auth=(self.config.client_id, self.config.client_secret),
                )
            except httpx.HTTPError as exc:
                raise AuthError(f"Token request failed: {exc}") from exc

        if response.is_error:
            raise AuthError(
                f"Token request failed with status {response.status_code}: {response.reason_phrase}"
            )
        try:
            token = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise AuthError(f"Invalid token response: {exc}") from exc
        if not token.access_token:
            raise AuthError("Invalid token response: access_token is empty")
        return token
