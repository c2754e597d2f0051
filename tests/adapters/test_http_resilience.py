from __future__ import annotations

import asyncio
import json

import httpx
from hishel import FilterPolicy

from hotfixmirror.adapters.http_resilience import (
    ResilientClient,
    _build_cache_components,  # type: ignore[reportPrivateUsage]
    _ShouldCacheResponseFilter,  # type: ignore[reportPrivateUsage]
    build_retry,
)
from hotfixmirror.adapters.upstream import should_cache_payload
from hotfixmirror.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy


def test_cache_is_disabled_without_config() -> None:
    assert _build_cache_components(None) == (None, None)
    assert _build_cache_components(CacheConfig(enabled=False)) == (None, None)


def test_cache_filter_is_built_from_predicate() -> None:
    storage, policy = _build_cache_components(
        CacheConfig(backend="memory", should_cache=should_cache_payload)
    )

    assert storage is not None
    assert isinstance(policy, FilterPolicy)


def test_response_filter_delegates_to_predicate() -> None:
    response_filter = _ShouldCacheResponseFilter(should_cache_payload)

    assert response_filter.needs_body() is True
    assert response_filter.apply(None, json.dumps([{"filename": "a"}]).encode()) is True  # type: ignore[arg-type]
    assert response_filter.apply(None, b'{"errorCode": "x"}') is False  # type: ignore[arg-type]
    assert response_filter.apply(None, b"[Core]\nA=1\n") is True  # type: ignore[arg-type]


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=4))

    assert retry.total == 4


def test_client_applies_base_url_and_headers() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.example.test/v1/",
        default_headers={"X-Test": "1"},
    )

    async def send() -> httpx.Response:
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url=config.base_url or "",
                headers=config.default_headers,
                transport=httpx.MockTransport(handler),
            )
            return await client.put("items/1", json={"a": 1})

    response = asyncio.run(send())

    assert response.status_code == 200
    assert str(seen[0].url) == "https://api.example.test/v1/items/1"
    assert seen[0].method == "PUT"
    assert seen[0].headers["X-Test"] == "1"
