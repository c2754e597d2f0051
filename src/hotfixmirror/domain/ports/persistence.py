"""Ports for persisting hotfixes and cached values."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hotfixmirror.domain.model import HotfixRecord


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class HotfixRepository(Repository[HotfixRecord], Protocol):
    """Persistence contract for ingested hotfixes."""

    def exists(self, hash256: str) -> bool: ...

    def distinct_versions(self) -> list[str]: ...


@runtime_checkable
class KeyValueCache(Protocol):
    """String cache with per-entry expiry."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, *, ttl_seconds: float) -> None: ...
