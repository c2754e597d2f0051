"""Process-local key/value cache."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class InMemoryKeyValueCache:
    """Dict-backed :class:`~hotfixmirror.domain.ports.KeyValueCache`; entries expire lazily."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: str, *, ttl_seconds: float) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)
