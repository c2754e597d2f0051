"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from hotfixmirror.adapters.sqlalchemy.mappings import hotfix_table, kv_cache_table
from hotfixmirror.domain.model import HotfixRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


class SqlAlchemyHotfixRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: HotfixRecord) -> None:
        self.session.add(entity)

    def exists(self, hash256: str) -> bool:
        stmt = select(hotfix_table.c.id).where(hotfix_table.c.hash256 == hash256).limit(1)
        return self.session.execute(stmt).first() is not None

    def distinct_versions(self) -> list[str]:
        stmt = (
            select(hotfix_table.c.version)
            .where(hotfix_table.c.version.is_not(None))
            .distinct()
        )
        return [version for version in self.session.execute(stmt).scalars() if version]

    def get_by_hash256(self, hash256: str) -> list[HotfixRecord]:
        stmt = select(HotfixRecord).where(hotfix_table.c.hash256 == hash256)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyKeyValueCache:
    """Key/value cache persisted in the ``kv_cache`` table, surviving process restarts."""

    def __init__(self, engine: Engine, *, clock: Callable[[], float] = time.time) -> None:
        self._engine = engine
        self._clock = clock

    def get(self, key: str) -> str | None:
        stmt = select(kv_cache_table.c.value, kv_cache_table.c.expires_at).where(
            kv_cache_table.c.key == key
        )
        with self._engine.connect() as connection:
            row = connection.execute(stmt).first()
        if row is None or row.expires_at <= self._clock():
            return None
        return row.value

    def put(self, key: str, value: str, *, ttl_seconds: float) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._engine.begin() as connection:
            connection.execute(delete(kv_cache_table).where(kv_cache_table.c.key == key))
            connection.execute(
                kv_cache_table.insert().values(key=key, value=value, expires_at=expires_at)
            )
