"""SQLAlchemy mapping metadata for the hotfix domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from hotfixmirror.domain.model import HotfixRecord

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

hotfix_table = Table(
    "hotfixes",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("unique_filename", String, nullable=False),
    Column("filename", String, nullable=False),
    Column("hash", String, nullable=False),
    Column("hash256", String, nullable=False),
    Column("length", Integer, nullable=False),
    Column("contents", Text, nullable=False),
    Column("version", String, nullable=True),
    Column("scraped_at", UTCDateTime(), nullable=False),
    # not unique: overlapping runs can both pass the existence check
    Index("ix_hotfixes_hash256", "hash256"),
    Index("ix_hotfixes_unique_filename", "unique_filename"),
    Index("ix_hotfixes_filename", "filename"),
    Index("ix_hotfixes_version", "version"),
    Index("ix_hotfixes_scraped_at", "scraped_at"),
)

kv_cache_table = Table(
    "kv_cache",
    mapper_registry.metadata,
    Column("key", String, primary_key=True),
    Column("value", Text, nullable=False),
    # unix timestamp
    Column("expires_at", Float, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(HotfixRecord, hotfix_table)

    configure_mappers()
    return mapper_registry
