"""SQLAlchemy adapter package for hotfixmirror."""

from __future__ import annotations

from .mappings import hotfix_table, kv_cache_table, mapper_registry, start_mappers
from .repositories import SqlAlchemyHotfixRepository, SqlAlchemyKeyValueCache
from .unit_of_work import (
    SqlAlchemyHotfixUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyHotfixRepository",
    "SqlAlchemyHotfixUnitOfWork",
    "SqlAlchemyKeyValueCache",
    "StartupError",
    "configured_engine",
    "hotfix_table",
    "is_started",
    "kv_cache_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
