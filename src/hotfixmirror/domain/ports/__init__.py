"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import CredentialProvider, HotfixCatalog
from .mirroring import BatchWriteResult, FileWriteResult, RepositorySink
from .persistence import HotfixRepository, KeyValueCache, Repository
from .unit_of_work import (
    HotfixRepositories,
    HotfixUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BatchWriteResult",
    "CredentialProvider",
    "FileWriteResult",
    "HotfixCatalog",
    "HotfixRepositories",
    "HotfixRepository",
    "HotfixUnitOfWork",
    "KeyValueCache",
    "Repository",
    "RepositoryCollection",
    "RepositorySink",
    "UnitOfWork",
]
