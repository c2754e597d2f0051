"""Domain model for mirrored hotfixes."""

from __future__ import annotations

from .hotfix import (
    HOTFIX_DIRECTORY,
    CatalogItem,
    HotfixRecord,
    RepositoryFile,
    hotfix_path,
)
from .outcome import ItemOutcome, ItemStatus, RunReport
from .release import (
    UNKNOWN_VERSION,
    ReleaseVersion,
    is_known_version,
    version_branch_name,
)

__all__ = [
    "HOTFIX_DIRECTORY",
    "UNKNOWN_VERSION",
    "CatalogItem",
    "HotfixRecord",
    "ItemOutcome",
    "ItemStatus",
    "ReleaseVersion",
    "RepositoryFile",
    "RunReport",
    "hotfix_path",
    "is_known_version",
    "version_branch_name",
]
