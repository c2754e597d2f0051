"""Catalog items and their persisted/mirrored counterparts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final
from uuid import UUID, uuid4

HOTFIX_DIRECTORY: Final[str] = "hotfixes"
HOTFIX_EXTENSION: Final[str] = "ini"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogItem:
    """One remote content unit as listed by the upstream catalog.

    ``hash256`` is the identity of the content: two items with the same
    ``hash256`` are the same hotfix, whatever their ``unique_filename``.
    """

    unique_filename: str
    filename: str
    hash: str
    hash256: str
    length: int
    content_type: str | None = None
    uploaded: datetime | None = None
    storage_type: str | None = None
    storage_ids: Mapping[str, str] = field(default_factory=dict[str, str])
    do_not_cache: bool = False

    @property
    def repository_path(self) -> str:
        return hotfix_path(self.filename)


@dataclass(eq=False, kw_only=True)
class HotfixRecord:
    """A fully ingested hotfix; created once, never updated."""

    unique_filename: str
    filename: str
    hash: str
    hash256: str
    length: int
    contents: str
    version: str | None = None
    scraped_at: datetime = field(default_factory=_utcnow)
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_item(
        cls,
        item: CatalogItem,
        *,
        contents: str,
        version: str | None,
        scraped_at: datetime | None = None,
    ) -> HotfixRecord:
        return cls(
            unique_filename=item.unique_filename,
            filename=item.filename,
            hash=item.hash,
            hash256=item.hash256,
            length=item.length,
            contents=contents,
            version=version,
            scraped_at=scraped_at or _utcnow(),
        )


@dataclass(frozen=True, slots=True)
class RepositoryFile:
    path: str
    content: str


def hotfix_path(filename: str) -> str:
    """Repository path of a hotfix file, e.g. ``hotfixes/DefaultGame.ini.ini``."""

    return f"{HOTFIX_DIRECTORY}/{filename}.{HOTFIX_EXTENSION}"
