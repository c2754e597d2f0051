"""Translate upstream payloads into domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hotfixmirror.domain.model import CatalogItem, ReleaseVersion

if TYPE_CHECKING:
    from .schema import CloudStorageFile, VersionResponse


def translate_catalog_item(payload: CloudStorageFile) -> CatalogItem:
    return CatalogItem(
        unique_filename=payload.unique_filename,
        filename=payload.filename,
        hash=payload.hash,
        hash256=payload.hash256,
        length=payload.length,
        content_type=payload.content_type,
        uploaded=payload.uploaded,
        storage_type=payload.storage_type,
        storage_ids=dict(payload.storage_ids),
        do_not_cache=payload.do_not_cache,
    )


def translate_version(payload: VersionResponse) -> ReleaseVersion:
    return ReleaseVersion(
        label=payload.version,
        build=payload.build,
        branch=payload.branch,
        cln=payload.cln,
    )
