"""Ports for reading from the upstream service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hotfixmirror.domain.model import CatalogItem, ReleaseVersion


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of bearer tokens for the upstream API."""

    def get_token(self) -> str: ...


@runtime_checkable
class HotfixCatalog(Protocol):
    """Read-only view of the upstream hotfix catalog."""

    def list_items(self, token: str) -> list[CatalogItem]: ...

    def fetch_content(self, token: str, unique_filename: str) -> str: ...

    def fetch_version(self, token: str) -> ReleaseVersion: ...


__all__ = ["CredentialProvider", "HotfixCatalog"]
