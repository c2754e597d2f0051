"""Public interface for the upstream adapter."""

from __future__ import annotations

from .auth import ClientCredentialsProvider
from .client import UpstreamCatalogClient, should_cache_payload
from .schema import CloudStorageFile, TokenResponse, VersionResponse
from .translator import translate_catalog_item, translate_version

__all__ = [
    "ClientCredentialsProvider",
    "CloudStorageFile",
    "TokenResponse",
    "UpstreamCatalogClient",
    "VersionResponse",
    "should_cache_payload",
    "translate_catalog_item",
    "translate_version",
]
