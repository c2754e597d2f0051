"""HTTP client for the upstream cloud-storage catalog."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from pydantic import ValidationError

from hotfixmirror.adapters.http_resilience import ResilientClient
from hotfixmirror.domain.errors import BadRequestError, error_for_status

from .schema import CloudStorageListing, VersionResponse
from .translator import translate_catalog_item, translate_version

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from hotfixmirror.config.http_resilience import ResilienceConfig
    from hotfixmirror.domain.model import CatalogItem, ReleaseVersion

log = getLogger(__name__)

CATALOG_PATH = "cloudstorage/system"
VERSION_PATH = "version"

_LIST_ERROR_MESSAGES = {
    401: "Invalid or expired access token",
    502: "Cloud storage API is unavailable",
    503: "Cloud storage API is unavailable",
}


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def should_cache_payload(payload: object) -> bool:
    # upstream error bodies carry an errorCode
    return not (isinstance(payload, dict) and "errorCode" in payload)


@dataclass(slots=True)
class UpstreamCatalogClient:
    """Lists hotfixes, fetches their bodies and reads the active release."""

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def list_items(self, token: str) -> list[CatalogItem]:
        return asyncio.run(self._list_items_async(token))

    def fetch_content(self, token: str, unique_filename: str) -> str:
        return asyncio.run(self._fetch_content_async(token, unique_filename))

    def fetch_version(self, token: str) -> ReleaseVersion:
        return asyncio.run(self._fetch_version_async(token))

    async def _list_items_async(self, token: str) -> list[CatalogItem]:
        async with self.client_factory(self.resilience) as client:
            response = await client.get(CATALOG_PATH, headers=_bearer(token))

        if response.is_error:
            raise error_for_status(response.status_code, _list_error_message(response))
        try:
            payload = CloudStorageListing.validate_json(response.content)
        except ValidationError as exc:
            raise BadRequestError(f"Failed to parse cloud storage data: {exc}") from exc

        log.debug("Cloud storage lists %s file(s)", len(payload))
        return [translate_catalog_item(entry) for entry in payload]

    async def _fetch_content_async(self, token: str, unique_filename: str) -> str:
        path = f"{CATALOG_PATH}/{quote(unique_filename, safe='')}"
        async with self.client_factory(self.resilience) as client:
            response = await client.get(path, headers=_bearer(token))

        if response.is_error:
            raise BadRequestError(
                f"Failed to fetch cloud storage contents: {response.reason_phrase}"
            )
        return response.text

    async def _fetch_version_async(self, token: str) -> ReleaseVersion:
        async with self.client_factory(self.resilience) as client:
            response = await client.get(VERSION_PATH, headers=_bearer(token))

        if response.is_error:
            raise error_for_status(
                response.status_code,
                f"Failed to get upstream version: {response.reason_phrase}",
            )
        try:
            payload = VersionResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise BadRequestError(f"Failed to parse version data: {exc}") from exc
        return translate_version(payload)


def _list_error_message(response: httpx.Response) -> str:
    message = _LIST_ERROR_MESSAGES.get(response.status_code)
    if message is not None:
        return message
    if response.status_code >= 500:
        return "Cloud storage service error"
    return f"Failed to fetch cloud storage: {response.reason_phrase}"
