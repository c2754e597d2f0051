from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from hotfixmirror.adapters.upstream import UpstreamCatalogClient, should_cache_payload
from hotfixmirror.domain.errors import (
    BadRequestError,
    UnauthorizedError,
    UpstreamError,
    UpstreamUnavailableError,
)
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from hotfixmirror.config.http_resilience import ResilienceConfig
    from hotfixmirror.domain.errors import UpstreamAPIError

VERSION_PAYLOAD = {
    "app": "fortnite",
    "serverDate": "2025-01-07T12:00:00.000Z",
    "overridePropertiesVersion": "unknown",
    "cln": "39234478",
    "build": "4",
    "moduleName": "Fortnite-Core",
    "buildDate": "2025-01-06T10:00:00.000Z",
    "version": "31.10",
    "branch": "Release-31.10",
    "modules": {
        "Epic-LightSwitch-AccessControlCore": {
            "cln": "1",
            "build": "b",
            "buildDate": "2025-01-06T10:00:00.000Z",
            "version": "1.0.0",
            "branch": "trunk",
        }
    },
}


def _client(
    resilience: ResilienceConfig,
    **responses: httpx.Response,
) -> tuple[UpstreamCatalogClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        key = request.url.path.rsplit("/", 1)[-1]
        return responses[key] if key in responses else responses["default"]

    return (
        UpstreamCatalogClient(resilience=resilience, client_factory=make_client_factory(respond)),
        seen,
    )


def test_list_items_translates_catalog(
    api_resilience: ResilienceConfig, catalog_payload: list[dict[str, object]]
) -> None:
    client, seen = _client(api_resilience, default=httpx.Response(200, json=catalog_payload))

    items = client.list_items("secret-token")

    assert seen[0].url == httpx.URL("https://upstream.test/api/cloudstorage/system")
    assert seen[0].headers["Authorization"] == "Bearer secret-token"
    assert [item.filename for item in items] == ["DefaultGame.ini", "DefaultEngine.ini"]
    first = items[0]
    assert first.unique_filename == "a22d837b6a2b46349421259c0a5411bf"
    assert first.hash256.startswith("e3b0c442")
    assert first.length == 1234
    assert first.uploaded == datetime(2025, 1, 7, 12, tzinfo=UTC)
    assert first.storage_ids == {"DSS": "DefaultGame.ini"}
    assert items[1].do_not_cache is True


@pytest.mark.parametrize(
    ("status", "expected", "message"),
    [
        (401, UnauthorizedError, "Invalid or expired access token"),
        (502, UpstreamUnavailableError, "Cloud storage API is unavailable"),
        (503, UpstreamUnavailableError, "Cloud storage API is unavailable"),
        (500, UpstreamError, "Cloud storage service error"),
        (403, BadRequestError, "Failed to fetch cloud storage: Forbidden"),
    ],
)
def test_list_items_maps_error_statuses(
    api_resilience: ResilienceConfig,
    status: int,
    expected: type[UpstreamAPIError],
    message: str,
) -> None:
    client, _ = _client(api_resilience, default=httpx.Response(status))

    with pytest.raises(expected) as exc_info:
        client.list_items("token")

    assert exc_info.value.message == message


def test_list_items_rejects_schema_mismatch(
    api_resilience: ResilienceConfig, catalog_payload: list[dict[str, object]]
) -> None:
    del catalog_payload[0]["hash256"]
    client, _ = _client(api_resilience, default=httpx.Response(200, json=catalog_payload))

    with pytest.raises(BadRequestError, match="Failed to parse cloud storage data"):
        client.list_items("token")


def test_list_items_rejects_non_list_payload(api_resilience: ResilienceConfig) -> None:
    client, _ = _client(api_resilience, default=httpx.Response(200, json={"items": []}))

    with pytest.raises(BadRequestError):
        client.list_items("token")


def test_fetch_content_returns_raw_text(api_resilience: ResilienceConfig) -> None:
    body = "[/Script/FortniteGame.FortGameInstance]\n+FrontEndPlaylistData=(PlaylistName=Solo)\n"
    client, seen = _client(api_resilience, default=httpx.Response(200, text=body))

    contents = client.fetch_content("token", "a22d837b6a2b46349421259c0a5411bf")

    assert contents == body
    assert seen[0].url.path == "/api/cloudstorage/system/a22d837b6a2b46349421259c0a5411bf"


def test_fetch_content_allows_empty_body(api_resilience: ResilienceConfig) -> None:
    client, _ = _client(api_resilience, default=httpx.Response(200, content=b""))

    assert client.fetch_content("token", "empty") == ""


@pytest.mark.parametrize("status", [401, 404, 503])
def test_fetch_content_errors_are_bad_requests(
    api_resilience: ResilienceConfig, status: int
) -> None:
    client, _ = _client(api_resilience, default=httpx.Response(status))

    with pytest.raises(BadRequestError, match="Failed to fetch cloud storage contents"):
        client.fetch_content("token", "missing")


def test_fetch_version_translates_payload(api_resilience: ResilienceConfig) -> None:
    client, seen = _client(api_resilience, version=httpx.Response(200, json=VERSION_PAYLOAD))

    version = client.fetch_version("token")

    assert seen[0].url.path == "/api/version"
    assert version.label == "31.10"
    assert version.branch == "Release-31.10"
    assert version.cln == "39234478"
    assert version.branch_name == "version-31.10"


@pytest.mark.parametrize(
    "payload",
    [
        {"app": "fortnite"},
        {key: value for key, value in VERSION_PAYLOAD.items() if key != "version"},
        {**VERSION_PAYLOAD, "version": "   "},
        {**VERSION_PAYLOAD, "serverDate": "yesterday"},
        {**VERSION_PAYLOAD, "modules": {"Core": {"cln": "1"}}},
    ],
)
def test_fetch_version_rejects_malformed_payload(
    api_resilience: ResilienceConfig, payload: dict[str, object]
) -> None:
    client, _ = _client(api_resilience, version=httpx.Response(200, json=payload))

    with pytest.raises(BadRequestError, match="Failed to parse version data"):
        client.fetch_version("token")


def test_fetch_version_maps_error_statuses(api_resilience: ResilienceConfig) -> None:
    client, _ = _client(api_resilience, version=httpx.Response(502))

    with pytest.raises(UpstreamUnavailableError, match="Failed to get upstream version"):
        client.fetch_version("token")


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ([{"uniqueFilename": "a", "filename": "DefaultGame.ini"}], True),
        ({"moduleName": "Fortnite-Core", "version": "31.10"}, True),
        ({"errorCode": "errors.com.epicgames.common.server_error"}, False),
    ],
)
def test_error_payloads_are_not_cached(payload: object, *, expected: bool) -> None:
    assert should_cache_payload(payload) is expected
