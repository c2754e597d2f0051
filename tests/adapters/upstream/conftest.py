from __future__ import annotations

import pytest

from hotfixmirror.config.http_resilience import ResilienceConfig
from hotfixmirror.config.upstream import UpstreamConfig

API_BASE_URL = "https://upstream.test/api/"
TOKEN_URL = "https://accounts.upstream.test/oauth/token"


@pytest.fixture
def api_resilience() -> ResilienceConfig:
    return ResilienceConfig(name="upstream-test", base_url=API_BASE_URL)


@pytest.fixture
def upstream_config(api_resilience: ResilienceConfig) -> UpstreamConfig:
    return UpstreamConfig(
        client_id="client-id",
        client_secret="client-secret",  # noqa: S106
        token_url=TOKEN_URL,
        resilience=api_resilience,
        auth_resilience=ResilienceConfig(name="upstream-auth-test"),
    )


@pytest.fixture
def catalog_payload() -> list[dict[str, object]]:
    return [
        {
            "uniqueFilename": "a22d837b6a2b46349421259c0a5411bf",
            "filename": "DefaultGame.ini",
            "hash": "4c8d8c1cf3e2e1b2f1e7c0a1d2b3c4d5e6f7a8b9",
            "hash256": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
            "length": 1234,
            "contentType": "application/octet-stream",
            "uploaded": "2025-01-07T12:00:00.000Z",
            "storageType": "S3",
            "storageIds": {"DSS": "DefaultGame.ini"},
            "doNotCache": False,
        },
        {
            "uniqueFilename": "3460cbe1c57d4a838ace32951a4d7171",
            "filename": "DefaultEngine.ini",
            "hash": "0000000000000000000000000000000000000000",
            "hash256": "1111111111111111111111111111111111111111111111111111111111111111",
            "length": 10,
            "contentType": "application/octet-stream",
            "uploaded": "2025-01-07T12:00:00.000Z",
            "storageType": "S3",
            "storageIds": {},
            "doNotCache": True,
        },
    ]
