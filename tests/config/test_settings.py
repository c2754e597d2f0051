from __future__ import annotations

from datetime import timedelta
from pathlib import Path  # noqa: TC003

import pytest

from hotfixmirror.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_database_uri,
    get_github_config,
    get_storage_config,
    get_upstream_config,
    get_workflow_config,
)


@pytest.fixture
def github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")
    monkeypatch.setenv("GITHUB_OWNER", "octo")
    monkeypatch.setenv("GITHUB_REPO", "mirror")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.delenv("GITHUB_STABLE_BRANCH", raising=False)


@pytest.fixture
def upstream_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("UPSTREAM_CLIENT_ID", "client")
    monkeypatch.setenv("UPSTREAM_CLIENT_SECRET", "secret")
    monkeypatch.setenv("HOTFIXMIRROR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("UPSTREAM_API_BASE_URL", raising=False)
    monkeypatch.delenv("UPSTREAM_TOKEN_URL", raising=False)


@pytest.mark.usefixtures("github_env")
def test_github_config_targets_the_repository() -> None:
    config = get_github_config()

    assert config.stable_branch == "main"
    assert config.html_url == "https://github.com/octo/mirror"
    assert config.resilience.base_url == "https://api.github.com/repos/octo/mirror/"
    assert config.resilience.cache is None
    headers = dict(config.resilience.default_headers or {})
    assert headers["Authorization"] == "Bearer ghp_secret"
    assert headers["Accept"] == "application/vnd.github+json"


@pytest.mark.usefixtures("github_env")
def test_github_config_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    monkeypatch.setenv("GITHUB_STABLE_BRANCH", "stable")

    config = get_github_config()

    assert config.stable_branch == "stable"
    assert config.resilience.base_url == "https://ghe.example.com/api/v3/repos/octo/mirror/"


def test_github_config_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_OWNER", "octo")
    monkeypatch.setenv("GITHUB_REPO", "mirror")

    with pytest.raises(MissingConfigurationError, match="GITHUB_TOKEN"):
        get_github_config()


@pytest.mark.usefixtures("upstream_env")
def test_upstream_config_defaults(tmp_path: Path) -> None:
    config = get_upstream_config()

    assert config.client_id == "client"
    assert config.client_secret == "secret"
    assert config.token_url.endswith("/account/api/oauth/token")
    assert config.resilience.base_url is not None
    assert config.resilience.base_url.endswith("/fortnite/api/")
    assert config.resilience.cache is not None
    assert config.resilience.cache.sqlite_path == str(
        (tmp_path / "data").resolve() / "http_cache.db"
    )
    assert config.auth_resilience.base_url is None


@pytest.mark.usefixtures("upstream_env")
def test_upstream_base_url_gets_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPSTREAM_API_BASE_URL", "https://upstream.test/api")

    config = get_upstream_config()

    assert config.resilience.base_url == "https://upstream.test/api/"


def test_workflow_config_without_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOTFIXMIRROR_RUN_DEADLINE_SECONDS", raising=False)

    config = get_workflow_config()

    assert config.run_deadline is None
    assert config.policies.item.max_attempts == 3


def test_workflow_config_reads_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOTFIXMIRROR_RUN_DEADLINE_SECONDS", "1800")

    assert get_workflow_config().run_deadline == timedelta(minutes=30)


def test_workflow_config_rejects_non_positive_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOTFIXMIRROR_RUN_DEADLINE_SECONDS", "0")

    with pytest.raises(ConfigurationError):
        get_workflow_config()


def test_storage_prefers_explicit_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("HOTFIXMIRROR_DATA_DIR", str(custom))

    storage = get_storage_config()

    assert storage.data_dir == custom.resolve()
    assert not custom.exists()
    assert storage.database_path() == custom.resolve() / "hotfixmirror.db"
    assert storage.http_cache_path() == custom.resolve() / "http_cache.db"
    assert custom.is_dir()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_uri() == "sqlite:///override.db"


def test_database_uri_defaults_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("HOTFIXMIRROR_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_uri()

    assert uri == f"sqlite+pysqlite:///{(tmp_path / 'data-dir').resolve() / 'hotfixmirror.db'}"


def test_storage_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("HOTFIXMIRROR_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    assert get_storage_config().data_dir == (tmp_path / "xdg" / "hotfixmirror").resolve()
