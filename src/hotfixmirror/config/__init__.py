"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_float, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .github import GitHubConfig, get_github_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_database_uri, get_storage_config
from .upstream import UpstreamConfig, get_upstream_config
from .workflow import WorkflowConfig, get_workflow_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "GitHubConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "UpstreamConfig",
    "WorkflowConfig",
    "configure_logging",
    "get_database_uri",
    "get_github_config",
    "get_storage_config",
    "get_upstream_config",
    "get_workflow_config",
    "optional_env_float",
    "require_env_var",
    "require_env_vars",
]
