"""Public interface for the GitHub adapter."""

from __future__ import annotations

from .client import GitHubApi
from .sink import GitHubRepositorySink

__all__ = ["GitHubApi", "GitHubRepositorySink"]
