"""GitHub repository sink configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_STABLE_BRANCH = "main"
GITHUB_API_VERSION = "2022-11-28"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    owner: str
    repo: str
    stable_branch: str
    resilience: ResilienceConfig

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"


def get_github_config() -> GitHubConfig:
    values = require_env_vars(("GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO"))
    api_url = os.getenv("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL
    owner = values["GITHUB_OWNER"]
    repo = values["GITHUB_REPO"]

    resilience = ResilienceConfig(
        name="github",
        base_url=f"{api_url.rstrip('/')}/repos/{owner}/{repo}/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        # ref and contents reads must never be served stale
        cache=None,
        default_headers={
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {values['GITHUB_TOKEN']}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        },
    )
    return GitHubConfig(
        owner=owner,
        repo=repo,
        stable_branch=os.getenv("GITHUB_STABLE_BRANCH") or DEFAULT_STABLE_BRANCH,
        resilience=resilience,
    )
