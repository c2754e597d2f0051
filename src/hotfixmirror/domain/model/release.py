"""Upstream release (build) information."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

UNKNOWN_VERSION: Final[str] = "unknown"
VERSION_BRANCH_PREFIX: Final[str] = "version-"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseVersion:
    """The release active upstream when a run starts."""

    label: str
    build: str | None = None
    branch: str | None = None
    cln: str | None = None

    @property
    def branch_name(self) -> str:
        return version_branch_name(self.label)


def version_branch_name(label: str) -> str:
    return f"{VERSION_BRANCH_PREFIX}{label}"


def is_known_version(label: str | None) -> bool:
    return label is not None and label.strip() != "" and label != UNKNOWN_VERSION
