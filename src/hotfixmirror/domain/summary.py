"""Generated README documents for the mirror repository.

Documents are pure functions of their inputs (no timestamps), so regenerating
them on an unchanged state yields identical bytes and the repository sink skips
the write.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from hotfixmirror.domain.model import HOTFIX_DIRECTORY, is_known_version, version_branch_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from hotfixmirror.domain.model import ReleaseVersion

SUMMARY_PATH: Final[str] = "README.md"

_VERSION_PARTS = re.compile(r"\d+|\D+")


def version_sort_key(label: str) -> tuple[tuple[int, int | str], ...]:
    """Natural ordering: ``9.10`` sorts before ``10.0``."""

    return tuple(
        (0, int(part)) if part.isdigit() else (1, part) for part in _VERSION_PARTS.findall(label)
    )


def sorted_versions(labels: Iterable[str]) -> list[str]:
    unique = {label for label in labels if is_known_version(label)}
    return sorted(unique, key=lambda label: (version_sort_key(label), label))


def branch_placeholder(branch: str) -> str:
    return f"# {branch}\n\nThis branch is maintained automatically by hotfixmirror.\n"


def render_version_summary(version: ReleaseVersion) -> str:
    lines = [
        f"# Hotfixes for version {version.label}",
        "",
        f"Hotfix files observed upstream while version `{version.label}` was live.",
        f"They live under `{HOTFIX_DIRECTORY}/`.",
        "",
    ]
    details = [
        ("Build", version.build),
        ("Release branch", version.branch),
        ("Changelist", version.cln),
    ]
    known = [(name, value) for name, value in details if value]
    if known:
        lines.extend(f"- {name}: `{value}`" for name, value in known)
        lines.append("")
    return "\n".join(lines)


def render_stable_summary(versions: Iterable[str], *, repository_url: str) -> str:
    lines = [
        "# Hotfix archive",
        "",
        "Hotfix files mirrored from the upstream cloud storage catalog.",
        f"`{HOTFIX_DIRECTORY}/` on this branch always holds the latest content seen;",
        "each version branch keeps the files observed while that version was live.",
        "",
        "## Versions",
        "",
    ]
    ordered = sorted_versions(versions)
    if not ordered:
        lines.append("_No versions recorded yet._")
    for label in ordered:
        branch = version_branch_name(label)
        lines.append(f"- [{label}]({repository_url}/tree/{quote(branch)})")
    lines.append("")
    return "\n".join(lines)
