"""Port for mirroring hotfix files into a version-controlled repository."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hotfixmirror.domain.model import RepositoryFile


@dataclass(frozen=True, slots=True)
class FileWriteResult:
    branch: str
    path: str
    skipped: bool
    commit_sha: str | None = None


@dataclass(frozen=True, slots=True)
class BatchWriteResult:
    branch: str
    written: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    commit_sha: str | None = None

    @property
    def skipped(self) -> bool:
        return not self.written


@runtime_checkable
class RepositorySink(Protocol):
    """Branch-aware writer that never rewrites identical content."""

    def ensure_branch(self, name: str, placeholder: str) -> bool: ...

    def write_file(self, branch: str, path: str, content: str, message: str) -> FileWriteResult: ...

    def write_files(
        self,
        branch: str,
        files: Sequence[RepositoryFile],
        message: str,
    ) -> BatchWriteResult: ...

    def push_summary_document(self, branch: str, content: str, message: str) -> FileWriteResult: ...
