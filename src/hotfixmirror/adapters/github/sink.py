"""Repository sink writing hotfix files to GitHub branches."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from hotfixmirror.adapters.http_resilience import ResilientClient
from hotfixmirror.domain.errors import NotFoundError
from hotfixmirror.domain.ports.mirroring import BatchWriteResult, FileWriteResult
from hotfixmirror.domain.summary import SUMMARY_PATH

from .client import GitHubApi, blob_entry, inline_entry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from hotfixmirror.config.http_resilience import ResilienceConfig
    from hotfixmirror.domain.model import RepositoryFile

    from .schema import ContentFile, GitTreeEntry

log = getLogger(__name__)

_REF_EXISTS_STATUS = 422


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class GitHubRepositorySink:
    """Mirror files into branches of one GitHub repository.

    Every write reads the current content first and leaves identical files
    alone, so repeating any call after a partial failure is safe.
    """

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def ensure_branch(self, name: str, placeholder: str) -> bool:
        return asyncio.run(self._ensure_branch_async(name, placeholder))

    def write_file(self, branch: str, path: str, content: str, message: str) -> FileWriteResult:
        return asyncio.run(self._write_file_async(branch, path, content, message))

    def write_files(
        self,
        branch: str,
        files: Sequence[RepositoryFile],
        message: str,
    ) -> BatchWriteResult:
        return asyncio.run(self._write_files_async(branch, files, message))

    def push_summary_document(self, branch: str, content: str, message: str) -> FileWriteResult:
        return self.write_file(branch, SUMMARY_PATH, content, message)

    async def _ensure_branch_async(self, name: str, placeholder: str) -> bool:
        async with self.client_factory(self.resilience) as client:
            api = GitHubApi(client)
            try:
                await api.get_ref(name)
            except NotFoundError:
                pass
            else:
                return False

            # the git data API refuses empty trees, so the root commit carries a README
            tree = await api.create_tree([inline_entry(SUMMARY_PATH, placeholder)])
            commit = await api.create_commit(f"Initialize {name} branch", tree.sha, [])
            try:
                await api.create_ref(name, commit.sha)
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code != _REF_EXISTS_STATUS:
                    raise
                log.warning("Branch %s was created concurrently, keeping it", name)
                return False

        log.info("Created branch %s", name)
        return True

    async def _write_file_async(
        self,
        branch: str,
        path: str,
        content: str,
        message: str,
    ) -> FileWriteResult:
        async with self.client_factory(self.resilience) as client:
            api = GitHubApi(client)
            existing = await _read_contents(api, path, branch=branch)
            if existing is not None and existing.decoded() == content.encode("utf-8"):
                log.debug("%s on %s is unchanged, skipping", path, branch)
                return FileWriteResult(branch=branch, path=path, skipped=True)

            written = await api.put_contents(
                path,
                content,
                branch=branch,
                message=message,
                sha=existing.sha if existing is not None else None,
            )

        log.info("Wrote %s to %s", path, branch)
        return FileWriteResult(
            branch=branch, path=path, skipped=False, commit_sha=written.commit.sha
        )

    async def _write_files_async(
        self,
        branch: str,
        files: Sequence[RepositoryFile],
        message: str,
    ) -> BatchWriteResult:
        if not files:
            return BatchWriteResult(branch=branch)

        async with self.client_factory(self.resilience) as client:
            api = GitHubApi(client)
            head = await api.get_ref(branch)
            head_commit = await api.get_commit(head.target.sha)
            tree = await api.get_tree(head_commit.tree.sha, recursive=True)
            blobs: dict[str, GitTreeEntry] = {
                entry.path: entry for entry in tree.tree if entry.type == "blob"
            }

            entries: list[dict[str, str]] = []
            written: list[str] = []
            unchanged: list[str] = []
            for file in files:
                expected = file.content.encode("utf-8")
                current = await _current_bytes(
                    api, file.path, blobs, branch=branch, truncated=tree.truncated
                )
                if current == expected:
                    unchanged.append(file.path)
                    continue
                blob = await api.create_blob(file.content)
                entries.append(blob_entry(file.path, blob.sha))
                written.append(file.path)

            if not entries:
                log.info("All %s file(s) on %s are unchanged, no commit", len(files), branch)
                return BatchWriteResult(branch=branch, unchanged=tuple(unchanged))

            # entries not listed here are carried over from the base tree
            new_tree = await api.create_tree(entries, base_tree=tree.sha)
            commit = await api.create_commit(message, new_tree.sha, [head.target.sha])
            await api.update_ref(branch, commit.sha)

        log.info(
            "Committed %s file(s) to %s (%s unchanged) as %s",
            len(written),
            branch,
            len(unchanged),
            commit.sha,
        )
        return BatchWriteResult(
            branch=branch,
            written=tuple(written),
            unchanged=tuple(unchanged),
            commit_sha=commit.sha,
        )


async def _read_contents(api: GitHubApi, path: str, *, branch: str) -> ContentFile | None:
    try:
        return await api.get_contents(path, branch=branch)
    except NotFoundError:
        return None


async def _current_bytes(
    api: GitHubApi,
    path: str,
    blobs: dict[str, GitTreeEntry],
    *,
    branch: str,
    truncated: bool,
) -> bytes | None:
    entry = blobs.get(path)
    if entry is not None and entry.sha is not None:
        return (await api.get_blob(entry.sha)).decoded()
    if truncated:
        # a truncated listing may omit the path, ask for it directly
        existing = await _read_contents(api, path, branch=branch)
        return existing.decoded() if existing is not None else None
    return None
