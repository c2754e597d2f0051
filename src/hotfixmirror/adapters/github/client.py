"""Async wrapper around the GitHub REST endpoints used by the repository sink."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from hotfixmirror.domain.errors import NotFoundError

from .schema import ContentFile, ContentWriteResponse, GitBlob, GitCommit, GitObject, GitRef, GitTree

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from hotfixmirror.adapters.http_resilience import ResilientClient

FILE_MODE = "100644"


def _check(response: httpx.Response) -> httpx.Response:
    if response.status_code == 404:
        raise NotFoundError("{0} not found", str(response.request.url.path))
    response.raise_for_status()
    return response


def _ref_path(branch: str) -> str:
    return f"heads/{quote(branch, safe='/')}"


class GitHubApi:
    """Git data and contents endpoints of one repository.

    The wrapped client carries the ``/repos/{owner}/{repo}/`` base URL. Reads of
    missing objects raise :class:`NotFoundError`; every other non-2xx status
    raises ``httpx.HTTPStatusError``.
    """

    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    async def get_ref(self, branch: str) -> GitRef:
        response = _check(await self._client.get(f"git/ref/{_ref_path(branch)}"))
        return GitRef.model_validate_json(response.content)

    async def create_ref(self, branch: str, sha: str) -> GitRef:
        response = _check(
            await self._client.post("git/refs", json={"ref": f"refs/heads/{branch}", "sha": sha})
        )
        return GitRef.model_validate_json(response.content)

    async def update_ref(self, branch: str, sha: str) -> GitRef:
        response = _check(
            await self._client.patch(
                f"git/refs/{_ref_path(branch)}", json={"sha": sha, "force": False}
            )
        )
        return GitRef.model_validate_json(response.content)

    async def get_commit(self, sha: str) -> GitCommit:
        response = _check(await self._client.get(f"git/commits/{sha}"))
        return GitCommit.model_validate_json(response.content)

    async def create_commit(self, message: str, tree_sha: str, parents: Sequence[str]) -> GitCommit:
        response = _check(
            await self._client.post(
                "git/commits",
                json={"message": message, "tree": tree_sha, "parents": list(parents)},
            )
        )
        return GitCommit.model_validate_json(response.content)

    async def get_tree(self, sha: str, *, recursive: bool = True) -> GitTree:
        params = {"recursive": "1"} if recursive else None
        response = _check(await self._client.get(f"git/trees/{sha}", params=params))
        return GitTree.model_validate_json(response.content)

    async def create_tree(
        self,
        entries: Sequence[dict[str, Any]],
        *,
        base_tree: str | None = None,
    ) -> GitTree:
        payload: dict[str, Any] = {"tree": list(entries)}
        if base_tree is not None:
            payload["base_tree"] = base_tree
        response = _check(await self._client.post("git/trees", json=payload))
        return GitTree.model_validate_json(response.content)

    async def get_blob(self, sha: str) -> GitBlob:
        response = _check(await self._client.get(f"git/blobs/{sha}"))
        return GitBlob.model_validate_json(response.content)

    async def create_blob(self, content: str) -> GitObject:
        response = _check(
            await self._client.post("git/blobs", json={"content": content, "encoding": "utf-8"})
        )
        return GitObject.model_validate_json(response.content)

    async def get_contents(self, path: str, *, branch: str) -> ContentFile | None:
        """File at ``path`` on ``branch``; ``None`` when the path is a directory."""

        response = _check(
            await self._client.get(f"contents/{quote(path)}", params={"ref": branch})
        )
        payload = response.json()
        if isinstance(payload, list):
            return None
        return ContentFile.model_validate(payload)

    async def put_contents(
        self,
        path: str,
        content: str,
        *,
        branch: str,
        message: str,
        sha: str | None,
    ) -> ContentWriteResponse:
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha is not None:
            payload["sha"] = sha
        response = _check(await self._client.put(f"contents/{quote(path)}", json=payload))
        return ContentWriteResponse.model_validate_json(response.content)


def blob_entry(path: str, sha: str) -> dict[str, Any]:
    return {"path": path, "mode": FILE_MODE, "type": "blob", "sha": sha}


def inline_entry(path: str, content: str) -> dict[str, Any]:
    return {"path": path, "mode": FILE_MODE, "type": "blob", "content": content}
