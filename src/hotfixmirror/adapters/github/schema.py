"""Minimal Pydantic models for the GitHub git-data and contents APIs."""

from __future__ import annotations

import base64

from pydantic import BaseModel, ConfigDict, Field


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GitObject(GitHubBaseModel):
    sha: str
    type: str | None = None


class GitRef(GitHubBaseModel):
    ref: str
    target: GitObject = Field(alias="object")


class GitTreeRef(GitHubBaseModel):
    sha: str


class GitCommit(GitHubBaseModel):
    sha: str
    tree: GitTreeRef
    parents: list[GitObject] = Field(default_factory=list["GitObject"])
    message: str | None = None


class GitTreeEntry(GitHubBaseModel):
    path: str
    mode: str
    type: str
    sha: str | None = None
    size: int | None = None


class GitTree(GitHubBaseModel):
    sha: str
    tree: list[GitTreeEntry] = Field(default_factory=list["GitTreeEntry"])
    truncated: bool = False


def _decode(content: str | None, encoding: str | None) -> bytes:
    if content is None:
        return b""
    if encoding == "base64":
        # the API wraps base64 payloads at 60 columns
        return base64.b64decode(content.replace("\n", ""))
    return content.encode("utf-8")


class GitBlob(GitHubBaseModel):
    sha: str
    content: str | None = None
    encoding: str | None = None
    size: int | None = None

    def decoded(self) -> bytes:
        return _decode(self.content, self.encoding)


class ContentFile(GitHubBaseModel):
    type: str
    path: str
    sha: str
    content: str | None = None
    encoding: str | None = None

    def decoded(self) -> bytes:
        return _decode(self.content, self.encoding)


class ContentWriteResponse(GitHubBaseModel):
    content: ContentFile | None = None
    commit: GitObject
