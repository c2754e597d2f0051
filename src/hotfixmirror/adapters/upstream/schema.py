"""Pydantic models for the upstream account and cloud-storage endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter


class UpstreamBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenResponse(UpstreamBaseModel):
    access_token: str
    expires_in: float | None = None
    token_type: str | None = None
    client_id: str | None = None


class CloudStorageFile(UpstreamBaseModel):
    unique_filename: str = Field(alias="uniqueFilename")
    filename: str
    hash: str
    hash256: str
    length: int
    content_type: str | None = Field(default=None, alias="contentType")
    uploaded: datetime | None = None
    storage_type: str | None = Field(default=None, alias="storageType")
    storage_ids: dict[str, str] = Field(default_factory=dict, alias="storageIds")
    do_not_cache: bool = Field(default=False, alias="doNotCache")


class VersionModule(UpstreamBaseModel):
    cln: str
    build: str
    build_date: datetime = Field(alias="buildDate")
    version: str
    branch: str


class VersionResponse(UpstreamBaseModel):
    app: str
    server_date: datetime = Field(alias="serverDate")
    override_properties_version: str = Field(alias="overridePropertiesVersion")
    cln: str
    build: str
    module_name: str = Field(alias="moduleName")
    build_date: datetime = Field(alias="buildDate")
    # names the version branch
    version: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    branch: str
    modules: dict[str, VersionModule]


class ErrorResponse(UpstreamBaseModel):
    error_code: str | None = Field(default=None, alias="errorCode")
    error_message: str | None = Field(default=None, alias="errorMessage")
    numeric_error_code: int | None = Field(default=None, alias="numericErrorCode")


CloudStorageListing = TypeAdapter(list[CloudStorageFile])
