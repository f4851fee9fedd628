"""Pydantic models describing the Firebase REST payloads we consume."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FirebaseBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorDetail(FirebaseBaseModel):
    code: int
    message: str
    status: str | None = None

    @property
    def reason(self) -> str:
        """Leading error token, e.g. ``USER_NOT_FOUND`` from ``"USER_NOT_FOUND : ..."``."""

        return self.message.split(":", 1)[0].strip()


class ErrorResponse(FirebaseBaseModel):
    error: ErrorDetail


class UserInfo(FirebaseBaseModel):
    local_id: str = Field(alias="localId")
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class LookupResponse(FirebaseBaseModel):
    users: list[UserInfo] = Field(default_factory=list)


class AccountResponse(FirebaseBaseModel):
    local_id: str = Field(alias="localId")
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class WriteResult(FirebaseBaseModel):
    update_time: str | None = Field(default=None, alias="updateTime")


class CommitResponse(FirebaseBaseModel):
    write_results: list[WriteResult] = Field(default_factory=list, alias="writeResults")
    commit_time: str | None = Field(default=None, alias="commitTime")


class StorageObject(FirebaseBaseModel):
    name: str
    bucket: str
    generation: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")
