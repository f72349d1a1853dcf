"""
scanconsole/api/models.py
Wire models for the platform's JSON envelopes.

Every response body is an object with an application-level `code`
(0 = success) and `msg`. Endpoints add their own fields either at the top
level (login, list endpoints) or under `data`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scanconsole.errors import ApplicationError, ResultCode, describe


class ApiResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    code: int = ResultCode.OK
    msg: str = ""
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.code == ResultCode.OK

    def raise_for_code(self) -> "ApiResponse":
        """Raise ApplicationError for a non-zero code; return self otherwise."""
        if not self.ok:
            raise ApplicationError(self.code, self.msg or describe(self.code))
        return self


class LoginCredentials(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=256)


class LoginResult(ApiResponse):
    token: str = ""
    user_id: str = Field(default="", alias="userId")
    username: str = ""
    role: str = ""
    workspace_id: str = Field(default="", alias="workspaceId")

    @field_validator("token", "user_id", "username", "role", "workspace_id", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Workspace(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    status: str = ""

    @field_validator("name", "description", "status", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class WorkspaceListResult(ApiResponse):
    total: int = 0
    items: List[Workspace] = Field(default_factory=list, alias="list")

    @field_validator("items", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v


def parse_envelope(payload: Dict[str, Any]) -> ApiResponse:
    return ApiResponse.model_validate(payload)
