from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    password: str | None = None


class SignupRequest(Credentials):
    name: str | None = None


class SignupData(BaseModel):
    user: dict[str, Any] | None = None
    message: str


class LoginData(BaseModel):
    user: dict[str, Any] | None = None
    session: dict[str, Any] | None = None


class CurrentUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    address: str | None = None
