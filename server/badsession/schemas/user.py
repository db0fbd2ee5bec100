from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from badsession.config import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)
from badsession.schemas.auth import UserPublic


class UserOut(BaseModel):
    id: int
    username: str
    full_name: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    full_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    role: str | None = None


class UserCreatedResponse(BaseModel):
    message: str
    user_id: int
    user: UserPublic


class RoleUpdateRequest(BaseModel):
    role: str


class PasswordChangeRequest(BaseModel):
    old_password: str | None = None
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class RoleConversionResponse(BaseModel):
    message: str
    user: UserPublic
