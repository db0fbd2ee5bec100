from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user, get_token_claims, require_roles
from badsession.config import ROLE_ADMIN, ROLE_PLAYER
from badsession.core.db import get_db
from badsession.core.errors import AuthorizationError
from badsession.models.user import User
from badsession.schemas.auth import UserPublic
from badsession.schemas.common import MessageResponse
from badsession.schemas.user import (
    PasswordChangeRequest,
    RoleConversionResponse,
    RoleUpdateRequest,
    UserCreate,
    UserCreatedResponse,
    UserOut,
)
from badsession.services import user_accounts

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users(
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(ROLE_ADMIN)),
) -> list[UserOut]:
    return [UserOut.model_validate(user) for user in user_accounts.list_users(db)]


@router.get("/profile/me", response_model=UserOut)
def my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserOut:
    return UserOut.model_validate(user_accounts.get_user(db, current_user.id))


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(ROLE_ADMIN)),
) -> UserCreatedResponse:
    user = user_accounts.create_user(
        db,
        username=payload.username,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role or ROLE_PLAYER,
    )
    return UserCreatedResponse(
        message="User created successfully",
        user_id=user.id,
        user=UserPublic.model_validate(user),
    )


@router.put("/{user_id:int}/role", response_model=MessageResponse)
def update_role(
    user_id: int,
    payload: RoleUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(ROLE_ADMIN)),
) -> MessageResponse:
    user_accounts.update_role(db, user_id, payload.role)
    return MessageResponse(message="Role updated successfully")


@router.put("/{user_id:int}/password", response_model=MessageResponse)
def change_password(
    user_id: int,
    payload: PasswordChangeRequest,
    db: Session = Depends(get_db),
    claims: dict[str, Any] = Depends(get_token_claims),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    user_accounts.change_password(
        db,
        actor=current_user,
        actor_role=claims.get("role", ""),
        user_id=user_id,
        old_password=payload.old_password,
        new_password=payload.new_password,
    )
    return MessageResponse(message="Password updated successfully")


@router.delete("/{user_id:int}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    claims: dict[str, Any] = Depends(get_token_claims),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    # Self and original-admin guards apply before the role gate.
    user_accounts.ensure_deletable(current_user, user_id)
    if claims.get("role") != ROLE_ADMIN:
        raise AuthorizationError("Forbidden - insufficient permissions")
    user_accounts.delete_user(db, current_user, user_id)
    return MessageResponse(message="User deleted successfully")


@router.post("/{user_id:int}/player-to-guest", response_model=RoleConversionResponse)
def player_to_guest(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(ROLE_ADMIN)),
) -> RoleConversionResponse:
    user = user_accounts.player_to_guest(db, user_id)
    return RoleConversionResponse(
        message="User successfully converted from Player to Guest",
        user=UserPublic.model_validate(user),
    )


@router.post("/{user_id:int}/guest-to-player", response_model=RoleConversionResponse)
def guest_to_player(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(ROLE_ADMIN)),
) -> RoleConversionResponse:
    user = user_accounts.guest_to_player(db, user_id)
    return RoleConversionResponse(
        message="User successfully converted from Guest to Player",
        user=UserPublic.model_validate(user),
    )
