from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user
from badsession.auth.security import create_access_token
from badsession.config import ROLE_PLAYER
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserPublic
from badsession.services import user_accounts

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> RegisterResponse:
    user = user_accounts.create_user(
        db,
        username=payload.username,
        password=payload.password,
        full_name=payload.full_name,
        role=ROLE_PLAYER,
    )
    return RegisterResponse(message="User registered successfully", user_id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    user = user_accounts.authenticate(db, payload.username, payload.password)
    token = create_access_token(subject=str(user.id), role=user.role, username=user.username)
    return LoginResponse(token=token, user=UserPublic.model_validate(user))


@router.get("/me", response_model=UserPublic)
def me(user: User = Depends(get_current_user)) -> UserPublic:
    return UserPublic.model_validate(user)
