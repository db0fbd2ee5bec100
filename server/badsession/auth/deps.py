from typing import Any, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from badsession.auth.security import decode_access_token
from badsession.core.db import get_db
from badsession.core.errors import AuthenticationError, AuthorizationError
from badsession.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    if not credentials:
        raise AuthenticationError("Access token required")
    try:
        claims = decode_access_token(credentials.credentials)
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token") from exc
    if claims.get("sub") is None:
        raise AuthenticationError("Invalid token payload")
    return claims


def get_current_user(
    claims: dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    try:
        user = db.get(User, int(claims["sub"]))
    except (TypeError, ValueError):
        user = None
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    """Gate on the role carried in the token, not the one currently stored."""

    def checker(
        claims: dict[str, Any] = Depends(get_token_claims),
        user: User = Depends(get_current_user),
    ) -> User:
        if claims.get("role") not in roles:
            raise AuthorizationError("Forbidden - insufficient permissions")
        return user

    return checker
