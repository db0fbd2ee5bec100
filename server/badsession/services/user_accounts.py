from __future__ import annotations

import logging

from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from badsession.auth.security import hash_password, verify_password
from badsession.config import ROLE_ADMIN, ROLE_GUEST, ROLE_PLAYER, USER_ROLES
from badsession.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from badsession.models.user import User

logger = logging.getLogger(__name__)

# The account created by the initial seed cannot be removed.
PROTECTED_USER_ID = 1


def username_taken(db: Session, username: str) -> bool:
    return bool(db.query(exists().where(User.username == username)).scalar())


def create_user(db: Session, *, username: str, password: str, full_name: str, role: str = ROLE_PLAYER) -> User:
    username = username.strip()
    full_name = full_name.strip()
    if not username or not full_name:
        raise ValidationError("Missing required fields")
    if role not in USER_ROLES:
        raise ValidationError("Invalid role")
    if username_taken(db, username):
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password=hash_password(password),
        full_name=full_name,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Username already exists") from exc
    db.refresh(user)
    logger.info("user_created", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password):
        logger.warning("login_failed", extra={"username": username})
        raise AuthenticationError("Invalid credentials")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User")
    return user


def update_role(db: Session, user_id: int, role: str) -> User:
    if role not in USER_ROLES:
        raise ValidationError("Invalid role")
    user = get_user(db, user_id)
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("user_role_updated", extra={"user_id": user.id, "role": role})
    return user


def change_password(
    db: Session,
    *,
    actor: User,
    actor_role: str,
    user_id: int,
    old_password: str | None,
    new_password: str,
) -> None:
    is_admin = actor_role == ROLE_ADMIN
    if actor.id != user_id and not is_admin:
        raise AuthorizationError("Cannot change other user passwords")
    user = get_user(db, user_id)
    if not is_admin and not verify_password(old_password or "", user.password):
        raise AuthenticationError("Current password is incorrect")
    user.password = hash_password(new_password)
    db.commit()


def ensure_deletable(actor: User, user_id: int) -> None:
    if actor.id == user_id:
        raise ValidationError("Cannot delete your own account")
    if user_id == PROTECTED_USER_ID:
        raise ValidationError("Cannot delete the original admin account")


def delete_user(db: Session, actor: User, user_id: int) -> None:
    ensure_deletable(actor, user_id)
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user_deleted", extra={"user_id": user_id, "actor_id": actor.id})


def convert_role(db: Session, user_id: int, *, from_role: str, to_role: str) -> User:
    user = get_user(db, user_id)
    if user.role != from_role:
        raise ValidationError(f"User is not a {from_role}. Can only convert {from_role}s to {to_role}s.")
    user.role = to_role
    db.commit()
    db.refresh(user)
    logger.info("user_role_converted", extra={"user_id": user.id, "from": from_role, "to": to_role})
    return user


def player_to_guest(db: Session, user_id: int) -> User:
    return convert_role(db, user_id, from_role=ROLE_PLAYER, to_role=ROLE_GUEST)


def guest_to_player(db: Session, user_id: int) -> User:
    return convert_role(db, user_id, from_role=ROLE_GUEST, to_role=ROLE_PLAYER)


def ensure_seed_admin(db: Session, *, username: str, password: str | None, full_name: str) -> User | None:
    """Create the first admin account when the users table is empty."""
    if db.query(User.id).first() is not None:
        return None
    if not password:
        logger.warning("seed_admin_skipped", extra={"reason": "ADMIN_PASSWORD not configured"})
        return None
    admin = User(username=username, password=hash_password(password), full_name=full_name, role=ROLE_ADMIN)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("seed_admin_created", extra={"user_id": admin.id, "username": username})
    return admin
