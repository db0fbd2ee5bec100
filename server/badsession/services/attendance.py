from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from badsession.config import GUEST_FEE_NOTE
from badsession.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from badsession.models.attendance import Attendance
from badsession.models.finance import Donation
from badsession.models.play_session import PlaySession
from badsession.models.user import User
from badsession.schemas.attendance import AttendanceHistoryItem, AttendanceOut, CheckInRequest
from badsession.services.finance import get_finance_settings
from badsession.services.sessions import get_session_or_404

logger = logging.getLogger(__name__)


def _serialize(record: Attendance) -> AttendanceOut:
    return AttendanceOut(
        id=record.id,
        session_id=record.session_id,
        user_id=record.user_id,
        guest_name=record.guest_name,
        is_guest=record.is_guest,
        check_in_time=record.check_in_time,
        checked_in_by=record.checked_in_by,
        name=record.display_name,
        checked_in_by_name=record.checked_in_by_user.full_name if record.checked_in_by_user else None,
    )


def check_in(db: Session, payload: CheckInRequest, actor: User) -> Attendance:
    guest_name = (payload.guest_name or "").strip()
    if not payload.session_id:
        raise ValidationError("Session ID is required")
    if payload.is_self_checkin and guest_name:
        raise ValidationError("Cannot use guest name for self check-in")
    if not payload.is_self_checkin and not guest_name:
        raise ValidationError("Guest name is required for guest check-in")

    get_session_or_404(db, payload.session_id)

    if payload.is_self_checkin:
        return _self_check_in(db, payload.session_id, actor)
    return _guest_check_in(db, payload.session_id, guest_name, actor)


def _self_check_in(db: Session, session_id: int, actor: User) -> Attendance:
    existing = (
        db.query(Attendance.id)
        .filter(Attendance.session_id == session_id, Attendance.user_id == actor.id)
        .first()
    )
    if existing:
        raise ConflictError("You have already checked in for this session")

    record = Attendance(session_id=session_id, user_id=actor.id, is_guest=False)
    db.add(record)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("You have already checked in for this session") from exc
    db.refresh(record)
    logger.info("self_check_in", extra={"session_id": session_id, "user_id": actor.id})
    return record


def _guest_check_in(db: Session, session_id: int, guest_name: str, actor: User) -> Attendance:
    now = datetime.utcnow()
    record = Attendance(
        session_id=session_id,
        guest_name=guest_name,
        is_guest=True,
        checked_in_by=actor.id,
        check_in_time=now,
    )
    db.add(record)
    db.flush()

    settings_row = get_finance_settings(db)
    guest_rate = Decimal(settings_row.guest_daily_rate or 0) if settings_row else Decimal("0")
    if guest_rate > 0:
        db.add(
            Donation(
                contributor_id=None,
                contributor_name=guest_name,
                is_guest=True,
                amount=guest_rate,
                notes=GUEST_FEE_NOTE,
                donated_at=now,
            )
        )
    # Attendance and the guest fee are committed together.
    db.commit()
    db.refresh(record)
    logger.info(
        "guest_check_in",
        extra={"session_id": session_id, "guest_name": guest_name, "checked_in_by": actor.id, "fee": str(guest_rate)},
    )
    return record


def list_attendance(db: Session) -> list[AttendanceOut]:
    records = (
        db.query(Attendance)
        .options(selectinload(Attendance.user), selectinload(Attendance.checked_in_by_user))
        .order_by(Attendance.check_in_time.desc(), Attendance.id.desc())
        .all()
    )
    return [_serialize(record) for record in records]


def _history(db: Session, *filters) -> list[AttendanceHistoryItem]:
    rows = (
        db.query(Attendance, PlaySession)
        .join(PlaySession, Attendance.session_id == PlaySession.id)
        .filter(*filters)
        .order_by(PlaySession.session_date.desc(), PlaySession.session_time.desc())
        .all()
    )
    return [
        AttendanceHistoryItem(
            id=record.id,
            session_id=play_session.id,
            session_date=play_session.session_date,
            session_time=play_session.session_time,
            location=play_session.location,
            check_in_time=record.check_in_time,
        )
        for record, play_session in rows
    ]


def player_history(db: Session, player_id: int) -> list[AttendanceHistoryItem]:
    return _history(db, Attendance.user_id == player_id, Attendance.is_guest.is_(False))


def guest_history(db: Session, guest_name: str) -> list[AttendanceHistoryItem]:
    return _history(db, Attendance.guest_name == guest_name, Attendance.is_guest.is_(True))


def _get_owned_record(db: Session, attendance_id: int, actor: User, action: str) -> Attendance:
    record = db.get(Attendance, attendance_id)
    if not record:
        raise NotFoundError("Attendance record")
    if record.is_guest:
        if record.checked_in_by != actor.id:
            raise AuthorizationError(f"You can only {action} guest check-ins you created")
    elif record.user_id != actor.id:
        raise AuthorizationError(f"You can only {action} your own check-in")
    return record


def update_attendance(db: Session, attendance_id: int, guest_name: str | None, actor: User) -> Attendance:
    record = _get_owned_record(db, attendance_id, actor, "edit")
    cleaned = (guest_name or "").strip()
    if record.is_guest and cleaned:
        record.guest_name = cleaned
        db.commit()
        db.refresh(record)
    return record


def delete_attendance(db: Session, attendance_id: int, actor: User) -> None:
    record = _get_owned_record(db, attendance_id, actor, "delete")
    db.delete(record)
    db.commit()
    logger.info("attendance_deleted", extra={"attendance_id": attendance_id, "actor_id": actor.id})
