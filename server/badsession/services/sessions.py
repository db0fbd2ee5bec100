from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from badsession.config import CHECK_IN_TIME_FORMAT
from badsession.core.errors import NotFoundError
from badsession.models.attendance import Attendance
from badsession.models.play_session import PlaySession
from badsession.models.user import User
from badsession.schemas.session import SessionAttendanceOut, SessionCreate, SessionDetail, SessionOut

logger = logging.getLogger(__name__)


def attendance_counts(db: Session, session_ids: list[int] | None = None) -> dict[int, int]:
    query = db.query(Attendance.session_id, func.count(Attendance.id)).group_by(Attendance.session_id)
    if session_ids is not None:
        if not session_ids:
            return {}
        query = query.filter(Attendance.session_id.in_(session_ids))
    return {session_id: count for session_id, count in query.all()}


def _serialize_session(play_session: PlaySession, attendance_count: int) -> SessionOut:
    return SessionOut(
        id=play_session.id,
        session_date=play_session.session_date,
        session_time=play_session.session_time,
        location=play_session.location,
        created_by=play_session.created_by,
        created_by_name=play_session.creator.full_name if play_session.creator else None,
        created_at=play_session.created_at,
        attendance_count=attendance_count,
    )


def _serialize_attendance(record: Attendance) -> SessionAttendanceOut:
    return SessionAttendanceOut(
        id=record.id,
        user_id=record.user_id,
        guest_name=record.guest_name,
        is_guest=record.is_guest,
        check_in_time=record.check_in_time,
        checked_in_by=record.checked_in_by,
        name=record.display_name,
        checked_in_by_name=record.checked_in_by_user.full_name if record.checked_in_by_user else None,
        formatted_check_in_time=record.check_in_time.strftime(CHECK_IN_TIME_FORMAT),
    )


def create_session(db: Session, payload: SessionCreate, actor: User) -> PlaySession:
    play_session = PlaySession(
        session_date=payload.session_date,
        session_time=payload.session_time,
        location=payload.location,
        created_by=actor.id,
    )
    db.add(play_session)
    db.commit()
    db.refresh(play_session)
    logger.info("session_created", extra={"session_id": play_session.id, "actor_id": actor.id})
    return play_session


def get_session_or_404(db: Session, session_id: int) -> PlaySession:
    play_session = db.get(PlaySession, session_id)
    if not play_session:
        raise NotFoundError("Session")
    return play_session


def list_sessions(db: Session, *, limit: int | None = None) -> list[SessionOut]:
    query = (
        db.query(PlaySession)
        .options(selectinload(PlaySession.creator))
        .order_by(PlaySession.session_date.desc(), PlaySession.session_time.desc(), PlaySession.id.desc())
    )
    if limit:
        query = query.limit(limit)
    sessions = query.all()
    counts = attendance_counts(db, [item.id for item in sessions])
    return [_serialize_session(item, counts.get(item.id, 0)) for item in sessions]


def get_session_detail(db: Session, session_id: int) -> SessionDetail:
    play_session = get_session_or_404(db, session_id)
    records = (
        db.query(Attendance)
        .options(selectinload(Attendance.user), selectinload(Attendance.checked_in_by_user))
        .filter(Attendance.session_id == session_id)
        .order_by(Attendance.check_in_time.desc(), Attendance.id.desc())
        .all()
    )
    summary = _serialize_session(play_session, len(records))
    return SessionDetail(
        **summary.model_dump(),
        attendance=[_serialize_attendance(record) for record in records],
    )
