from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from badsession.config import RECENT_ITEMS_LIMIT, ROLE_PLAYER
from badsession.models.attendance import Attendance
from badsession.models.user import User
from badsession.schemas.dashboard import DashboardResponse, RecentDonation, RecentExpense, RecentSession
from badsession.services import finance as finance_service
from badsession.services import sessions as sessions_service


def build_dashboard(db: Session) -> DashboardResponse:
    player_count = db.query(func.count(User.id)).filter(User.role == ROLE_PLAYER).scalar() or 0
    guest_count = (
        db.query(func.count(func.distinct(Attendance.guest_name)))
        .filter(Attendance.is_guest.is_(True))
        .scalar()
        or 0
    )
    summary = finance_service.summarize(db)

    donations = finance_service.list_donations(db, limit=RECENT_ITEMS_LIMIT)
    expenses = finance_service.list_expenses(db, limit=RECENT_ITEMS_LIMIT)
    sessions = sessions_service.list_sessions(db, limit=RECENT_ITEMS_LIMIT)

    return DashboardResponse(
        player_count=player_count,
        guest_count=guest_count,
        **summary.model_dump(),
        recent_donations=[
            RecentDonation(
                id=item.id,
                contributor_name=item.contributor_name,
                contributor_full_name=item.contributor_full_name,
                amount=item.amount,
                donated_at=item.donated_at,
            )
            for item in donations
        ],
        recent_expenses=[
            RecentExpense(id=item.id, description=item.description, amount=item.amount, recorded_at=item.recorded_at)
            for item in expenses
        ],
        recent_sessions=[
            RecentSession(
                id=item.id,
                session_date=item.session_date,
                session_time=item.session_time,
                location=item.location,
                attendance_count=item.attendance_count,
            )
            for item in sessions
        ],
    )
