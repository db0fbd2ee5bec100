from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user, require_roles
from badsession.config import ROLE_ADMIN
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.session import SessionCreate, SessionCreatedResponse, SessionDetail, SessionOut
from badsession.services import sessions as sessions_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> SessionCreatedResponse:
    play_session = sessions_service.create_session(db, payload, current_user)
    return SessionCreatedResponse(message="Session created successfully", session_id=play_session.id)


@router.get("", response_model=list[SessionOut])
def list_sessions(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[SessionOut]:
    return sessions_service.list_sessions(db)


@router.get("/{session_id:int}", response_model=SessionDetail)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> SessionDetail:
    return sessions_service.get_session_detail(db, session_id)
