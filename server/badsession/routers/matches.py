from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.common import MessageResponse
from badsession.schemas.match import (
    MatchCreate,
    MatchCreatedResponse,
    MatchOut,
    MatchPlayerAddedResponse,
    MatchPlayerCreate,
    MatchResultResponse,
    MatchResultUpdate,
    MatchStatusUpdate,
)
from badsession.services import matches as matches_service

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("/session/{session_id:int}", response_model=list[MatchOut])
def list_session_matches(
    session_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[MatchOut]:
    return matches_service.list_session_matches(db, session_id)


@router.get("/{match_id:int}", response_model=MatchOut)
def get_match(
    match_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MatchOut:
    return matches_service.get_match(db, match_id)


@router.post("", response_model=MatchCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_match(
    payload: MatchCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MatchCreatedResponse:
    match = matches_service.create_match(db, payload)
    return MatchCreatedResponse(
        message="Match created successfully",
        match_id=match.id,
        match_number=match.match_number,
    )


@router.post("/{match_id:int}/player", response_model=MatchPlayerAddedResponse, status_code=status.HTTP_201_CREATED)
def add_player(
    match_id: int,
    payload: MatchPlayerCreate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MatchPlayerAddedResponse:
    player = matches_service.add_player(db, match_id, payload)
    return MatchPlayerAddedResponse(message="Player added to match successfully", player_id=player.id)


@router.delete("/player/{player_id:int}", response_model=MessageResponse)
def remove_player(
    player_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MessageResponse:
    matches_service.remove_player(db, player_id)
    return MessageResponse(message="Player removed from match successfully")


@router.put("/{match_id:int}/result", response_model=MatchResultResponse)
def update_result(
    match_id: int,
    payload: MatchResultUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MatchResultResponse:
    winner = matches_service.update_result(db, match_id, payload)
    return MatchResultResponse(message="Match result updated successfully", winner=winner)


@router.put("/{match_id:int}/status", response_model=MessageResponse)
def update_status(
    match_id: int,
    payload: MatchStatusUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MessageResponse:
    matches_service.update_status(db, match_id, payload.status)
    return MessageResponse(message="Match status updated successfully")


@router.delete("/{match_id:int}", response_model=MessageResponse)
def delete_match(
    match_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> MessageResponse:
    matches_service.delete_match(db, match_id)
    return MessageResponse(message="Match deleted successfully")
