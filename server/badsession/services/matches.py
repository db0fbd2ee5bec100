from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from badsession.core.errors import ConflictError, NotFoundError, ValidationError
from badsession.models.match import Match, MatchPlayer, MatchResult
from badsession.models.user import User
from badsession.schemas.match import MatchCreate, MatchOut, MatchPlayerCreate, MatchPlayerOut, MatchResultUpdate
from badsession.services.sessions import get_session_or_404

logger = logging.getLogger(__name__)


def decide_winner(team_a_score: int, team_b_score: int) -> str | None:
    if team_a_score > team_b_score:
        return "Team A"
    if team_b_score > team_a_score:
        return "Team B"
    return None


def serialize_match(match: Match) -> MatchOut:
    result = match.result
    return MatchOut(
        id=match.id,
        session_id=match.session_id,
        match_number=match.match_number,
        match_type=match.match_type,
        status=match.status,
        team_a_score=result.team_a_score if result else 0,
        team_b_score=result.team_b_score if result else 0,
        winner=result.winner if result else None,
        players=[
            MatchPlayerOut(
                id=player.id,
                match_id=player.match_id,
                user_id=player.user_id,
                guest_name=player.guest_name,
                is_guest=player.is_guest,
                team=player.team,
                name=player.name,
            )
            for player in match.players
        ],
    )


def _get_match(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if not match:
        raise NotFoundError("Match")
    return match


def get_match(db: Session, match_id: int) -> MatchOut:
    return serialize_match(_get_match(db, match_id))


def list_session_matches(db: Session, session_id: int) -> list[MatchOut]:
    matches = (
        db.query(Match)
        .options(selectinload(Match.result), selectinload(Match.players).selectinload(MatchPlayer.user))
        .filter(Match.session_id == session_id)
        .order_by(Match.match_number.asc())
        .all()
    )
    return [serialize_match(match) for match in matches]


def create_match(db: Session, payload: MatchCreate) -> Match:
    get_session_or_404(db, payload.session_id)
    current_max = (
        db.query(func.coalesce(func.max(Match.match_number), 0))
        .filter(Match.session_id == payload.session_id)
        .scalar()
    )
    match = Match(
        session_id=payload.session_id,
        match_number=int(current_max or 0) + 1,
        match_type=payload.match_type,
        status="Pending",
    )
    match.result = MatchResult(team_a_score=0, team_b_score=0)
    db.add(match)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Match number already taken, please retry") from exc
    db.refresh(match)
    logger.info("match_created", extra={"match_id": match.id, "session_id": match.session_id})
    return match


def add_player(db: Session, match_id: int, payload: MatchPlayerCreate) -> MatchPlayer:
    guest_name = (payload.guest_name or "").strip()
    if not payload.team or (not payload.user_id and not guest_name):
        raise ValidationError("Missing required fields: team, and either user_id or guest_name")
    if payload.is_guest and payload.user_id:
        raise ValidationError("Guest players cannot have a user_id")
    if payload.is_guest and not guest_name:
        raise ValidationError("Guest name is required for guest players")
    if not payload.is_guest and not payload.user_id:
        raise ValidationError("user_id is required for registered players")

    match = _get_match(db, match_id)
    if payload.is_guest:
        duplicate = any(player.is_guest and player.guest_name == guest_name for player in match.players)
    else:
        if db.get(User, payload.user_id) is None:
            raise NotFoundError("User")
        duplicate = any(player.user_id == payload.user_id for player in match.players)
    if duplicate:
        raise ConflictError("Player already in this match")

    on_team = sum(1 for player in match.players if player.team == payload.team)
    if on_team >= match.team_capacity:
        raise ValidationError(f"{payload.team} already has maximum players")

    if payload.is_guest:
        player = MatchPlayer(match_id=match.id, guest_name=guest_name, is_guest=True, team=payload.team)
    else:
        player = MatchPlayer(match_id=match.id, user_id=payload.user_id, is_guest=False, team=payload.team)
    db.add(player)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Player already in this match") from exc
    db.refresh(player)
    return player


def remove_player(db: Session, player_id: int) -> None:
    player = db.get(MatchPlayer, player_id)
    if not player:
        raise NotFoundError("Player")
    db.delete(player)
    db.commit()


def update_result(db: Session, match_id: int, payload: MatchResultUpdate) -> str | None:
    match = _get_match(db, match_id)
    winner = decide_winner(payload.team_a_score, payload.team_b_score)
    if match.result is None:
        match.result = MatchResult()
    match.result.team_a_score = payload.team_a_score
    match.result.team_b_score = payload.team_b_score
    match.result.winner = winner
    if payload.status:
        match.status = payload.status
    db.commit()
    logger.info("match_result_updated", extra={"match_id": match.id, "winner": winner})
    return winner


def update_status(db: Session, match_id: int, status: str) -> Match:
    match = _get_match(db, match_id)
    match.status = status
    db.commit()
    return match


def delete_match(db: Session, match_id: int) -> None:
    match = _get_match(db, match_id)
    db.delete(match)
    db.commit()
