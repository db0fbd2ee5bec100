from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

MatchType = Literal["Singles", "Doubles", "Mixed Doubles"]
MatchStatus = Literal["Pending", "In Progress", "Completed"]
Team = Literal["Team A", "Team B"]


class MatchCreate(BaseModel):
    session_id: int
    match_type: MatchType


class MatchCreatedResponse(BaseModel):
    message: str
    match_id: int
    match_number: int


class MatchPlayerCreate(BaseModel):
    user_id: int | None = None
    guest_name: str | None = Field(default=None, max_length=100)
    is_guest: bool = False
    team: Team | None = None


class MatchPlayerAddedResponse(BaseModel):
    message: str
    player_id: int


class MatchResultUpdate(BaseModel):
    team_a_score: int = Field(..., ge=0)
    team_b_score: int = Field(..., ge=0)
    status: MatchStatus | None = None


class MatchResultResponse(BaseModel):
    message: str
    winner: str | None = None


class MatchStatusUpdate(BaseModel):
    status: MatchStatus


class MatchPlayerOut(BaseModel):
    id: int
    match_id: int
    user_id: int | None = None
    guest_name: str | None = None
    is_guest: bool
    team: str
    name: str | None = None


class MatchOut(BaseModel):
    id: int
    session_id: int
    match_number: int
    match_type: str
    status: str
    team_a_score: int = 0
    team_b_score: int = 0
    winner: str | None = None
    players: list[MatchPlayerOut] = Field(default_factory=list)
