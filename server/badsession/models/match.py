from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from badsession.core.db import Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (UniqueConstraint("session_id", "match_number", name="uq_matches_session_number"),)

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    match_number = Column(Integer, nullable=False)
    match_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="Pending")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    session = relationship("PlaySession", back_populates="matches")
    result = relationship("MatchResult", uselist=False, back_populates="match", cascade="all, delete-orphan")
    players = relationship(
        "MatchPlayer",
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="MatchPlayer.team",
    )

    @property
    def team_capacity(self) -> int:
        return 2 if self.match_type in ("Doubles", "Mixed Doubles") else 1


class MatchResult(Base):
    __tablename__ = "match_results"

    id = Column(Integer, primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, unique=True)
    team_a_score = Column(Integer, nullable=False, default=0)
    team_b_score = Column(Integer, nullable=False, default=0)
    winner = Column(String(20), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    match = relationship("Match", back_populates="result")


class MatchPlayer(Base):
    __tablename__ = "match_players"
    __table_args__ = (
        UniqueConstraint("match_id", "user_id", name="uq_match_players_user"),
        UniqueConstraint("match_id", "guest_name", name="uq_match_players_guest"),
    )

    id = Column(Integer, primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    guest_name = Column(String(100), nullable=True)
    is_guest = Column(Boolean, nullable=False, default=False)
    team = Column(String(10), nullable=False)

    match = relationship("Match", back_populates="players")
    user = relationship("User")

    @property
    def name(self) -> str | None:
        if self.user is not None:
            return self.user.full_name
        return self.guest_name
