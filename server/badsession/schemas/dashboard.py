from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, Field


class RecentDonation(BaseModel):
    id: int
    contributor_name: str | None = None
    contributor_full_name: str | None = None
    amount: float
    donated_at: datetime


class RecentExpense(BaseModel):
    id: int
    description: str
    amount: float
    recorded_at: datetime


class RecentSession(BaseModel):
    id: int
    session_date: date
    session_time: time
    location: str
    attendance_count: int


class DashboardResponse(BaseModel):
    player_count: int
    guest_count: int
    total_donations: float
    total_expenses: float
    remaining_fund: float
    donations_30_days: float
    expenses_30_days: float
    recent_donations: list[RecentDonation] = Field(default_factory=list)
    recent_expenses: list[RecentExpense] = Field(default_factory=list)
    recent_sessions: list[RecentSession] = Field(default_factory=list)
