from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, Field


class CheckInRequest(BaseModel):
    session_id: int | None = None
    is_self_checkin: bool = False
    guest_name: str | None = Field(default=None, max_length=100)


class CheckInResponse(BaseModel):
    message: str
    attendance_id: int


class AttendanceOut(BaseModel):
    id: int
    session_id: int
    user_id: int | None = None
    guest_name: str | None = None
    is_guest: bool
    check_in_time: datetime
    checked_in_by: int | None = None
    name: str | None = None
    checked_in_by_name: str | None = None


class AttendanceHistoryItem(BaseModel):
    id: int
    session_id: int
    session_date: date
    session_time: time
    location: str
    check_in_time: datetime


class AttendanceUpdate(BaseModel):
    guest_name: str | None = Field(default=None, max_length=100)
