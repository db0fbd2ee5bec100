from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionCreate(BaseModel):
    session_date: date
    session_time: time
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("location")
    @classmethod
    def _strip_location(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Location is required")
        return cleaned


class SessionCreatedResponse(BaseModel):
    message: str
    session_id: int


class SessionOut(BaseModel):
    id: int
    session_date: date
    session_time: time
    location: str
    created_by: int | None = None
    created_by_name: str | None = None
    created_at: datetime
    attendance_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class SessionAttendanceOut(BaseModel):
    id: int
    user_id: int | None = None
    guest_name: str | None = None
    is_guest: bool
    check_in_time: datetime
    checked_in_by: int | None = None
    name: str | None = None
    checked_in_by_name: str | None = None
    formatted_check_in_time: str


class SessionDetail(SessionOut):
    attendance: list[SessionAttendanceOut] = Field(default_factory=list)
