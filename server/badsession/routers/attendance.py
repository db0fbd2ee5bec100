from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from badsession.auth.deps import get_current_user
from badsession.core.db import get_db
from badsession.models.user import User
from badsession.schemas.attendance import (
    AttendanceHistoryItem,
    AttendanceOut,
    AttendanceUpdate,
    CheckInRequest,
    CheckInResponse,
)
from badsession.schemas.common import MessageResponse
from badsession.services import attendance as attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("", response_model=list[AttendanceOut])
def list_attendance(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[AttendanceOut]:
    return attendance_service.list_attendance(db)


@router.post("/check-in", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    payload: CheckInRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CheckInResponse:
    record = attendance_service.check_in(db, payload, current_user)
    message = "Guest check-in successful" if record.is_guest else "Self check-in successful"
    return CheckInResponse(message=message, attendance_id=record.id)


@router.get("/player/{player_id:int}/history", response_model=list[AttendanceHistoryItem])
def player_history(
    player_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[AttendanceHistoryItem]:
    return attendance_service.player_history(db, player_id)


@router.get("/guest/{guest_name}/history", response_model=list[AttendanceHistoryItem])
def guest_history(
    guest_name: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[AttendanceHistoryItem]:
    return attendance_service.guest_history(db, guest_name)


@router.put("/{attendance_id:int}", response_model=MessageResponse)
def update_attendance(
    attendance_id: int,
    payload: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    attendance_service.update_attendance(db, attendance_id, payload.guest_name, current_user)
    return MessageResponse(message="Attendance record updated successfully")


@router.delete("/{attendance_id:int}", response_model=MessageResponse)
def delete_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    attendance_service.delete_attendance(db, attendance_id, current_user)
    return MessageResponse(message="Attendance record deleted successfully")
