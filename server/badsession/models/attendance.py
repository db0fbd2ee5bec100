from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from badsession.core.db import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_attendance_session_user"),)

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    guest_name = Column(String(100), nullable=True, index=True)
    is_guest = Column(Boolean, nullable=False, default=False)
    checked_in_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    check_in_time = Column(DateTime, nullable=False, default=datetime.utcnow)

    session = relationship("PlaySession", back_populates="attendance")
    user = relationship("User", foreign_keys=[user_id])
    checked_in_by_user = relationship("User", foreign_keys=[checked_in_by])

    @property
    def display_name(self) -> str | None:
        if self.user is not None:
            return self.user.full_name
        return self.guest_name
