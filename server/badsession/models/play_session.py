from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from badsession.core.db import Base


class PlaySession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True)
    session_date = Column(Date, nullable=False, index=True)
    session_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    creator = relationship("User")
    attendance = relationship("Attendance", back_populates="session", cascade="all, delete-orphan")
    matches = relationship("Match", back_populates="session", cascade="all, delete-orphan")
